import argparse
import os
import sys
import time

from hufflzw import codec_adaptive, codec_huffman, codec_lzw
from hufflzw.bitstream import read_header
from hufflzw.config import CodecConfig, load_config
from hufflzw.log_utils import setup_logging


def decode_bytes(payload: bytes, method: str, cfg: CodecConfig) -> bytes:
    if method == "huffman":
        return codec_huffman.decode(payload, cfg.huffman_decoder)
    if method == "adaptive":
        return codec_adaptive.decode(payload)
    return codec_lzw.decode(payload, cfg.lzw_decoder)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Decompress a .hlz file")
    ap.add_argument("--input", required=True, help="path to .hlz")
    ap.add_argument("--output", required=True, help="path to decompressed output")
    ap.add_argument("--huffman-decoder", choices=list(codec_huffman.DECODERS))
    ap.add_argument("--lzw-decoder", choices=list(codec_lzw.DECODERS))
    ap.add_argument("--config", help="YAML file with codec options")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = ap.parse_args(argv)

    setup_logging(level=args.log_level)
    try:
        cfg = load_config(args.config) if args.config else CodecConfig()
        cfg = cfg.override(huffman_decoder=args.huffman_decoder, lzw_decoder=args.lzw_decoder)

        with open(args.input, "rb") as f:
            h = read_header(f)
            payload = f.read()

        t = time.perf_counter()
        data = decode_bytes(payload, h["method"], cfg)
        elapsed = time.perf_counter() - t
        if len(data) != h["original_size"]:
            raise ValueError(f"Malformed stream: decoded {len(data)}B, header says {h['original_size']}B")

        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "wb") as f:
            f.write(data)
    except (OSError, ValueError, EOFError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"[decode] wrote {args.output} method={h['method']} size={len(data)}B time={elapsed * 1000:.1f}ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
