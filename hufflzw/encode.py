import argparse
import os
import sys
import time

from hufflzw import codec_adaptive, codec_huffman, codec_lzw
from hufflzw.bitstream import METHODS, write_header
from hufflzw.config import CodecConfig, load_config
from hufflzw.log_utils import setup_logging
from hufflzw.metrics import compression_ratio


def encode_bytes(data: bytes, cfg: CodecConfig) -> bytes:
    if cfg.method == "huffman":
        return codec_huffman.encode(data, buffer_size=cfg.buffer_size)
    if cfg.method == "adaptive":
        return codec_adaptive.encode(data, buffer_size=cfg.buffer_size)
    return codec_lzw.encode(data, variant=cfg.lzw_encoder, buffer_size=cfg.buffer_size)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Compress a file with Huffman, adaptive Huffman or LZW")
    ap.add_argument("--input", required=True, help="file to compress")
    ap.add_argument("--output", required=True, help="path to .hlz output")
    ap.add_argument("--method", choices=list(METHODS), help="codec (default huffman)")
    ap.add_argument("--lzw-encoder", choices=list(codec_lzw.ENCODERS))
    ap.add_argument("--config", help="YAML file with codec options")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = ap.parse_args(argv)

    setup_logging(level=args.log_level)
    try:
        cfg = load_config(args.config) if args.config else CodecConfig()
        cfg = cfg.override(method=args.method, lzw_encoder=args.lzw_encoder)

        with open(args.input, "rb") as f:
            data = f.read()

        t = time.perf_counter()
        payload = encode_bytes(data, cfg)
        elapsed = time.perf_counter() - t

        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "wb") as f:
            write_header(f, method=cfg.method, original_size=len(data))
            f.write(payload)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"[encode] wrote {args.output}")
    print(f"[encode] method={cfg.method} in={len(data)}B out={len(payload)}B "
          f"ratio={compression_ratio(data, payload):.3f} time={elapsed * 1000:.1f}ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
