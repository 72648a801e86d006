import argparse
import os
import time

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from hufflzw import codec_adaptive, codec_huffman, codec_lzw
from hufflzw.metrics import bits_per_byte, entropy
from hufflzw.samples import CORPORA

CODECS = {
    "huffman": (codec_huffman.encode, codec_huffman.decode),
    "adaptive": (codec_adaptive.encode, codec_adaptive.decode),
    "lzw": (codec_lzw.encode, codec_lzw.decode),
}


def measure(size: int = 32768, seed: int = 0):
    """bits/byte and round-trip times for every codec on every corpus."""
    rows = []
    for kind, make in CORPORA.items():
        data = make(size=size, seed=seed)
        for name, (enc, dec) in CODECS.items():
            t0 = time.perf_counter()
            payload = enc(data)
            t1 = time.perf_counter()
            back = dec(payload)
            t2 = time.perf_counter()
            if back != data:
                raise RuntimeError(f"{name} failed to round-trip {kind}")
            rows.append(dict(corpus=kind, codec=name, entropy=entropy(data),
                             bpb=bits_per_byte(data, payload),
                             enc_ms=(t1 - t0) * 1000, dec_ms=(t2 - t1) * 1000))
    return rows


def plot(rows, path):
    corpora = list(CORPORA)
    codecs = list(CODECS)
    x = np.arange(len(corpora))
    w = 0.8 / len(codecs)

    plt.figure(figsize=(7, 3.5))
    for i, name in enumerate(codecs):
        vals = [next(r["bpb"] for r in rows if r["corpus"] == c and r["codec"] == name) for c in corpora]
        plt.bar(x + i * w, vals, width=w, label=name)
    ent = [next(r["entropy"] for r in rows if r["corpus"] == c) for c in corpora]
    plt.scatter(x + w * (len(codecs) - 1) / 2, ent, color="k", marker="_", s=400, label="entropy")

    plt.xticks(x + w * (len(codecs) - 1) / 2, corpora)
    plt.ylabel("bits per byte")
    plt.legend(fontsize=8)
    plt.tight_layout()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    plt.savefig(path, dpi=200)
    plt.close()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--size", type=int, default=32768)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--output", default="results/fig_ratios.png")
    args = ap.parse_args()

    rows = measure(args.size, args.seed)
    for r in rows:
        print(f"[plot_ratios] {r['corpus']:>12} {r['codec']:>8}: {r['bpb']:.3f} bpb "
              f"(H={r['entropy']:.3f}) enc={r['enc_ms']:.0f}ms dec={r['dec_ms']:.0f}ms")
    plot(rows, args.output)
    print(f"[plot_ratios] wrote {args.output}")


if __name__ == "__main__":
    main()
