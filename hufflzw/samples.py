import numpy as np

ALPHABET = b"etaoinshrdlu ETAOINSHRDLU.,\n"


def skewed_text(size: int = 65536, seed: int = 0, zipf_a: float = 1.3) -> bytes:
    """Letters drawn with Zipf-like frequencies, roughly like English text."""
    rng = np.random.default_rng(seed)
    ranks = np.arange(1, len(ALPHABET) + 1, dtype=np.float64)
    p = ranks ** -zipf_a
    p /= p.sum()
    idx = rng.choice(len(ALPHABET), size=size, p=p)
    return np.frombuffer(ALPHABET, dtype=np.uint8)[idx].tobytes()


def random_bytes(size: int = 65536, seed: int = 0) -> bytes:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=size, dtype=np.uint8).tobytes()


def repetitive(size: int = 65536, seed: int = 0, words: int = 16) -> bytes:
    """A small vocabulary of random words repeated in random order."""
    rng = np.random.default_rng(seed)
    vocab = [rng.integers(97, 123, size=rng.integers(3, 9), dtype=np.uint8).tobytes() + b" "
             for _ in range(words)]
    out = bytearray()
    while len(out) < size:
        out += vocab[rng.integers(0, words)]
    return bytes(out[:size])


CORPORA = {
    "skewed_text": skewed_text,
    "random": random_bytes,
    "repetitive": repetitive,
}


def save_sample(path, kind: str = "skewed_text", size: int = 65536, seed: int = 0):
    data = CORPORA[kind](size=size, seed=seed)
    with open(path, "wb") as f:
        f.write(data)
    return path


if __name__ == "__main__":
    for kind in CORPORA:
        p = save_sample(f"sample_{kind}.bin", kind)
        print("Saved:", p)
