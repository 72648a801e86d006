import numpy as np


def compression_ratio(original: bytes, compressed: bytes) -> float:
    if len(compressed) == 0:
        return float("inf") if len(original) else 1.0
    return len(original) / len(compressed)


def bits_per_byte(original: bytes, compressed: bytes) -> float:
    if len(original) == 0:
        return 0.0
    return 8.0 * len(compressed) / len(original)


def entropy(data: bytes) -> float:
    """Order-0 Shannon entropy in bits per byte."""
    if len(data) == 0:
        return 0.0
    counts = np.bincount(np.frombuffer(data, dtype=np.uint8), minlength=256).astype(np.float64)
    p = counts[counts > 0] / len(data)
    return float(-np.sum(p * np.log2(p)))
