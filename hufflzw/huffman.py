from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import List, Union

import numpy as np

NUM_SYMBOLS = 256


@dataclass
class Leaf:
    sym: int
    freq: int


@dataclass
class Internal:
    freq: int
    left: "Node" = field(repr=False)
    right: "Node" = field(repr=False)


Node = Union[Leaf, Internal]


def frequency_table(data: bytes) -> np.ndarray:
    return np.bincount(np.frombuffer(data, dtype=np.uint8), minlength=NUM_SYMBOLS).astype(np.int64)


def stream_frequency(f, chunk_size: int = 1 << 16) -> np.ndarray:
    """Count byte frequencies of a binary file object, reading it to the end."""
    freqs = np.zeros(NUM_SYMBOLS, dtype=np.int64)
    while True:
        chunk = f.read(chunk_size)
        if not chunk:
            return freqs
        freqs += frequency_table(chunk)


def build_tree(freqs) -> Node:
    # the counter keeps heapq away from comparing nodes on equal frequency
    pq = [(int(f), i, Leaf(sym=i, freq=int(f))) for i, f in enumerate(freqs) if f > 0]
    if len(pq) < 2:
        raise ValueError("Too few symbols: a Huffman tree needs at least two")
    heapq.heapify(pq)
    order = len(freqs)
    while len(pq) > 1:
        fa, _, a = heapq.heappop(pq)
        fb, _, b = heapq.heappop(pq)
        heapq.heappush(pq, (fa + fb, order, Internal(freq=fa + fb, left=a, right=b)))
        order += 1
    return pq[0][2]


def code_lengths(root: Node, num_symbols: int = NUM_SYMBOLS) -> np.ndarray:
    lengths = np.zeros(num_symbols, dtype=np.int64)
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Leaf):
            lengths[node.sym] = depth
        else:
            stack.append((node.right, depth + 1))
            stack.append((node.left, depth + 1))
    return lengths


def build_codebook(root: Node, num_symbols: int = NUM_SYMBOLS) -> List[str]:
    """'0'/'1' code strings read off the tree (0 = left); None for absent symbols."""
    codes = [None] * num_symbols
    stack = [(root, "")]
    while stack:
        node, prefix = stack.pop()
        if isinstance(node, Leaf):
            codes[node.sym] = prefix
        else:
            stack.append((node.right, prefix + "1"))
            stack.append((node.left, prefix + "0"))
    return codes


def string_codes(freqs) -> List[str]:
    return build_codebook(build_tree(freqs), len(freqs))
