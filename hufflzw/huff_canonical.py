from __future__ import annotations

from typing import List, Tuple

import numpy as np

MAX_CODE_LEN = 31


def guard_symbol(lengths) -> int:
    """First symbol with the longest code; doubles as end-of-stream marker."""
    return int(np.argmax(lengths))


def length_histogram(lengths, max_len: int = MAX_CODE_LEN) -> np.ndarray:
    lengths = np.asarray(lengths)
    if lengths.max(initial=0) > max_len:
        raise ValueError(f"Code length > {max_len}!")
    return np.bincount(lengths[lengths > 0], minlength=max_len + 1)[:max_len + 1]


def canonical_codes(lengths) -> np.ndarray:
    """
    Canonical code values from code lengths alone.

    On every level the leaves sit to the right of the internal nodes, so
    the first leaf of level L-1 is numbered (first[L] + count[L]) // 2.
    Symbols of equal length get consecutive codes in symbol order.
    """
    leaves = length_histogram(lengths)
    first = np.zeros(MAX_CODE_LEN + 1, dtype=np.int64)
    for L in range(MAX_CODE_LEN, 0, -1):
        first[L - 1] = (first[L] + leaves[L]) // 2

    codes = np.zeros(len(lengths), dtype=np.int64)
    for i, L in enumerate(lengths):
        if L > 0:
            codes[i] = first[L]
            first[L] += 1
    return codes


def build_decode_trie(lengths, codes):
    """
    Build a binary trie for decoding bits -> symbol.
    """
    root = {}
    for sym, L in enumerate(lengths):
        if L == 0:
            continue
        code = int(codes[sym])
        cur = root
        for i in range(int(L) - 1, -1, -1):
            bit = (code >> i) & 1
            cur = cur.setdefault(bit, {})
        cur["sym"] = sym
    return root


def decode_one_symbol(trie, bitreader) -> int:
    cur = trie
    while "sym" not in cur:
        b = bitreader.read_bit()
        if b < 0:
            raise EOFError("Unexpected end of bitstream")
        if b not in cur:
            raise ValueError("Invalid Huffman code (corrupt stream)")
        cur = cur[b]
    return cur["sym"]


def symbol_table(lengths, codes, n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Direct lookup table over all n-bit patterns.

    Returns (table, back): table[pattern] is the symbol whose code prefixes
    the pattern, back[sym] the n - length slack bits to give back.
    """
    table = np.zeros(1 << n, dtype=np.uint8)
    back = np.zeros(len(lengths), dtype=np.int64)
    for sym, L in enumerate(lengths):
        if L == 0:
            continue
        d = n - int(L)
        back[sym] = d
        lo = int(codes[sym]) << d
        table[lo:lo + (1 << d)] = sym
    return table, back


def level_heights(leaves, level: int) -> List[int]:
    """
    Heights of the internal nodes on `level` of the canonical tree, left to right.

    leaves[L] is the number of leaves on level L and the deepest level is
    len(leaves) - 1. Internal nodes come first on each level and node j of
    level i has the children 2j and 2j + 1 on level i + 1.
    """
    depth = len(leaves) - 1
    nodes = [0] * (depth + 1)
    nodes[depth] = int(leaves[depth])
    for L in range(depth, level, -1):
        nodes[L - 1] = nodes[L] // 2 + int(leaves[L - 1])

    heights = [0] * nodes[depth]
    for L in range(depth - 1, level - 1, -1):
        internal = nodes[L] - int(leaves[L])
        heights = ([max(heights[2 * j], heights[2 * j + 1]) + 1 for j in range(internal)]
                   + [0] * int(leaves[L]))
    return heights[:nodes[level] - int(leaves[level])]


def two_level_tables(lengths, codes, n: int):
    """
    Main table over m = (n + 1) // 2 bits plus one small table per internal
    node on level m, each only as deep as the subtree below that node.

    Returns dict(m, table, limit, subtables, back). Patterns below `limit`
    lead to internal nodes and their table entry is the subtree height.
    """
    m = (n + 1) // 2
    leaves = np.zeros(n + 1, dtype=np.int64)
    for L in lengths:
        if L > 0:
            leaves[L] += 1

    heights = level_heights(leaves, m)
    limit = len(heights)

    table = np.zeros(1 << m, dtype=np.uint8)
    table[:limit] = heights
    subtables = [np.zeros(1 << h, dtype=np.uint8) for h in heights]
    back = np.zeros(len(lengths), dtype=np.int64)

    for sym, L in enumerate(lengths):
        L = int(L)
        if L == 0:
            continue
        code = int(codes[sym])
        if L <= m:
            d = m - L
            back[sym] = d
            lo = code << d
            table[lo:lo + (1 << d)] = sym
        else:
            d1 = L - m
            prefix = code >> d1
            d2 = heights[prefix] - d1
            back[sym] = d2
            lo = (code & ((1 << d1) - 1)) << d2
            subtables[prefix][lo:lo + (1 << d2)] = sym

    return {"m": m, "table": table, "limit": limit, "subtables": subtables, "back": back}
