import logging

import numpy as np

from hufflzw.bitpack import DEFAULT_BUFFER_SIZE, BitReader, BitWriter
from hufflzw.bitstream import read_huffman_header, write_huffman_header
from hufflzw.huff_canonical import (build_decode_trie, canonical_codes, decode_one_symbol,
                                    guard_symbol, symbol_table, two_level_tables)
from hufflzw.huffman import build_tree, code_lengths, frequency_table

logger = logging.getLogger(__name__)

DECODERS = ("bitwise", "table", "two_level")


def _tree_frequencies(freqs: np.ndarray) -> np.ndarray:
    # A tree needs two leaves: pad with phantom symbols that never occur in
    # the body. Their true frequency (0) is what the header records.
    tree_freqs = freqs.copy()
    for sym in range(len(tree_freqs)):
        if np.count_nonzero(tree_freqs) >= 2:
            break
        if tree_freqs[sym] == 0:
            tree_freqs[sym] = 1
    return tree_freqs


def encode_to(data: bytes, bw: BitWriter):
    """Write header + body + end marker for data to bw (bw is left open)."""
    freqs = frequency_table(data)
    lengths = code_lengths(build_tree(_tree_frequencies(freqs)))
    codes = canonical_codes(lengths)
    guard = guard_symbol(lengths)
    logger.debug("huffman encode: %d symbols, max length %d, guard %d x%d",
                 np.count_nonzero(lengths), lengths[guard], guard, freqs[guard])

    write_huffman_header(bw, lengths, guard, int(freqs[guard]))

    code_of = codes.tolist()
    len_of = lengths.tolist()
    for b in data:
        bw.write_bits(code_of[b], len_of[b])
    bw.write_bits(code_of[guard], len_of[guard])


def encode(data: bytes, buffer_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
    with BitWriter(buffer_size=buffer_size) as bw:
        encode_to(data, bw)
        return bw.finish()


def _read_code(br: BitReader, n: int) -> int:
    v = br.read_bits(n)
    if v < 0:
        raise EOFError("Unexpected end of bitstream")
    return v


def decode_bitwise_from(br: BitReader) -> bytes:
    h = read_huffman_header(br)
    lengths = h["lengths"]
    guard = guard_symbol(lengths)
    trie = build_decode_trie(lengths, canonical_codes(lengths))

    out = bytearray()
    seen = 0
    while True:
        sym = decode_one_symbol(trie, br)
        if sym == guard:
            seen += 1
            if seen == h["guard_count"]:
                break
        out.append(sym)
    return bytes(out)


def decode_table_from(br: BitReader) -> bytes:
    h = read_huffman_header(br)
    lengths = h["lengths"]
    guard = guard_symbol(lengths)
    n = int(lengths[guard])
    table, _ = symbol_table(lengths, canonical_codes(lengths), n)
    logger.debug("huffman decode: single table of %d entries", len(table))

    # peek + skip: an unread after an n-bit read only covers 25 bits when n > 25
    len_of = lengths.tolist()
    out = bytearray()
    seen = 0
    while True:
        pattern = br.peek_bits(n)
        if pattern < 0:
            raise EOFError("Unexpected end of bitstream")
        sym = int(table[pattern])
        if sym == guard:
            seen += 1
            if seen == h["guard_count"]:
                break
        out.append(sym)
        br.skip_bits(len_of[sym])
    return bytes(out)


def decode_two_level_from(br: BitReader) -> bytes:
    h = read_huffman_header(br)
    lengths = h["lengths"]
    guard = guard_symbol(lengths)
    t = two_level_tables(lengths, canonical_codes(lengths), int(lengths[guard]))
    logger.debug("huffman decode: main table 2^%d, %d subtables", t["m"], len(t["subtables"]))

    m, limit = t["m"], t["limit"]
    table = t["table"].tolist()
    subtables = [s.tolist() for s in t["subtables"]]
    back = t["back"].tolist()
    out = bytearray()
    seen = 0
    while True:
        pattern = _read_code(br, m)
        sym = table[pattern]
        if pattern < limit:   # internal node: sym holds the subtree height
            sym = subtables[pattern][_read_code(br, sym)]
        if sym == guard:
            seen += 1
            if seen == h["guard_count"]:
                break
        out.append(sym)
        br.unread_bits(back[sym])
    return bytes(out)


_DECODE_FROM = {
    "bitwise": decode_bitwise_from,
    "table": decode_table_from,
    "two_level": decode_two_level_from,
}


def decode(payload: bytes, method: str = "two_level") -> bytes:
    if method not in _DECODE_FROM:
        raise ValueError(f"Unknown Huffman decoder: {method} (choose from {', '.join(DECODERS)})")
    with BitReader.from_bytes(payload) as br:
        return _DECODE_FROM[method](br)


def decode_bitwise(payload: bytes) -> bytes:
    return decode(payload, "bitwise")


def decode_table(payload: bytes) -> bytes:
    return decode(payload, "table")


def decode_two_level(payload: bytes) -> bytes:
    return decode(payload, "two_level")
