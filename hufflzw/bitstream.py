import struct

import numpy as np

from hufflzw.bitpack import BitReader, BitWriter, EOF

MAGIC = b"HLZW"   # 4 bytes
VERSION = 1       # 1 byte

METHODS = {"huffman": 1, "adaptive": 2, "lzw": 3}
METHOD_NAMES = {v: k for k, v in METHODS.items()}

# Container header (little-endian):
# magic(4) version(1) method(1) original_size(u32)
HEADER_FMT = "<4sBBI"
HEADER_SIZE = struct.calcsize(HEADER_FMT)

NUM_SYMBOLS = 256


def write_header(f, *, method: str, original_size: int):
    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}")
    if not 0 <= original_size <= 0xFFFFFFFF:
        raise ValueError(f"original size {original_size} does not fit the u32 header field")
    f.write(struct.pack(HEADER_FMT, MAGIC, VERSION, METHODS[method], original_size))


def read_header(f):
    data = f.read(HEADER_SIZE)
    if len(data) != HEADER_SIZE:
        raise ValueError("Malformed stream: header too short")
    magic, ver, method, original_size = struct.unpack(HEADER_FMT, data)
    if magic != MAGIC:
        raise ValueError("Bad magic number (not HLZW)")
    if ver != VERSION:
        raise ValueError(f"Unsupported version: {ver}")
    if method not in METHOD_NAMES:
        raise ValueError(f"Unknown method id: {method}")
    return {"method": METHOD_NAMES[method], "original_size": original_size}


# Static Huffman header (bit level, MSB-first):
# k(3)                          bits needed for the largest code length
# 256 x [0] | [1 length(k)]     presence flag, then the length
# s(5)                          bits needed for the guard frequency
# guard_freq(s)

def write_huffman_header(bw: BitWriter, lengths, guard: int, guard_freq: int):
    lengths = [int(L) for L in lengths]
    k = lengths[guard].bit_length()
    if k > 7:
        raise ValueError(f"code length {lengths[guard]} does not fit the header")
    s = int(guard_freq).bit_length()
    if s > 31:
        raise ValueError(f"guard frequency {guard_freq} does not fit the header")

    bw.write_bits(k, 3)
    for L in lengths:
        if L == 0:
            bw.write_0_bit()
        else:
            bw.write_bits(L | 1 << k, k + 1)   # the leading 1 is the presence flag
    bw.write_bits(s, 5)
    bw.write_bits(int(guard_freq), s)


def read_huffman_header(br: BitReader):
    """
    Returns dict(lengths, guard_count) where guard_count is the number of
    times the guard symbol occurs in the body, end marker included.
    """
    k = br.read_bits(3)
    if k == EOF:
        raise EOFError("Malformed stream: Huffman header truncated")
    lengths = np.zeros(NUM_SYMBOLS, dtype=np.int64)
    for i in range(NUM_SYMBOLS):
        flag = br.read_bit()
        if flag == EOF:
            raise EOFError("Malformed stream: Huffman header truncated")
        if flag == 1:
            L = br.read_bits(k)
            if L == EOF:
                raise EOFError("Malformed stream: Huffman header truncated")
            lengths[i] = L
    s = br.read_bits(5)
    freq = br.read_bits(s) if s != EOF else EOF
    if freq == EOF:
        raise EOFError("Malformed stream: Huffman header truncated")
    if np.count_nonzero(lengths) < 2:
        raise ValueError("Malformed stream: fewer than two symbols in header")
    return {"lengths": lengths, "guard_count": freq + 1}
