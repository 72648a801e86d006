import logging
from typing import List

import numpy as np

from hufflzw.bitpack import DEFAULT_BUFFER_SIZE, BitReader, BitWriter

logger = logging.getLogger(__name__)

MIN_BITS = 9
MAX_BITS = 17
WIDEN = 256                      # escape: next code is one bit wider
FIRST_CODE = 257
MAX_CODE = (1 << MAX_BITS) - 1   # dictionary freezes here

ENCODERS = ("pairs", "strings")
DECODERS = ("strings", "stack")


class _CodeWriter:
    """Writes codes at the current width, widening before a code that does not fit."""

    def __init__(self, bw: BitWriter):
        self.bw = bw
        self.bits = MIN_BITS
        self.threshold = 1 << MIN_BITS

    def _widen(self):
        self.bw.write_bits(WIDEN, self.bits)
        self.bits += 1
        logger.debug("lzw: code width -> %d", self.bits)

    def write(self, code: int):
        while code >= self.threshold:
            self._widen()
            self.threshold *= 2
        self.bw.write_bits(code, self.bits)


class _RecomputingCodeWriter(_CodeWriter):
    def write(self, code: int):
        while code >= 1 << self.bits:
            self._widen()
        self.bw.write_bits(code, self.bits)


def encode_pairs_to(data: bytes, bw: BitWriter):
    """Dictionary keyed by (code of the match, next byte)."""
    if not data:
        return
    out = _CodeWriter(bw)
    table = {}
    next_code = FIRST_CODE
    code = data[0]
    for c in data[1:]:
        hit = table.get((code, c))
        if hit is not None:
            code = hit
            continue
        out.write(code)
        if next_code < MAX_CODE:
            table[(code, c)] = next_code
            next_code += 1
        code = c
    out.write(code)


def encode_strings_to(data: bytes, bw: BitWriter):
    """Dictionary keyed by the matched byte strings."""
    if not data:
        return
    out = _RecomputingCodeWriter(bw)
    table = {}
    next_code = FIRST_CODE
    s = data[:1]
    code = data[0]
    for i in range(1, len(data)):
        sc = s + data[i:i + 1]
        hit = table.get(sc)
        if hit is not None:
            code = hit
            s = sc
            continue
        out.write(code)
        if next_code < MAX_CODE:
            table[sc] = next_code
            next_code += 1
        s = data[i:i + 1]
        code = data[i]
    out.write(code)


class _CodeReader:
    def __init__(self, br: BitReader):
        self.br = br
        self.bits = MIN_BITS

    def read(self) -> int:
        """Next code, or -1 once the stream is exhausted."""
        code = self.br.read_bits(self.bits)
        while code == WIDEN:
            self.bits += 1
            if self.bits > MAX_BITS:
                raise ValueError(f"Code width beyond {MAX_BITS} bits")
            code = self.br.read_bits(self.bits)
            if code < 0:
                raise EOFError("Unexpected end of bitstream after width escape")
        return code


def decode_strings_from(br: BitReader) -> bytes:
    codes = _CodeReader(br)
    code = codes.read()
    if code < 0:
        return b""
    if code > 255:
        raise ValueError(f"Invalid first code: {code}")

    table = {}
    next_code = FIRST_CODE
    cur = bytes([code])
    out = bytearray(cur)
    while True:
        code = codes.read()
        if code < 0:
            break
        prev = cur
        if code < 256:
            cur = bytes([code])
        elif code < next_code:
            cur = table[code]
        elif code == next_code:
            cur = prev + prev[:1]   # the code being defined right now
        else:
            raise ValueError(f"Invalid code: {code}")
        out += cur
        if next_code < MAX_CODE:
            table[next_code] = prev + cur[:1]
            next_code += 1
    return bytes(out)


def decode_stack_from(br: BitReader) -> bytes:
    """Codes unwound through parent links onto a stack, no string building."""
    codes = _CodeReader(br)
    code = codes.read()
    if code < 0:
        return b""
    if code > 255:
        raise ValueError(f"Invalid first code: {code}")

    parent = np.full(MAX_CODE, -1, dtype=np.int32)
    char = np.zeros(MAX_CODE, dtype=np.uint8)
    char[:256] = np.arange(256, dtype=np.uint8)

    stack: List[int] = []
    next_code = FIRST_CODE
    prev = code
    first = code
    out = bytearray([code])
    while True:
        code = codes.read()
        if code < 0:
            break
        if code < next_code and (code < 256 or code >= FIRST_CODE):
            node = code
        elif code == next_code:
            node = prev
            stack.append(first)
        else:
            raise ValueError(f"Invalid code: {code}")

        while node != -1:
            stack.append(int(char[node]))
            node = int(parent[node])

        first = stack[-1]
        while stack:
            out.append(stack.pop())

        if next_code < MAX_CODE:
            char[next_code] = first
            parent[next_code] = prev
            next_code += 1
        prev = code
    return bytes(out)


_ENCODE_TO = {"pairs": encode_pairs_to, "strings": encode_strings_to}
_DECODE_FROM = {"strings": decode_strings_from, "stack": decode_stack_from}


def encode(data: bytes, variant: str = "pairs", buffer_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
    if variant not in _ENCODE_TO:
        raise ValueError(f"Unknown LZW encoder: {variant} (choose from {', '.join(ENCODERS)})")
    with BitWriter(buffer_size=buffer_size) as bw:
        _ENCODE_TO[variant](data, bw)
        return bw.finish()


def decode(payload: bytes, method: str = "stack") -> bytes:
    if method not in _DECODE_FROM:
        raise ValueError(f"Unknown LZW decoder: {method} (choose from {', '.join(DECODERS)})")
    with BitReader.from_bytes(payload) as br:
        return _DECODE_FROM[method](br)


def encode_codes(data: bytes, first_code: int = 256) -> List[int]:
    """Plain LZW code list (textbook numbering, no width escapes)."""
    if not data:
        return []
    table = {}
    next_code = first_code
    out = []
    code = data[0]
    for c in data[1:]:
        hit = table.get((code, c))
        if hit is not None:
            code = hit
            continue
        out.append(code)
        table[(code, c)] = next_code
        next_code += 1
        code = c
    out.append(code)
    return out


def decode_codes(codes: List[int], first_code: int = 256) -> bytes:
    if not codes:
        return b""
    table = {}
    next_code = first_code
    cur = bytes([codes[0]])
    out = bytearray(cur)
    for code in codes[1:]:
        prev = cur
        if code < 256:
            cur = bytes([code])
        elif code < next_code:
            cur = table[code]
        elif code == next_code:
            cur = prev + prev[:1]
        else:
            raise ValueError(f"Invalid code: {code}")
        out += cur
        table[next_code] = prev + cur[:1]
        next_code += 1
    return bytes(out)
