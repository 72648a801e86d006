import io

EOF = -1
DEFAULT_BUFFER_SIZE = 4096

_MASK32 = 0xFFFFFFFF


class StreamClosedError(ValueError):
    pass


def _mask(n: int) -> int:
    return (1 << n) - 1


def to_bit_string(data: bytes) -> str:
    """Bytes as groups of eight binary digits, e.g. bytes([15, 160]) -> "00001111 10100000"."""
    return " ".join(format(b, "08b") for b in data)


class BitWriter:
    """
    Buffered writer of an arbitrary number of bits (MSB-first).

    Bits collect in a small bit buffer, full bytes move to a byte buffer of
    buffer_size bytes, and the byte buffer goes to the sink whenever it is
    full, on flush() and on close().
    """

    def __init__(self, sink=None, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError(f"buffer size ({buffer_size}) <= 0")
        self._sink = sink if sink is not None else io.BytesIO()
        self._buf = bytearray(buffer_size)
        self._pos = 0
        self._bits = 0
        self._nbits = 0  # valid (rightmost) bits in _bits, 0..7 between calls
        self._count = 0

    @classmethod
    def to_file(cls, path, buffer_size: int = DEFAULT_BUFFER_SIZE):
        return cls(open(path, "wb"), buffer_size)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def closed(self) -> bool:
        return self._sink is None

    @property
    def bit_count(self) -> int:
        """Bits written so far, padding excluded."""
        return self._count

    def _check_open(self):
        if self._sink is None:
            raise StreamClosedError("The stream is closed!")

    def _flush_buffer(self):
        self._check_open()
        if self._pos > 0:
            self._sink.write(bytes(self._buf[:self._pos]))
            self._pos = 0

    def _put_byte(self, b: int):
        if self._pos >= len(self._buf):
            self._flush_buffer()
        self._buf[self._pos] = b
        self._pos += 1

    def write_bit(self, bit: int):
        self._check_open()
        self._bits = (self._bits << 1) | (bit & 1)
        self._nbits += 1
        self._count += 1
        if self._nbits == 8:
            self._put_byte(self._bits)
            self._bits = 0
            self._nbits = 0

    def write_0_bit(self):
        self.write_bit(0)

    def write_1_bit(self):
        self.write_bit(1)

    def write_byte(self, b: int):
        self.write_bits(b, 8)

    def write_bits(self, value: int, n: int):
        """Write the n (0..32) rightmost bits of value."""
        self._check_open()
        if n < 0 or n > 32:
            raise ValueError(f"Cannot write {n} bits!")
        acc = (self._bits << n) | (value & _mask(n))
        nbits = self._nbits + n
        while nbits >= 8:
            nbits -= 8
            self._put_byte((acc >> nbits) & 0xFF)
        self._bits = acc & _mask(nbits)
        self._nbits = nbits
        self._count += n

    def write_significant_bits(self, value: int):
        """Write the binary digits of value without leading zeros (0 -> one 0 bit)."""
        if value < 0:
            raise ValueError(f"negative value: {value}")
        n = max(1, value.bit_length())
        while n > 32:
            n -= 32
            self.write_bits(value >> n, 32)
        self.write_bits(value, n)

    def missing_bits(self) -> int:
        self._check_open()
        return 0 if self._nbits == 0 else 8 - self._nbits

    def flush(self):
        self._check_open()
        if self._nbits > 0:
            self._put_byte((self._bits << (8 - self._nbits)) & 0xFF)
            self._bits = 0
            self._nbits = 0
        self._flush_buffer()
        self._sink.flush()

    def close(self):
        if self._sink is None:
            return
        try:
            self.flush()
        finally:
            self._sink.close()
            self._sink = None
            self._buf = None

    def finish(self) -> bytes:
        """Pad, close, and return everything written to an in-memory sink."""
        self.flush()
        if not isinstance(self._sink, io.BytesIO):
            raise TypeError("finish() needs an in-memory sink")
        data = self._sink.getvalue()
        self.close()
        return data


class BitReader:
    """
    Buffered reader of an arbitrary number of bits (MSB-first).

    Since -1 marks end of stream, at most 31 bits are read at a time. Bits
    can also be peeked and skipped. Right after a read, some or all of the
    bits just read can be unread (pushed back to the front of the stream);
    unread_size() tells how many. If more than 25 bits were read, at least
    25 of them can be unread, but not necessarily all. Unread is illegal
    after a peek or a skip. Arbitrary bits can be inserted at the front as
    long as the 32-bit buffer has room, see insert_size().
    """

    def __init__(self, source, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if source is None:
            raise ValueError("source is None")
        if buffer_size <= 0:
            raise ValueError(f"A buffer size of {buffer_size} is illegal!")
        self._src = source
        self._size = buffer_size
        self._chunk = b""
        self._pos = 0
        self._bits = 0    # 32-bit register
        self._nbits = 0   # valid (rightmost) bits, 0..32
        self._unread = 0

    @classmethod
    def from_bytes(cls, data: bytes):
        return cls(io.BytesIO(data), max(1, min(DEFAULT_BUFFER_SIZE, len(data))))

    @classmethod
    def from_file(cls, path, buffer_size: int = DEFAULT_BUFFER_SIZE):
        return cls(open(path, "rb"), buffer_size)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def closed(self) -> bool:
        return self._src is None

    def _check_open(self):
        if self._src is None:
            raise StreamClosedError("The stream is closed!")

    def _refill(self) -> bool:
        data = self._src.read(self._size)
        if not data:
            self._chunk = b""
            self._pos = 0
            self._unread = 0
            return False
        self._chunk = data
        self._pos = 0
        return True

    def _load_byte(self) -> bool:
        """Shift one more byte into the bit register."""
        if self._pos >= len(self._chunk) and not self._refill():
            return False
        self._bits = ((self._bits << 8) | self._chunk[self._pos]) & _MASK32
        self._pos += 1
        self._nbits += 8
        return True

    def read_bit(self) -> int:
        self._check_open()
        if self._nbits <= 0 and not self._load_byte():
            return EOF
        self._unread = 1
        self._nbits -= 1
        return (self._bits >> self._nbits) & 1

    def read_byte(self) -> int:
        return self.read_bits(8)

    def read_bits(self, n: int) -> int:
        self._check_open()
        if n < 0 or n > 31:
            raise ValueError(f"Cannot read {n} bits!")

        if n <= 25:
            # no overflow possible: at most 24 + 8 bits in the register
            while self._nbits < n:
                if not self._load_byte():
                    return EOF
            self._nbits -= n
            self._unread = n
            return (self._bits >> self._nbits) & _mask(n)

        while self._nbits < 25:
            if not self._load_byte():
                return EOF

        if n <= self._nbits:
            self._nbits -= n
            self._unread = n
            return (self._bits >> self._nbits) & _mask(n)

        # 25 <= nbits < n: one more byte overflows the register, the bits
        # pushed out survive only in the copy and cannot be unread
        copy = self._bits & _mask(self._nbits)
        if not self._load_byte():
            return EOF
        diff = n - (self._nbits - 8)
        self._nbits = 8 - diff
        self._unread = diff + 24
        return (copy << diff) | ((self._bits >> self._nbits) & _mask(diff))

    def peek_bit(self) -> int:
        self._check_open()
        self._unread = 0
        if self._nbits <= 0 and not self._load_byte():
            return EOF
        return (self._bits >> (self._nbits - 1)) & 1

    def peek_bits(self, n: int) -> int:
        self._check_open()
        if n < 0 or n > 31:
            raise ValueError(f"Cannot peek {n} bits!")
        self._unread = 0

        if n <= 25:
            while self._nbits < n:
                if not self._load_byte():
                    return EOF
            return (self._bits >> (self._nbits - n)) & _mask(n)

        while self._nbits < 25:
            if not self._load_byte():
                return EOF
        if n <= self._nbits:
            return (self._bits >> (self._nbits - n)) & _mask(n)

        # the missing bits are taken from the next byte without consuming it
        if self._pos >= len(self._chunk) and not self._refill():
            return EOF
        diff = n - self._nbits
        nxt = self._chunk[self._pos]
        return ((self._bits << diff) | (nxt >> (8 - diff))) & _mask(n)

    def skip_bits(self, n: int) -> int:
        """Skip n bits; returns the number of bits actually skipped."""
        self._check_open()
        self._unread = 0
        if n <= 0:
            return 0
        if n <= self._nbits:
            self._nbits -= n
            return n

        skipped = self._nbits
        self._nbits = 0
        need = n - skipped
        while need >= 8:
            if self._pos >= len(self._chunk) and not self._refill():
                return skipped
            take = min(need >> 3, len(self._chunk) - self._pos)
            self._pos += take
            skipped += take << 3
            need -= take << 3
        if need:
            if not self._load_byte():
                return skipped
            self._nbits -= need
            skipped += need
        return skipped

    def unread_size(self) -> int:
        self._check_open()
        return self._unread

    def unread_bit(self):
        self.unread_bits(1)

    def unread_bits(self, n: int):
        self._check_open()
        if n < 0 or n > self._unread:
            raise ValueError(f"Illegal number of bits to unread: {n} (at most {self._unread})")
        self._unread -= n
        self._nbits += n

    def unread_all(self):
        """Push back every bit the last read allows."""
        self.unread_bits(self.unread_size())

    def available(self) -> int:
        """
        Bits left in the stream: buffered bits, the rest of the current chunk
        and, for a seekable source, whatever it still holds. After a read
        returned EOF this tells how many bits (possibly 0) are really left.
        """
        self._check_open()
        left = len(self._chunk) - self._pos
        if self._src.seekable():
            here = self._src.tell()
            left += self._src.seek(0, io.SEEK_END) - here
            self._src.seek(here)
        return self._nbits + 8 * left

    def insert_size(self) -> int:
        self._check_open()
        return 32 - self._nbits

    def insert_bit(self, bit: int):
        self.insert_bits(bit, 1)

    def insert_bits(self, value: int, n: int):
        self._check_open()
        if n < 0 or n > 32 - self._nbits:
            raise ValueError(f"Cannot insert {n} bits (room for {32 - self._nbits})")
        if n == 32:
            self._bits = value & _MASK32
        else:
            low = _mask(self._nbits)
            self._bits = (((self._bits & ~low) << n)
                          | ((value & _mask(n)) << self._nbits)
                          | (self._bits & low)) & _MASK32
        self._unread = max(0, self._unread - n)
        self._nbits += n

    def close(self):
        if self._src is None:
            return
        try:
            self._src.close()
        finally:
            self._src = None
            self._chunk = b""
