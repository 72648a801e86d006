import io

import numpy as np
import pytest

from hufflzw import codec_huffman
from hufflzw.bitpack import BitReader, BitWriter
from hufflzw.bitstream import (HEADER_SIZE, read_header, read_huffman_header, write_header,
                               write_huffman_header)
from hufflzw.samples import random_bytes, skewed_text

FIB_TEXT = b"ABBCCCDDDDDEEEEEEEEFFFFFFFFFFFFFGGGGGGGGGGGGGGGGGGGGG"


@pytest.fixture(params=codec_huffman.DECODERS)
def decoder(request):
    return request.param


@pytest.fixture(scope="module")
def fibonacci_payload():
    # Fibonacci counts over 28 symbols give a chain-shaped tree 27 levels deep
    counts = [1, 1]
    while len(counts) < 28:
        counts.append(counts[-1] + counts[-2])
    syms = np.repeat(np.arange(65, 65 + 28, dtype=np.uint8), counts)
    np.random.default_rng(12).shuffle(syms)
    data = syms.tobytes()
    return data, codec_huffman.encode(data)


class TestStaticHuffman:

    @pytest.mark.parametrize("data", [
        FIB_TEXT,
        b"abracadabra",
        b"",
        b"a",
        b"aaaaaaaa",
        b"\x00\x00\x00",
        b"\xff\x00",
        bytes(range(256)),
    ])
    def test_round_trip(self, data, decoder):
        assert codec_huffman.decode(codec_huffman.encode(data), decoder) == data

    def test_round_trip_larger_samples(self, decoder):
        for data in (skewed_text(20000, seed=3), random_bytes(5000, seed=4)):
            assert codec_huffman.decode(codec_huffman.encode(data), decoder) == data

    def test_guard_symbol_inside_body(self, decoder):
        # 'C' and 'G' share the longest length, 'C' is the guard and occurs mid-stream
        data = b"A" * 12 + b"B" * 7 + b"CGC" + b"D" * 14 + b"E" * 28 + b"F" * 9 + b"G" * 4 + b"H" * 22
        assert codec_huffman.decode(codec_huffman.encode(data), decoder) == data

    def test_codes_longer_than_25_bits(self, fibonacci_payload, decoder):
        data, payload = fibonacci_payload
        lengths = read_huffman_header(BitReader.from_bytes(payload))["lengths"]
        assert lengths.max() == 27
        assert codec_huffman.decode(payload, decoder) == data

    def test_skewed_input_compresses(self):
        bw = BitWriter()
        codec_huffman.encode_to(FIB_TEXT, bw)
        assert bw.bit_count < 8 * len(FIB_TEXT)
        assert len(bw.finish()) < len(FIB_TEXT)

    def test_small_buffer(self):
        data = skewed_text(3000, seed=1)
        assert codec_huffman.decode(codec_huffman.encode(data, buffer_size=7)) == data

    def test_unknown_decoder(self):
        with pytest.raises(ValueError):
            codec_huffman.decode(codec_huffman.encode(b"abc"), "magic")

    def test_truncated_body(self, decoder):
        payload = codec_huffman.encode(skewed_text(2000, seed=2))
        with pytest.raises(EOFError):
            codec_huffman.decode(payload[:len(payload) // 2], decoder)

    def test_truncated_header(self, decoder):
        payload = codec_huffman.encode(b"hello")
        with pytest.raises(EOFError):
            codec_huffman.decode(payload[:10], decoder)

    def test_wrappers(self):
        payload = codec_huffman.encode(FIB_TEXT)
        assert codec_huffman.decode_bitwise(payload) == FIB_TEXT
        assert codec_huffman.decode_table(payload) == FIB_TEXT
        assert codec_huffman.decode_two_level(payload) == FIB_TEXT


class TestHuffmanHeader:

    def test_round_trip(self):
        lengths = np.zeros(256, dtype=np.int64)
        lengths[[65, 66, 67]] = [1, 2, 2]
        bw = BitWriter()
        write_huffman_header(bw, lengths, 66, 9)
        assert bw.bit_count == 3 + 253 + 3 * 3 + 5 + 4
        h = read_huffman_header(BitReader.from_bytes(bw.finish()))
        assert np.array_equal(h["lengths"], lengths)
        assert h["guard_count"] == 10

    def test_zero_guard_frequency(self):
        lengths = np.zeros(256, dtype=np.int64)
        lengths[[0, 1]] = 1
        bw = BitWriter()
        write_huffman_header(bw, lengths, 0, 0)
        h = read_huffman_header(BitReader.from_bytes(bw.finish()))
        assert h["guard_count"] == 1

    def test_length_too_large(self):
        lengths = np.zeros(256, dtype=np.int64)
        lengths[[0, 1]] = [1, 200]
        with pytest.raises(ValueError):
            write_huffman_header(BitWriter(), lengths, 1, 1)

    def test_single_symbol_rejected(self):
        lengths = np.zeros(256, dtype=np.int64)
        lengths[5] = 1
        bw = BitWriter()
        write_huffman_header(bw, lengths, 5, 3)
        with pytest.raises(ValueError):
            read_huffman_header(BitReader.from_bytes(bw.finish()))


class TestContainerHeader:

    def test_round_trip(self):
        f = io.BytesIO()
        write_header(f, method="lzw", original_size=123456)
        assert len(f.getvalue()) == HEADER_SIZE
        f.seek(0)
        assert read_header(f) == {"method": "lzw", "original_size": 123456}

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            write_header(io.BytesIO(), method="zip", original_size=0)

    def test_size_beyond_u32(self):
        write_header(io.BytesIO(), method="lzw", original_size=0xFFFFFFFF)
        with pytest.raises(ValueError, match="u32"):
            write_header(io.BytesIO(), method="lzw", original_size=1 << 32)

    def test_bad_magic(self):
        f = io.BytesIO()
        write_header(f, method="huffman", original_size=3)
        data = b"XXXX" + f.getvalue()[4:]
        with pytest.raises(ValueError, match="magic"):
            read_header(io.BytesIO(data))

    def test_short_header(self):
        with pytest.raises(ValueError):
            read_header(io.BytesIO(b"HLZW"))

    def test_bad_version_and_method(self):
        f = io.BytesIO()
        write_header(f, method="adaptive", original_size=3)
        raw = bytearray(f.getvalue())
        raw[4] = 9
        with pytest.raises(ValueError, match="version"):
            read_header(io.BytesIO(bytes(raw)))
        raw[4] = 1
        raw[5] = 42
        with pytest.raises(ValueError, match="method"):
            read_header(io.BytesIO(bytes(raw)))
