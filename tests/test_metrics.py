import math

import pytest

from hufflzw.metrics import bits_per_byte, compression_ratio, entropy
from hufflzw.samples import CORPORA, random_bytes, save_sample


class TestMetrics:

    def test_compression_ratio(self):
        assert compression_ratio(b"x" * 100, b"y" * 25) == pytest.approx(4.0)
        assert compression_ratio(b"", b"") == 1.0
        assert math.isinf(compression_ratio(b"abc", b""))

    def test_bits_per_byte(self):
        assert bits_per_byte(b"x" * 100, b"y" * 25) == pytest.approx(2.0)
        assert bits_per_byte(b"", b"abc") == 0.0

    def test_entropy_extremes(self):
        assert entropy(b"") == 0.0
        assert entropy(b"aaaa") == 0.0
        assert entropy(b"ab" * 10) == pytest.approx(1.0)
        assert entropy(bytes(range(256))) == pytest.approx(8.0)

    def test_random_bytes_near_eight_bits(self):
        assert entropy(random_bytes(50000, seed=1)) > 7.9


class TestSamples:

    @pytest.mark.parametrize("kind", list(CORPORA))
    def test_size_and_determinism(self, kind):
        a = CORPORA[kind](size=1000, seed=3)
        assert len(a) == 1000
        assert a == CORPORA[kind](size=1000, seed=3)

    def test_skewed_text_is_compressible(self):
        assert entropy(CORPORA["skewed_text"](size=20000, seed=0)) < 5.0

    def test_save_sample(self, tmp_path):
        p = save_sample(tmp_path / "s.bin", "repetitive", size=500, seed=2)
        assert p.read_bytes() == CORPORA["repetitive"](size=500, seed=2)


class TestPlotRatios:

    def test_measure_and_plot(self, tmp_path):
        from hufflzw.plot_ratios import CODECS, measure, plot
        rows = measure(size=2000, seed=1)
        assert len(rows) == len(CORPORA) * len(CODECS)
        by_key = {(r["corpus"], r["codec"]): r for r in rows}
        assert by_key[("repetitive", "lzw")]["bpb"] < by_key[("random", "lzw")]["bpb"]
        out = tmp_path / "fig" / "ratios.png"
        plot(rows, str(out))
        assert out.stat().st_size > 0
