import pytest

from hufflzw import codec_adaptive
from hufflzw.codec_adaptive import EOC, NYT, AdaptiveHuffmanTree, describe_tree
from hufflzw.samples import random_bytes, repetitive, skewed_text

MESSAGE = "EDEAEEFECDAFDB"


class TestAdaptiveTree:

    @pytest.fixture
    def tree(self):
        return AdaptiveHuffmanTree()

    def test_empty_tree_is_nyt(self, tree):
        assert len(tree) == 1
        assert tree.symbol[0] == NYT
        assert tree.path(ord("x")) == (0, 0)

    def test_sibling_property_after_every_update(self, tree):
        for ch in MESSAGE:
            tree.update(ord(ch))
            assert tree.sibling_property_holds()

    def test_sibling_property_on_bytes(self, tree):
        for c in skewed_text(3000, seed=5):
            tree.update(c)
            assert tree.sibling_property_holds()

    def test_root_counts_everything(self, tree):
        for ch in MESSAGE:
            tree.update(ord(ch))
        assert tree.freq[0] == len(MESSAGE)
        assert len(tree) == 2 * len(set(MESSAGE)) + 1

    def test_first_symbol(self, tree):
        tree.update(ord("a"))
        assert len(tree) == 3
        assert tree.path(ord("a")) == (1, 1)
        assert tree.path(ord("b")) == (0, 1)   # NYT

    def test_nodes_by_order(self, tree):
        for ch in MESSAGE:
            tree.update(ord(ch))
        nodes = list(tree.nodes_by_order())
        assert [n[0] for n in nodes] == list(range(len(tree)))
        freqs = [n[1] for n in nodes]
        assert freqs == sorted(freqs)
        assert nodes[0][2] == NYT
        assert nodes[-1][1] == len(MESSAGE)

    def test_describe_tree(self):
        labels = describe_tree(MESSAGE)
        assert labels[:8] == ["(0,14)", "(1,9)", "(2,5,E)", "(3,5)", "(4,4)",
                              "(5,3,D)", "(6,2,A)", "(7,2,F)"]
        assert len(labels) == 13
        assert labels[-1] == "(12,0)"

    def test_broken_tree_detected(self, tree):
        for ch in "aab":
            tree.update(ord(ch))
        tree.freq[1], tree.freq[2] = tree.freq[2], tree.freq[1]
        assert not tree.sibling_property_holds()


class TestAdaptiveCodec:

    @pytest.mark.parametrize("data", [
        b"",
        b"a",
        b"aaaaaaaaaa",
        MESSAGE.encode(),
        bytes(range(256)),
        bytes(range(256))[::-1] * 2,
    ])
    def test_round_trip(self, data):
        assert codec_adaptive.decode(codec_adaptive.encode(data)) == data

    def test_round_trip_samples(self):
        for data in (skewed_text(10000, seed=6), random_bytes(3000, seed=7), repetitive(5000, seed=8)):
            assert codec_adaptive.decode(codec_adaptive.encode(data, buffer_size=16)) == data

    def test_empty_input_is_just_end_marker(self):
        payload = codec_adaptive.encode(b"")
        assert payload == bytes([EOC >> 1, (EOC & 1) << 7])

    def test_skewed_input_compresses(self):
        data = skewed_text(10000, seed=9)
        assert len(codec_adaptive.encode(data)) < len(data)

    def test_truncated(self):
        payload = codec_adaptive.encode(skewed_text(2000, seed=1))
        with pytest.raises(EOFError):
            codec_adaptive.decode(payload[:len(payload) // 2])

    def test_invalid_literal(self):
        # empty tree: the 9 bits are read as a literal, 300 is neither a byte nor EOC
        payload = bytes([300 >> 1, (300 & 1) << 7])
        with pytest.raises(ValueError):
            codec_adaptive.decode(payload)
