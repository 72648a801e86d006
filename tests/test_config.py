import pytest

from hufflzw.config import CodecConfig, from_dict, load_config


class TestCodecConfig:

    def test_defaults(self):
        cfg = CodecConfig()
        assert cfg.method == "huffman"
        assert cfg.huffman_decoder == "two_level"
        assert cfg.lzw_decoder == "stack"
        assert cfg.buffer_size == 4096

    @pytest.mark.parametrize("kwargs", [
        {"method": "zip"},
        {"huffman_decoder": "fast"},
        {"lzw_encoder": "tree"},
        {"lzw_decoder": "queue"},
        {"buffer_size": 0},
        {"buffer_size": "big"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            CodecConfig(**kwargs)

    def test_override_ignores_none(self):
        cfg = CodecConfig(method="lzw").override(method=None, lzw_decoder="strings")
        assert cfg.method == "lzw"
        assert cfg.lzw_decoder == "strings"

    def test_from_dict(self):
        assert from_dict(None) == CodecConfig()
        assert from_dict({"method": "adaptive"}).method == "adaptive"
        with pytest.raises(ValueError, match="Unknown config keys"):
            from_dict({"method": "lzw", "level": 9})
        with pytest.raises(ValueError):
            from_dict(["method", "lzw"])

    def test_load_yaml(self, tmp_path):
        p = tmp_path / "codec.yaml"
        p.write_text("method: lzw\nlzw_encoder: strings\nbuffer_size: 512\n")
        cfg = load_config(p)
        assert cfg == CodecConfig(method="lzw", lzw_encoder="strings", buffer_size=512)
        assert cfg.to_dict()["buffer_size"] == 512

    def test_load_empty_yaml(self, tmp_path):
        p = tmp_path / "empty.yaml"
        p.write_text("")
        assert load_config(p) == CodecConfig()
