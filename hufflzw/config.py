from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import yaml

from hufflzw.bitpack import DEFAULT_BUFFER_SIZE
from hufflzw.bitstream import METHODS
from hufflzw.codec_huffman import DECODERS as HUFFMAN_DECODERS
from hufflzw.codec_lzw import DECODERS as LZW_DECODERS, ENCODERS as LZW_ENCODERS


@dataclass
class CodecConfig:
    method: str = "huffman"
    huffman_decoder: str = "two_level"
    lzw_encoder: str = "pairs"
    lzw_decoder: str = "stack"
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def __post_init__(self):
        _check_choice("method", self.method, tuple(METHODS))
        _check_choice("huffman_decoder", self.huffman_decoder, HUFFMAN_DECODERS)
        _check_choice("lzw_encoder", self.lzw_encoder, LZW_ENCODERS)
        _check_choice("lzw_decoder", self.lzw_decoder, LZW_DECODERS)
        if not isinstance(self.buffer_size, int) or self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be a positive integer, got {self.buffer_size!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def override(self, **kwargs) -> "CodecConfig":
        """Copy with the non-None keyword values replaced."""
        d = self.to_dict()
        d.update({k: v for k, v in kwargs.items() if v is not None})
        return from_dict(d)


def _check_choice(name: str, value, choices):
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}, got {value!r}")


def from_dict(d: Optional[Dict[str, Any]]) -> CodecConfig:
    d = d or {}
    if not isinstance(d, dict):
        raise ValueError("config must be a mapping of option names to values")
    known = {f.name for f in fields(CodecConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    return CodecConfig(**d)


def load_config(path) -> CodecConfig:
    with open(path, "r") as f:
        return from_dict(yaml.safe_load(f))
