# ggml_meta/formats/ggml/model.py
"""
GGML container shared structures and exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ContainerHeader:
    format: str  # 'gguf' or 'ggla'
    version: int
    endian: str  # 'LE' or 'BE'
    n_tensors: Optional[int] = None  # gguf only
    n_kv: Optional[int] = None  # gguf only


class GGMLDecodeError(Exception):
    """Raised when a GGML-family container cannot be decoded."""


class UnsupportedFormatError(GGMLDecodeError):
    """Recognized legacy container (ggml, ggmf, ggjt) that is not decoded."""

    def __init__(self, magic: int):
        super().__init__(f"unsupported model format (magic 0x{magic:08x})")
        self.magic = magic


class InvalidMagicError(GGMLDecodeError):
    """The leading four bytes match no known container."""

    def __init__(self, magic: int):
        super().__init__(f"invalid file magic 0x{magic:08x}")
        self.magic = magic


class InvalidVersionError(GGMLDecodeError):
    def __init__(self, version: int):
        super().__init__(f"invalid version {version}")
        self.version = version


class UnknownTypeTagError(GGMLDecodeError):
    """A key-value (or array element) type tag outside the closed set."""

    def __init__(self, tag: int, *, array: bool = False):
        what = "array type" if array else "type"
        super().__init__(f"invalid {what}: {tag}")
        self.tag = tag


class TruncatedError(GGMLDecodeError):
    """The stream ended before a declared length was satisfied."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"unexpected end of stream: wanted {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidStringError(GGMLDecodeError):
    """A length-prefixed string is not valid UTF-8."""

    def __init__(self, raw: bytes):
        super().__init__(f"invalid UTF-8 string {raw[:32]!r}")
        self.raw = raw
