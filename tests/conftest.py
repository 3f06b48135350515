"""
Shared fixtures: an in-memory GGUF/GGLA blob builder used only by the tests.
"""

from __future__ import annotations

import io
import struct
from typing import Any, Iterable, Sequence, Tuple

import pytest

from ggml_meta.formats.ggml.values import GGUFValueType as T

SCALAR_CODES = {
    T.UINT8: "B",
    T.INT8: "b",
    T.UINT16: "H",
    T.INT16: "h",
    T.UINT32: "I",
    T.INT32: "i",
    T.FLOAT32: "f",
    T.BOOL: "?",
    T.UINT64: "Q",
    T.INT64: "q",
    T.FLOAT64: "d",
}


class GGUFEncoder:
    """Writes GGUF byte blobs field by field.

    Array values are given as ``(element_type, items)``; nested arrays use the
    same shape for each item.
    """

    def __init__(self, version: int = 3, endian: str = "<"):
        self.version = version
        self.endian = endian

    def pack(self, code: str, value: Any) -> bytes:
        return struct.pack(self.endian + code, value)

    def count(self, n: int) -> bytes:
        return self.pack("I" if self.version == 1 else "Q", n)

    def string(self, s: str) -> bytes:
        raw = s.encode("utf-8")
        if self.version == 1:
            return self.pack("I", len(raw) + 1) + raw + b"\x00"
        return self.pack("Q", len(raw)) + raw

    def value(self, tag: int, value: Any) -> bytes:
        if tag == T.STRING:
            return self.string(value)
        if tag == T.ARRAY:
            element_type, items = value
            out = self.pack("I", element_type) + self.count(len(items))
            return out + b"".join(self.value(element_type, v) for v in items)
        return self.pack(SCALAR_CODES[T(tag)], value)

    def kv(self, key: str, tag: int, value: Any) -> bytes:
        return self.string(key) + self.pack("I", tag) + self.value(tag, value)

    def tensor(self, name: str, dims: Sequence[int], ggml_type: int = 0, offset: int = 0) -> bytes:
        out = self.string(name) + self.pack("I", len(dims))
        out += b"".join(self.pack("Q", d) for d in dims)
        return out + self.pack("I", ggml_type) + self.pack("Q", offset)

    def magic(self) -> bytes:
        return b"GGUF" if self.endian == "<" else b"FUGG"

    def build(
        self,
        kv: Iterable[Tuple[str, int, Any]] = (),
        tensors: Iterable[Tuple[str, Sequence[int]]] = (),
    ) -> bytes:
        kv = list(kv)
        tensors = list(tensors)
        out = self.magic() + self.pack("I", self.version)
        out += self.count(len(tensors)) + self.count(len(kv))
        out += b"".join(self.kv(*item) for item in kv)
        out += b"".join(self.tensor(name, dims) for name, dims in tensors)
        return out


@pytest.fixture
def encoder():
    """Factory: ``encoder(version=3, endian="<")``."""
    return GGUFEncoder


@pytest.fixture
def gguf_stream(encoder):
    """Factory returning a BytesIO over a built GGUF file."""

    def make(kv=(), tensors=(), *, version: int = 3, endian: str = "<") -> io.BytesIO:
        return io.BytesIO(encoder(version, endian).build(kv, tensors))

    return make


@pytest.fixture
def llama_kv():
    return [
        ("general.architecture", T.STRING, "llama"),
        ("general.name", T.STRING, "tiny-llama"),
        ("general.file_type", T.UINT32, 15),
        ("llama.block_count", T.UINT32, 32),
        ("llama.head_count", T.UINT32, 32),
        ("llama.head_count_kv", T.UINT32, 32),
        ("llama.context_length", T.UINT32, 4096),
    ]
