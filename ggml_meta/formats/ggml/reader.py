# ggml_meta/formats/ggml/reader.py
"""
Sequential fixed-width field reader with explicit byte order and
version-dependent count/string widths.
"""

from __future__ import annotations

import struct
from enum import Enum
from typing import BinaryIO

from .model import InvalidStringError, TruncatedError

# Upper bound for a single read() call so corrupt length fields never allocate
# the declared size up front.
_CHUNK = 1 << 20


class ByteOrder(Enum):
    LE = "<"
    BE = ">"

    @property
    def prefix(self) -> str:
        return self.value


class Versioning(Enum):
    """Width rules selected by the container version field.

    V1 uses 32-bit counts and terminator-suffixed strings; every later
    version uses 64-bit counts and raw strings.
    """

    V1 = 1
    V2_PLUS = 2

    @classmethod
    def from_version(cls, version: int) -> "Versioning":
        return cls.V1 if version == 1 else cls.V2_PLUS


class FieldReader:
    """Reads primitive GGUF fields from a file-like object."""

    __slots__ = ("_stream", "byte_order", "bytes_read")

    def __init__(self, stream: BinaryIO, byte_order: ByteOrder = ByteOrder.LE):
        self._stream = stream
        self.byte_order = byte_order
        self.bytes_read = 0

    def read_bytes(self, n: int) -> bytes:
        """Read exactly ``n`` bytes or raise TruncatedError."""
        if n <= _CHUNK:
            data = self._stream.read(n)
        else:
            parts = []
            remaining = n
            while remaining:
                part = self._stream.read(min(remaining, _CHUNK))
                if not part:
                    break
                parts.append(part)
                remaining -= len(part)
            data = b"".join(parts)
        self.bytes_read += len(data)
        if len(data) != n:
            raise TruncatedError(n, len(data))
        return data

    def skip(self, n: int) -> None:
        self.read_bytes(n)

    def _unpack(self, code: str):
        fmt = self.byte_order.prefix + code
        (v,) = struct.unpack(fmt, self.read_bytes(struct.calcsize(fmt)))
        return v

    def read_u8(self) -> int:
        return self._unpack("B")

    def read_i8(self) -> int:
        return self._unpack("b")

    def read_u16(self) -> int:
        return self._unpack("H")

    def read_i16(self) -> int:
        return self._unpack("h")

    def read_u32(self) -> int:
        return self._unpack("I")

    def read_i32(self) -> int:
        return self._unpack("i")

    def read_u64(self) -> int:
        return self._unpack("Q")

    def read_i64(self) -> int:
        return self._unpack("q")

    def read_f32(self) -> float:
        return self._unpack("f")

    def read_f64(self) -> float:
        return self._unpack("d")

    def read_bool(self) -> bool:
        return self.read_bytes(1)[0] != 0

    def read_count(self, versioning: Versioning) -> int:
        return self.read_u32() if versioning is Versioning.V1 else self.read_u64()

    def read_string(self, versioning: Versioning) -> str:
        length = self.read_count(versioning)
        raw = self.read_bytes(length)
        if versioning is Versioning.V1:
            # v1 lengths include the trailing NUL
            raw = raw[:-1]
        try:
            return raw.decode("utf-8", "strict")
        except UnicodeDecodeError:
            raise InvalidStringError(raw) from None
