# ggml_meta/formats/ggml/gguf.py
"""
GGUF container decoder (v1/v2/v3, little- or big-endian).

Layout after the magic::

    u32 version
    v1:  u32 n_tensors, u32 n_kv      v2+: u64 n_tensors, u64 n_kv
    n_kv      x (string key, u32 type, value)
    n_tensors x (string name, u32 n_dims, u64 dims[n_dims], u32 type, u64 offset)

Sections carry no terminators, so the count width chosen from the version
governs every read that follows.
"""

from __future__ import annotations

from typing import BinaryIO, Dict, Tuple

from loguru import logger

from .model import ContainerHeader
from .model_view import ModelView
from .reader import ByteOrder, FieldReader, Versioning
from .values import MetadataValue, decode_value

_U64_MASK = (1 << 64) - 1


def _read_kv(reader: FieldReader, n_kv: int, versioning: Versioning) -> Dict[str, MetadataValue]:
    kv: Dict[str, MetadataValue] = {}
    for _ in range(n_kv):
        key = reader.read_string(versioning)
        type_tag = reader.read_u32()
        kv[key] = decode_value(reader, type_tag, versioning)
    return kv


def _count_parameters(reader: FieldReader, n_tensors: int, versioning: Versioning) -> int:
    """Sum of element counts over all tensor descriptors; descriptors are discarded."""
    total = 0
    for _ in range(n_tensors):
        reader.read_string(versioning)  # name
        n_dims = reader.read_u32()
        elements = 1
        for _ in range(n_dims):
            elements = (elements * reader.read_u64()) & _U64_MASK
        reader.skip(4 + 8)  # u32 ggml type, u64 data offset
        total = (total + elements) & _U64_MASK
    return total


class GGUFContainer:
    """Decoder for GGUF containers in a fixed byte order."""

    name = "gguf"

    def __init__(self, byte_order: ByteOrder = ByteOrder.LE):
        self.byte_order = byte_order

    def decode(self, stream: BinaryIO) -> Tuple[ContainerHeader, ModelView]:
        """Decode everything after the magic.

        Raises:
            TruncatedError: the stream ends before a declared length.
            UnknownTypeTagError: a value or array element has an unknown tag.
        """
        reader = FieldReader(stream, self.byte_order)
        version = reader.read_u32()
        versioning = Versioning.from_version(version)

        n_tensors = reader.read_count(versioning)
        n_kv = reader.read_count(versioning)
        logger.debug(
            "GGUF v{version} ({endian}): n_tensors={n_tensors} n_kv={n_kv}",
            version=version,
            endian=self.byte_order.name,
            n_tensors=n_tensors,
            n_kv=n_kv,
        )

        kv = _read_kv(reader, n_kv, versioning)
        parameters = _count_parameters(reader, n_tensors, versioning)
        logger.debug(
            "GGUF metadata consumed {n} bytes, parameters={p}",
            n=reader.bytes_read,
            p=parameters,
        )

        header = ContainerHeader(
            format=self.name,
            version=version,
            endian=self.byte_order.name,
            n_tensors=n_tensors,
            n_kv=n_kv,
        )
        return header, ModelView(kv, parameters)
