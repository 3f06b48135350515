# ggml_meta/formats/ggml/lora.py
"""
GGLA (LoRA adapter) container: only the version field is checked.
"""

from __future__ import annotations

from typing import BinaryIO, Tuple

from .model import ContainerHeader, InvalidVersionError
from .reader import ByteOrder, FieldReader


class LoRAContainer:
    name = "ggla"

    def decode(self, stream: BinaryIO) -> Tuple[ContainerHeader, None]:
        version = FieldReader(stream, ByteOrder.LE).read_u32()
        if version != 1:
            raise InvalidVersionError(version)
        return ContainerHeader(format=self.name, version=version, endian=ByteOrder.LE.name), None
