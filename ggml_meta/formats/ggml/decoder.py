# ggml_meta/formats/ggml/decoder.py
"""
Magic-number dispatch for GGML-family containers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, Optional, Union

from loguru import logger

from ggml_meta.io.file_reader import LocalFileSource

from .gguf import GGUFContainer
from .lora import LoRAContainer
from .model import ContainerHeader, InvalidMagicError, UnsupportedFormatError
from .model_view import UNKNOWN, ModelView
from .reader import ByteOrder, FieldReader

# Legacy ggml (unversioned), ggmf and ggjt containers.
FILE_MAGIC_GGML = 0x67676D6C
FILE_MAGIC_GGMF = 0x67676D66
FILE_MAGIC_GGJT = 0x67676A74
# LoRA adapter.
FILE_MAGIC_GGLA = 0x67676C61
# "GGUF" read as a little-endian u32, and its byte-swapped form.
FILE_MAGIC_GGUF_LE = 0x46554747
FILE_MAGIC_GGUF_BE = 0x47475546

UNSUPPORTED_MAGICS = frozenset({FILE_MAGIC_GGML, FILE_MAGIC_GGMF, FILE_MAGIC_GGJT})

Container = Union[GGUFContainer, LoRAContainer]

CONTAINERS: Dict[int, Callable[[], Container]] = {
    FILE_MAGIC_GGLA: LoRAContainer,
    FILE_MAGIC_GGUF_LE: lambda: GGUFContainer(ByteOrder.LE),
    FILE_MAGIC_GGUF_BE: lambda: GGUFContainer(ByteOrder.BE),
}


@dataclass(frozen=True)
class DecodedFile:
    """Result of a successful decode; ``model`` is None for LoRA adapters."""

    magic: int
    container: ContainerHeader
    model: Optional[ModelView]

    @property
    def container_name(self) -> str:
        return self.container.format

    @property
    def version(self) -> int:
        return self.container.version

    @property
    def model_family(self) -> str:
        return self.model.model_family if self.model else UNKNOWN

    @property
    def model_type(self) -> str:
        return self.model.model_type if self.model else UNKNOWN

    @property
    def file_type(self) -> str:
        return self.model.file_type if self.model else UNKNOWN

    @property
    def num_layers(self) -> int:
        return self.model.num_layers if self.model else 0


def select_container(magic: int) -> Container:
    """Map an exact magic value to its container decoder."""
    if magic in UNSUPPORTED_MAGICS:
        raise UnsupportedFormatError(magic)
    factory = CONTAINERS.get(magic)
    if factory is None:
        raise InvalidMagicError(magic)
    return factory()


def decode_ggml(stream: BinaryIO) -> DecodedFile:
    """Decode the container header and metadata from a stream at offset 0.

    The stream is read sequentially and left open.

    Raises:
        GGMLDecodeError: any subclass; nothing partial is returned.
    """
    magic = FieldReader(stream, ByteOrder.LE).read_u32()
    container = select_container(magic)
    logger.debug("magic 0x{magic:08x} -> {name}", magic=magic, name=container.name)

    header, model = container.decode(stream)
    return DecodedFile(magic=magic, container=header, model=model)


def decode_path(path: str) -> DecodedFile:
    with LocalFileSource(path).open() as mf:
        return decode_ggml(mf.stream())
