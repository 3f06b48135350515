# ggml_meta/formats/ggml/values.py
"""
GGUF key-value type system: the closed set of value kinds and the decoder
for one typed value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .model import UnknownTypeTagError
from .reader import FieldReader, Versioning


class GGUFValueType(IntEnum):
    """Wire tags for metadata values."""

    UINT8 = 0
    INT8 = 1
    UINT16 = 2
    INT16 = 3
    UINT32 = 4
    INT32 = 5
    FLOAT32 = 6
    BOOL = 7
    STRING = 8
    ARRAY = 9
    UINT64 = 10
    INT64 = 11
    FLOAT64 = 12


INTEGER_TYPES = frozenset(
    {
        GGUFValueType.UINT8,
        GGUFValueType.INT8,
        GGUFValueType.UINT16,
        GGUFValueType.INT16,
        GGUFValueType.UINT32,
        GGUFValueType.INT32,
        GGUFValueType.UINT64,
        GGUFValueType.INT64,
    }
)


@dataclass(frozen=True)
class MetadataValue:
    """One decoded value, tagged with its wire type.

    For ``ARRAY`` values ``value`` is a tuple of MetadataValue that all carry
    ``element_type``.
    """

    type: GGUFValueType
    value: Any
    element_type: Optional[GGUFValueType] = None

    @property
    def is_array(self) -> bool:
        return self.type is GGUFValueType.ARRAY

    def as_str(self) -> Optional[str]:
        return self.value if self.type is GGUFValueType.STRING else None

    def as_int(self, *types: GGUFValueType) -> Optional[int]:
        """Integer payload if the tag is one of ``types`` (any integer tag by default)."""
        allowed = types or INTEGER_TYPES
        return self.value if self.type in allowed else None

    def as_uint32(self) -> Optional[int]:
        return self.as_int(GGUFValueType.UINT32)

    def to_python(self) -> Any:
        if self.is_array:
            return [v.to_python() for v in self.value]
        return self.value


_ScalarReader = Callable[[FieldReader, Versioning], Any]

_SCALAR_READERS: Dict[GGUFValueType, _ScalarReader] = {
    GGUFValueType.UINT8: lambda r, _: r.read_u8(),
    GGUFValueType.INT8: lambda r, _: r.read_i8(),
    GGUFValueType.UINT16: lambda r, _: r.read_u16(),
    GGUFValueType.INT16: lambda r, _: r.read_i16(),
    GGUFValueType.UINT32: lambda r, _: r.read_u32(),
    GGUFValueType.INT32: lambda r, _: r.read_i32(),
    GGUFValueType.FLOAT32: lambda r, _: r.read_f32(),
    GGUFValueType.BOOL: lambda r, _: r.read_bool(),
    GGUFValueType.STRING: lambda r, v: r.read_string(v),
    GGUFValueType.UINT64: lambda r, _: r.read_u64(),
    GGUFValueType.INT64: lambda r, _: r.read_i64(),
    GGUFValueType.FLOAT64: lambda r, _: r.read_f64(),
}


def _value_type(tag: int, *, array: bool = False) -> GGUFValueType:
    try:
        return GGUFValueType(tag)
    except ValueError:
        raise UnknownTypeTagError(tag, array=array) from None


def _decode_array(reader: FieldReader, versioning: Versioning) -> MetadataValue:
    # Every tag, ARRAY included, is a valid element type in every version;
    # older readers rejected 64-bit and nested elements in v1 files and
    # nested arrays everywhere.
    element_type = _value_type(reader.read_u32(), array=True)
    count = reader.read_count(versioning)
    items: List[MetadataValue] = []
    for _ in range(count):
        items.append(_decode_typed(reader, element_type, versioning))
    return MetadataValue(GGUFValueType.ARRAY, tuple(items), element_type)


def _decode_typed(
    reader: FieldReader, vtype: GGUFValueType, versioning: Versioning
) -> MetadataValue:
    if vtype is GGUFValueType.ARRAY:
        return _decode_array(reader, versioning)
    return MetadataValue(vtype, _SCALAR_READERS[vtype](reader, versioning))


def decode_value(reader: FieldReader, type_tag: int, versioning: Versioning) -> MetadataValue:
    """Decode exactly one value of the kind named by ``type_tag``.

    Raises:
        UnknownTypeTagError: ``type_tag`` (or an array's element tag) is not a
            known GGUFValueType.
        TruncatedError: the stream ends inside the value.
    """
    return _decode_typed(reader, _value_type(type_tag), versioning)


def describe(value: MetadataValue, *, preview: int = 3) -> Tuple[str, str]:
    """Short (type, value) strings for tabular display."""
    if value.is_array:
        shown = ", ".join(repr(v.value) for v in value.value[:preview])
        more = ", ..." if len(value.value) > preview else ""
        return (
            f"ARRAY[{value.element_type.name}]",
            f"Count={len(value.value)}, Preview=[{shown}{more}]",
        )
    if value.type in (GGUFValueType.FLOAT32, GGUFValueType.FLOAT64):
        return value.type.name, f"{value.value:.6f}"
    return value.type.name, str(value.value)
