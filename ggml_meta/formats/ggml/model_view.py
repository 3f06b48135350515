# ggml_meta/formats/ggml/model_view.py
"""
Human-facing model facts derived from a decoded GGUF key-value store.
"""
from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .values import MetadataValue

UNKNOWN = "unknown"


class FileType(IntEnum):
    """Values of ``general.file_type`` (dominant tensor storage scheme)."""

    F32 = 0
    F16 = 1
    Q4_0 = 2
    Q4_1 = 3
    Q4_1_F16 = 4
    # 5 and 6 were Q4_2 / Q4_3, since removed
    Q8_0 = 7
    Q5_0 = 8
    Q5_1 = 9
    Q2_K = 10
    Q3_K_S = 11
    Q3_K_M = 12
    Q3_K_L = 13
    Q4_K_S = 14
    Q4_K_M = 15
    Q5_K_S = 16
    Q5_K_M = 17
    Q6_K = 18


# block_count -> size label, per architecture
LLAMA_SIZES: Dict[int, str] = {26: "3B", 32: "7B", 40: "13B", 48: "34B", 60: "30B", 80: "65B"}
FALCON_SIZES: Dict[int, str] = {32: "7B", 60: "40B", 80: "180B"}
STARCODER_SIZES: Dict[int, str] = {24: "1B", 36: "3B", 42: "7B", 40: "15B"}

_FAMILY_SIZES: Dict[str, Dict[int, str]] = {
    "llama": LLAMA_SIZES,
    "falcon": FALCON_SIZES,
    "starcoder": STARCODER_SIZES,
}

_THOUSAND = 1_000
_MILLION = _THOUSAND * 1_000
_BILLION = _MILLION * 1_000


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def human_number(n: int) -> str:
    """Format a count as e.g. ``7B``, ``350M``, ``12K`` or the plain number."""
    if n > _BILLION:
        return f"{_round_half_up(n / _BILLION)}B"
    if n > _MILLION:
        return f"{_round_half_up(n / _MILLION)}M"
    if n > _THOUSAND:
        return f"{_round_half_up(n / _THOUSAND)}K"
    return str(n)


def file_type_name(code: Optional[int]) -> str:
    if code is None:
        return UNKNOWN
    try:
        return FileType(code).name
    except ValueError:
        return UNKNOWN


class ModelView:
    """Read-only queries over a populated key-value store.

    None of the queries raise: missing or mistyped keys degrade to
    ``"unknown"`` or ``0``.
    """

    __slots__ = ("_kv", "_parameters")

    def __init__(self, kv: Mapping[str, MetadataValue], parameters: int = 0):
        self._kv = MappingProxyType(dict(kv))
        self._parameters = parameters

    @property
    def kv(self) -> Mapping[str, MetadataValue]:
        return self._kv

    @property
    def parameters(self) -> int:
        return self._parameters

    def _uint32(self, key: str) -> Optional[int]:
        v = self.kv.get(key)
        return v.as_uint32() if v is not None else None

    @property
    def model_family(self) -> str:
        v = self.kv.get("general.architecture")
        arch = v.as_str() if v is not None else None
        return arch if arch is not None else UNKNOWN

    @property
    def model_type(self) -> str:
        if self.parameters > 0:
            return human_number(self.parameters)

        family = self.model_family
        sizes = _FAMILY_SIZES.get(family)
        if sizes is None:
            return UNKNOWN
        blocks = self._uint32(f"{family}.block_count")
        if blocks is None:
            return UNKNOWN

        if family == "llama":
            # Approximation: any head/kv-head ratio of 8 is reported as 70B.
            heads = self._uint32("llama.head_count")
            heads_kv = self._uint32("llama.head_count_kv")
            if heads is not None and heads_kv and heads // heads_kv == 8:
                return "70B"

        return sizes.get(blocks, UNKNOWN)

    @property
    def file_type(self) -> str:
        return file_type_name(self._uint32("general.file_type"))

    @property
    def num_layers(self) -> int:
        return self._uint32(f"{self.model_family}.block_count") or 0

    def summary(self) -> Dict[str, Any]:
        return {
            "model_family": self.model_family,
            "model_type": self.model_type,
            "file_type": self.file_type,
            "num_layers": self.num_layers,
            "parameters": self.parameters,
        }
