# ggml_meta/__init__.py
"""
ggml_meta
=========

Pure-Python, read-only decoder for GGML-family model containers (GGUF, GGLA):
container format, architecture, parameter count, quantization and layer count
straight from the metadata header, without touching tensor data.
"""
from __future__ import annotations

from importlib.metadata import version as _pkg_version

__all__ = ["__version__"]

try:
    # Read version dynamically from installed package metadata
    __version__: str = _pkg_version("ggml-meta")
except Exception:  # pragma: no cover - fallback for development environments
    __version__ = "0.0.0-dev"
