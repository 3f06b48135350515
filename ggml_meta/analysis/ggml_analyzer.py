# ggml_meta/analysis/ggml_analyzer.py
"""
GGML-family analyzer: magic dispatch, metadata decode and derived model facts.
"""

from __future__ import annotations

from typing import BinaryIO

from loguru import logger

from ggml_meta.analysis.analyzer import Analyzer
from ggml_meta.analysis.base import AnalysisReport
from ggml_meta.formats.ggml.decoder import DecodedFile, decode_ggml
from ggml_meta.formats.ggml.model import GGMLDecodeError
from ggml_meta.formats.ggml.values import describe


class GGMLAnalyzer(Analyzer):
    """Analyzer for GGUF / GGLA containers."""

    def __init__(self, path: str, *, include_kv: bool = False):
        super().__init__(path)
        self.include_kv = include_kv

    def _perform_analysis(self, stream: BinaryIO, report: AnalysisReport) -> None:
        try:
            decoded = decode_ggml(stream)
        except GGMLDecodeError as e:
            logger.warning("Decode failed for {path}: {error}", path=self.path, error=e)
            report.add("decode", False, str(e))
            report.add_reason(type(e).__name__, str(e))
            return

        report.format = decoded.container_name
        self._record_header(decoded, report)

        if decoded.model is None:
            return
        if self.include_kv:
            for key, value in sorted(decoded.model.kv.items()):
                vtype, shown = describe(value)
                if len(shown) > 70:
                    shown = shown[:67] + "..."
                report.add(f"kv_store:{key}", True, key=key, type=vtype, value=shown)

    def _record_header(self, decoded: DecodedFile, report: AnalysisReport) -> None:
        header = decoded.container
        report.add("decode", True, f"{header.format} v{header.version} ({header.endian})")
        report.metadata.update(
            {
                "magic": f"0x{decoded.magic:08x}",
                "container": header.format,
                "version": header.version,
                "endian": header.endian,
            }
        )
        if decoded.model is None:
            return

        report.metadata.update({"n_tensors": header.n_tensors, "n_kv": header.n_kv})
        report.metadata.update(decoded.model.summary())
        for label, value in (
            ("Architecture", decoded.model_family),
            ("Model_Type", decoded.model_type),
            ("File_Type", decoded.file_type),
            ("Layers", str(decoded.num_layers)),
        ):
            report.add(f"model_metadata:{label}", True, value)
