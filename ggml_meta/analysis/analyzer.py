# ggml_meta/analysis/analyzer.py
"""
Base Analyzer class to handle common file operations.
"""
from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import BinaryIO, List

from loguru import logger

from ggml_meta.analysis.base import AnalysisReport
from ggml_meta.io.file_reader import LocalFileSource
from ggml_meta.observability import Timer

AVAILABLE_STAGES: List[str] = ["sha256", "metadata"]


class Analyzer(ABC):
    """Abstract base class for container analyzers."""

    def __init__(self, path: str):
        self.path = path
        self.src = LocalFileSource(path)

    def run(self, stages: List[str]) -> AnalysisReport:
        """
        Map the file once and run only the requested stages over it.

        Args:
            stages: Subset of AVAILABLE_STAGES, e.g. ["metadata"].
        """
        with self.src.open() as mf:
            report = AnalysisReport(
                file_path=self.path,
                file_size=mf.size,
                sha256_hex="not_run",
                format="unknown",
                metadata={},
            )

            if "sha256" in stages:
                with Timer("sha256") as t_hash:
                    h = hashlib.sha256()
                    h.update(mf.view)
                    report.sha256_hex = h.hexdigest()
                report.stages_run.append("sha256")
                logger.debug("SHA256 computed in {ms:.2f}ms", ms=t_hash.duration_ms)

            if "metadata" in stages:
                with Timer("metadata") as t_core:
                    self._perform_analysis(mf.stream(), report)
                report.stages_run.append("metadata")
                logger.debug(
                    "{format} metadata decoded in {ms:.2f}ms",
                    format=report.format.upper(),
                    ms=t_core.duration_ms,
                )

            return report

    @abstractmethod
    def _perform_analysis(self, stream: BinaryIO, report: AnalysisReport) -> None:
        """Populate ``report`` from a stream positioned at offset 0."""
        raise NotImplementedError
