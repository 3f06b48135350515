# ggml_meta/analysis/base.py
"""
Report models for a metadata scan, with a reason matrix for decode failures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class Finding:
    """Single check result."""

    name: str  # "<group>:<check>"
    ok: bool
    details: str = ""
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ReasonEntry:
    """Why a file could not be decoded (error class and message)."""

    target: str  # error class, e.g. "UnsupportedFormatError"
    reason: str


@dataclass
class AnalysisReport:
    file_path: str
    file_size: int
    sha256_hex: str
    format: str  # "gguf" | "ggla" | "unknown"
    metadata: Dict[str, Any]
    findings: List[Finding] = field(default_factory=list)
    reason_matrix: List[ReasonEntry] = field(default_factory=list)
    stages_run: List[str] = field(default_factory=list)

    def add(self, name: str, ok: bool, details: str = "", **context: Any) -> None:
        self.findings.append(Finding(name=name, ok=ok, details=details, context=context))

    def add_reason(self, target: str, reason: str) -> None:
        self.reason_matrix.append(ReasonEntry(target=target, reason=reason))

    def group(self, prefix: str) -> List[Finding]:
        return [f for f in self.findings if f.name.split(":", 1)[0] == prefix]

    @property
    def ok(self) -> bool:
        return all(f.ok for f in self.findings)
