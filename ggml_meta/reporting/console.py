# ggml_meta/reporting/console.py
"""
Console reporting functions for scan results.
"""
from __future__ import annotations

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from ggml_meta.analysis.base import AnalysisReport, Finding

console = Console()

STATUS_STYLES = {
    True: "[green]PASS[/green]",
    False: "[bold red]FAIL[/bold red]",
}

_METADATA_LABELS = {
    "magic": "Magic",
    "container": "Container",
    "version": "Version",
    "endian": "Byte Order",
    "n_tensors": "Tensor Count",
    "n_kv": "KV Count",
    "model_family": "Architecture",
    "model_type": "Model Type",
    "file_type": "File Type",
    "num_layers": "Layers",
    "parameters": "Parameters",
}


def _render_summary(rep: AnalysisReport) -> None:
    t = Table(title="GGML Metadata Summary", box=box.SIMPLE_HEAVY)
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Path", rep.file_path)
    t.add_row("Size (bytes)", str(rep.file_size))
    t.add_row("Format", rep.format)
    t.add_row("SHA-256", rep.sha256_hex)
    for k, v in rep.metadata.items():
        if k == "parameters":
            v = f"{v:,}"
        t.add_row(_METADATA_LABELS.get(k, k), str(v))
    console.print(t)


def _render_generic_table(
    title: str, findings: List[Finding], *, custom_sort_order: Optional[List[str]] = None
) -> None:
    """Generic renderer for finding groups, with optional custom sorting."""
    table = Table(title=title, box=box.ROUNDED, show_lines=False, title_style="bold magenta")
    table.add_column("Status", justify="center", width=8)
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Details", style="white")

    if custom_sort_order:
        sort_map = {name: i for i, name in enumerate(custom_sort_order)}
        findings = sorted(findings, key=lambda f: sort_map.get(f.name.split(":", 1)[-1], 999))

    for f in findings:
        check_name = f.name.split(":", 1)[-1].replace("_", " ").title()
        table.add_row(STATUS_STYLES[f.ok], check_name, f.details)

    console.print(table)


def _render_kv_table(findings: List[Finding]) -> None:
    table = Table(title="Key-Value Store", box=box.ROUNDED, title_style="bold magenta")
    table.add_column("Index", justify="right", style="dim")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Type", style="yellow")
    table.add_column("Value", style="white")
    for index, f in enumerate(findings, start=1):
        ctx = f.context
        table.add_row(str(index), ctx.get("key", "N/A"), ctx.get("type", "N/A"), ctx.get("value", ""))
    console.print(table)


def _render_reason_matrix(rep: AnalysisReport) -> None:
    if not rep.reason_matrix:
        return
    rt = Table(title="Reason Matrix (Decode Failures)", box=box.SIMPLE_HEAVY, show_lines=False)
    rt.add_column("Error", style="bold")
    rt.add_column("Reason")
    for entry in rep.reason_matrix:
        rt.add_row(entry.target, entry.reason)
    console.print(rt)


def render_report(rep: AnalysisReport) -> None:
    """Render summary, model facts, optional key-value table and failures."""
    _render_summary(rep)

    checks = rep.group("decode") + rep.group("model_metadata")
    if checks:
        _render_generic_table(
            "Model Metadata",
            checks,
            custom_sort_order=["decode", "Architecture", "Model_Type", "File_Type", "Layers"],
        )

    kv = rep.group("kv_store")
    if kv:
        _render_kv_table(kv)

    _render_reason_matrix(rep)
