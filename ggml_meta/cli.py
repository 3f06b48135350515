# ggml_meta/cli.py
"""
cli.py

Rich console CLI:
- scan:    decode a GGUF/GGLA container header, print model facts, optional
           key-value table and any decode failure.
- version: show the package version.
"""
from __future__ import annotations

import argparse
import os
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from ggml_meta import __version__
from ggml_meta.analysis.analyzer import AVAILABLE_STAGES
from ggml_meta.analysis.ggml_analyzer import GGMLAnalyzer
from ggml_meta.logging import configure_logging
from ggml_meta.reporting.console import render_report
from ggml_meta.reporting.json_reporter import write_json

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ggmeta",
        description="Read model facts from GGUF / GGLA container headers without loading weights.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", title="Available Commands", metavar="<command>")

    sp_scan = sub.add_parser("scan", help="Decode the metadata header of a model file")
    sp_scan.add_argument("path", help="Path to model file (format is detected from its magic)")
    sp_scan.add_argument("--debug", action="store_true", help="Enable debug logging")
    sp_scan.add_argument(
        "--json-out", type=str, default=None, help="Write JSON report to this path"
    )
    sp_scan.add_argument(
        "--show-kv", action="store_true", help="List every key-value pair in the header"
    )
    sp_scan.add_argument(
        "--stage",
        nargs="+",
        choices=AVAILABLE_STAGES,
        metavar="STAGE",
        help=(
            f"Run only specific stages. Defaults to all stages if not provided.\n"
            f"Available stages: {', '.join(AVAILABLE_STAGES)}."
        ),
    )

    sub.add_parser("version", help="Show the version of ggml-meta")

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "version":
        console.print(f"ggml-meta {__version__}")
        return 0

    if args.cmd == "scan":
        configure_logging(debug=args.debug)
        path = args.path
        if not os.path.isfile(path):
            console.print(f"[red]File not found:[/red] {path}")
            return 2

        stages = args.stage or AVAILABLE_STAGES
        console.print(f"[dim]Running stages: {', '.join(stages)}...[/dim]")

        rep = GGMLAnalyzer(path, include_kv=args.show_kv).run(stages=stages)

        console.print(
            Panel(
                f"[bold]Result:[/bold] {'[green]OK[/green]' if rep.ok else '[red]FAILED[/red]'}",
                style="bold cyan",
            )
        )
        render_report(rep)

        if args.json_out:
            write_json(rep, args.json_out)
            console.print(f"[dim]Wrote JSON report → {args.json_out}[/dim]")

        return 0 if rep.ok else 1

    parser.print_help()
    return 0
