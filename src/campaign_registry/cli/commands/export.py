from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from campaign_registry.cli.utils import as_date, load_campaign, write_json
from campaign_registry.exporter import build_export_dict

console = Console()


def export_command(
    registry: List[Path] = typer.Argument(..., exists=True, readable=True, help="Registry files, in override order"),
    session: Optional[List[Path]] = typer.Option(
        None,
        "--session",
        "-s",
        exists=True,
        readable=True,
        help="Session log to merge (repeatable)",
    ),
    on: Optional[datetime] = typer.Option(
        None,
        "--date",
        formats=["%Y-%m-%d"],
        help="Reference date for current values (default: today)",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Export enriched identities to JSON (stdout by default).
    """
    ctx, result = load_campaign(registry, session_paths=session, reference_date=as_date(on), verbose=verbose)

    data = build_export_dict(
        result.registry.in_order(),
        diagnostics=ctx.diagnostics,
        metrics=result.merge_metrics,
    )

    if verbose:
        console.log("Exporting JSON")

    write_json(data, out=out, pretty=pretty)

    if verbose:
        console.log("Export complete")
