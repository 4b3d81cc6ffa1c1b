from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from campaign_registry.cli.utils import as_date, load_campaign

console = Console()


def stats_command(
    registry: List[Path] = typer.Argument(..., exists=True, readable=True),
    session: Optional[List[Path]] = typer.Option(None, "--session", "-s", exists=True, readable=True),
    on: Optional[datetime] = typer.Option(None, "--date", formats=["%Y-%m-%d"]),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Show identity, index and diagnostic counts for a campaign.
    """
    ctx, result = load_campaign(registry, session_paths=session, reference_date=as_date(on), verbose=verbose)

    table = Table(title="Campaign Registry Statistics")
    table.add_column("Entry", style="bold")
    table.add_column("Count", justify="right")

    for kind, count in result.registry.counts().items():
        table.add_row(f"Identities: {kind}", str(count))
    table.add_row("Index tokens", str(len(result.index)))
    table.add_row("Ambiguous tokens", str(len(result.index.ambiguous_entries())))
    table.add_row("Session events", str(len(result.events)))
    for kind, count in ctx.diagnostics.counts().items():
        table.add_row(f"Diagnostics: {kind}", str(count))

    console.print(table)
