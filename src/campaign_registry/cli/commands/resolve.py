from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from campaign_registry.cli.utils import as_date, load_campaign
from campaign_registry.index.resolver import ALL_STAGES, NON_FUZZY_STAGES, resolve_detailed

console = Console()


def resolve_command(
    query: str = typer.Argument(..., help="Name as written in play, in any declined form"),
    registry: List[Path] = typer.Argument(..., exists=True, readable=True),
    kind: Optional[List[str]] = typer.Option(
        None,
        "--kind",
        "-k",
        help="Restrict to an identity kind (repeatable)",
    ),
    session: Optional[List[Path]] = typer.Option(None, "--session", "-s", exists=True, readable=True),
    on: Optional[datetime] = typer.Option(None, "--date", formats=["%Y-%m-%d"]),
    no_fuzzy: bool = typer.Option(
        False,
        "--no-fuzzy",
        help="Stop after the exact, stem and alternation stages",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Resolve a name to a canonical identity and show its current state.
    """
    _, result = load_campaign(registry, session_paths=session, reference_date=as_date(on), verbose=verbose)

    stages = NON_FUZZY_STAGES if no_fuzzy else ALL_STAGES
    try:
        found = resolve_detailed(query, result.index, kind=kind or None, cache=result.cache, stages=stages)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--kind") from exc

    if not found.resolved:
        reason = "ambiguous" if found.ambiguous else "unresolved"
        console.print(f"[bold red]{query}[/bold red]: {reason}")
        raise typer.Exit(code=1)

    identity = found.owner

    table = Table(title=f"Resolved: {query}")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("canonical_id", identity.canonical_id or identity.flat_id)
    table.add_row("kind", identity.kind.value)
    table.add_row("stage", found.stage or "")
    table.add_row("token", found.token or "")
    if found.distance is not None:
        table.add_row("distance", str(found.distance))
    for attr, value in sorted(identity.current.items()):
        if value is not None:
            table.add_row(attr, value)
    for attr, values in sorted(identity.current_lists.items()):
        if values:
            table.add_row(attr, ", ".join(values))

    console.print(table)
