from __future__ import annotations

import typer

from campaign_registry.cli.commands.export import export_command
from campaign_registry.cli.commands.resolve import resolve_command
from campaign_registry.cli.commands.stats import stats_command

app = typer.Typer(
    name="campaign-registry",
    help="Campaign identity registry: name resolution, session merge and export",
    add_completion=False,
)

app.command("resolve")(resolve_command)
app.command("stats")(stats_command)
app.command("export")(export_command)


def main():
    app()


if __name__ == "__main__":
    main()
