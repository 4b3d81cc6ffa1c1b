"""
CLI command modules for campaign_registry.

Each command module defines a single Typer-compatible command function.
"""

from campaign_registry.cli.commands.export import export_command
from campaign_registry.cli.commands.resolve import resolve_command
from campaign_registry.cli.commands.stats import stats_command

__all__ = [
    "export_command",
    "resolve_command",
    "stats_command",
]
