"""
CLI package for campaign_registry.

Provides the Typer application entrypoint and shared CLI utilities.
"""

from campaign_registry.cli.app import app, main

__all__ = [
    "app",
    "main",
]
