# tests/test_cli.py

from __future__ import annotations

import json

from typer.testing import CliRunner

from campaign_registry.cli.app import app

runner = CliRunner()


def test_stats_command(base_registry_path, session_paths) -> None:
    result = runner.invoke(app, ["stats", str(base_registry_path), "--session", str(session_paths[0])])
    assert result.exit_code == 0, result.output
    assert "Campaign Registry Statistics" in result.output
    assert "Index tokens" in result.output


def test_resolve_command(base_registry_path) -> None:
    result = runner.invoke(app, ["resolve", "Nováka", str(base_registry_path), "--date", "2026-01-01"])
    assert result.exit_code == 0, result.output
    assert "character/Jan Novák" in result.output
    assert "stem" in result.output


def test_resolve_command_unresolved(base_registry_path) -> None:
    result = runner.invoke(app, ["resolve", "Zzyzx", str(base_registry_path)])
    assert result.exit_code == 1
    assert "unresolved" in result.output


def test_resolve_command_without_fuzzy(base_registry_path) -> None:
    fuzzy = runner.invoke(app, ["resolve", "Vyšehrat", str(base_registry_path)])
    strict = runner.invoke(app, ["resolve", "Vyšehrat", str(base_registry_path), "--no-fuzzy"])
    assert fuzzy.exit_code == 0, fuzzy.output
    assert strict.exit_code == 1


def test_resolve_command_rejects_unknown_kind(base_registry_path) -> None:
    result = runner.invoke(app, ["resolve", "Praha", str(base_registry_path), "--kind", "dragon"])
    assert result.exit_code != 0


def test_export_command(tmp_path, base_registry_path, override_registry_path, session_paths) -> None:
    out = tmp_path / "export.json"
    args = ["export", str(base_registry_path), str(override_registry_path), "--out", str(out), "--date", "2026-04-10"]
    for path in session_paths:
        args += ["--session", str(path)]

    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output

    data = json.loads(out.read_text(encoding="utf-8"))
    jan = next(i for i in data["identities"] if i["name"] == "Jan Novák")
    assert jan["current"]["status"] == "Inactive"
    assert data["metrics"]["events_applied"] == 2


def test_missing_registry_file(tmp_path) -> None:
    result = runner.invoke(app, ["stats", str(tmp_path / "missing.md")])
    assert result.exit_code != 0
