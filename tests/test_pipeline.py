# tests/test_pipeline.py

from __future__ import annotations

import json
from datetime import date

import pytest

from campaign_registry.config import RegistryConfig, get_config, load_config
from campaign_registry.core.context import RunContext
from campaign_registry.core.diagnostics import DiagnosticKind
from campaign_registry.core.exceptions import ParseExecutionError, PipelineError
from campaign_registry.core.pipeline import Pipeline, index_settings
from campaign_registry.logging import get_logger, list_active_loggers
from campaign_registry.registry import IdentityKind


def _context(**kwargs) -> RunContext:
    return RunContext(config=get_config(), logger=get_logger("pipeline"), **kwargs)


def test_full_run(tmp_path, base_registry_path, override_registry_path, session_paths) -> None:
    out = tmp_path / "campaign.json"
    ctx = _context(
        registry_paths=[str(base_registry_path), str(override_registry_path)],
        session_paths=[str(p) for p in session_paths],
        output_path=str(out),
        reference_date=date(2026, 4, 10),
    )
    result = Pipeline(ctx).run()

    jan = result.registry.get("Jan Novák", IdentityKind.CHARACTER)
    assert jan.current["status"] == "Inactive"
    assert result.merge_metrics["events_applied"] == 2
    assert len(result.events) == 4
    assert ctx.stats["identities"] == len(result.registry)
    assert ctx.diagnostics.counts()[DiagnosticKind.UNRESOLVED_REFERENCE.value] == 1

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["metrics"]["events_unresolved"] == 1
    assert any(i["canonical_id"] == "place/Česko/Ostrava" for i in data["identities"])


def test_run_without_sessions(base_registry_path) -> None:
    ctx = _context(registry_paths=[str(base_registry_path)])
    result = Pipeline(ctx).run()
    assert result.events == []
    assert result.merge_metrics == {}
    assert result.index.lookup("praha") is not None


def test_failures_are_wrapped(tmp_path) -> None:
    ctx = _context(registry_paths=[str(tmp_path / "missing.md")])
    with pytest.raises(ParseExecutionError) as excinfo:
        Pipeline(ctx).run()
    assert isinstance(excinfo.value, PipelineError)
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_index_settings_from_config() -> None:
    config = RegistryConfig({"index": {"min_word_length": 4}, "resolver": {"use_bktree": False}})
    assert index_settings(config) == {"min_word_length": 4, "deterministic": True, "use_tree": False}
    assert index_settings(RegistryConfig({}))["use_tree"] is True


def test_config_file_and_missing_file(tmp_path) -> None:
    config = get_config()
    assert config.tags["loc"] == "location"
    assert config.sections["cast"] == "character"

    defaults = load_config(tmp_path / "nope.yml")
    assert defaults.index == {}
    assert defaults.debug is False


def test_module_loggers_hang_under_the_base_logger() -> None:
    log = get_logger("resolver")
    assert log.name == "campaign_registry.resolver"
    assert "campaign_registry.resolver" in list_active_loggers()
