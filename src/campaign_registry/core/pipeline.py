from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List

from campaign_registry.core.context import RunContext
from campaign_registry.core.exceptions import ParseExecutionError, PipelineError
from campaign_registry.events.session_log import ChangeEvent, load_session_files
from campaign_registry.exporter import export_identities_json
from campaign_registry.index.name_index import NameIndex, build_name_index
from campaign_registry.index.resolver import ResolutionCache
from campaign_registry.postprocess.state_merger import merge_state
from campaign_registry.registry.build_registry import IdentityRegistry, parse_registry_files


def index_settings(config: Any) -> Dict[str, Any]:
    """Keyword arguments for build_name_index taken from the index/resolver config blocks."""
    index_cfg = getattr(config, "index", {}) or {}
    resolver_cfg = getattr(config, "resolver", {}) or {}
    return {
        "min_word_length": int(index_cfg.get("min_word_length", 3)),
        "deterministic": bool(index_cfg.get("deterministic_order", True)),
        "use_tree": bool(resolver_cfg.get("use_bktree", True)),
    }


@dataclass
class RunResult:
    registry: IdentityRegistry
    index: NameIndex
    cache: ResolutionCache
    events: List[ChangeEvent] = field(default_factory=list)
    merge_metrics: Dict[str, int] = field(default_factory=dict)


class Pipeline:
    """
    Orchestrates one run: registry files -> index -> session merge -> export.
    No business logic lives here.
    """

    def __init__(self, context: RunContext):
        self.ctx = context
        self.log = context.logger

    def _index_settings(self) -> dict:
        return index_settings(self.ctx.config)

    def run(self) -> RunResult:
        self.log.info("Pipeline starting")
        when: date = self.ctx.reference_date or date.today()

        try:
            registry = parse_registry_files(
                self.ctx.registry_paths,
                diagnostics=self.ctx.diagnostics,
                reference_date=when,
            )
            index = build_name_index(registry.named_identities(), **self._index_settings())
            cache = ResolutionCache()

            events: List[ChangeEvent] = []
            merge_metrics: Dict[str, int] = {}
            if self.ctx.session_paths:
                events = load_session_files(self.ctx.session_paths, diagnostics=self.ctx.diagnostics)
                result = merge_state(
                    list(registry),
                    events,
                    when,
                    index=index,
                    diagnostics=self.ctx.diagnostics,
                    cache=cache,
                )
                merge_metrics = result.metrics

            if self.ctx.output_path:
                export_identities_json(
                    registry.in_order(),
                    self.ctx.output_path,
                    diagnostics=self.ctx.diagnostics,
                    metrics=merge_metrics,
                )

            self.ctx.stats.update(
                {
                    "identities": len(registry),
                    "tokens": len(index),
                    "events": len(events),
                    "diagnostics": len(self.ctx.diagnostics),
                }
            )
            self.log.info("Pipeline completed successfully: %s", self.ctx.stats)

            return RunResult(
                registry=registry,
                index=index,
                cache=cache,
                events=events,
                merge_metrics=merge_metrics,
            )

        except PipelineError:
            raise
        except Exception as exc:
            self.log.exception("Pipeline execution failed")
            raise ParseExecutionError(str(exc)) from exc
