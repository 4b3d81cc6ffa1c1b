from __future__ import annotations

import time
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich.console import Console

from campaign_registry.config import get_config
from campaign_registry.core.context import RunContext
from campaign_registry.core.pipeline import Pipeline, RunResult
from campaign_registry.exporter import serialize_to_json_string
from campaign_registry.logging import get_logger

console = Console()


def as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def load_campaign(
    registry_paths: Sequence[Path],
    *,
    session_paths: Optional[Sequence[Path]] = None,
    reference_date: Optional[date] = None,
    verbose: bool = False,
) -> Tuple[RunContext, RunResult]:
    """
    Registry files (+ optional session logs) -> merged registry and name index.
    """
    paths: List[Path] = list(registry_paths) + list(session_paths or [])
    for path in paths:
        if not path.exists():
            raise FileNotFoundError(path)

    t0 = time.perf_counter()

    ctx = RunContext(
        config=get_config(),
        logger=get_logger("cli"),
        registry_paths=[str(p) for p in registry_paths],
        session_paths=[str(p) for p in session_paths or []],
        reference_date=reference_date,
    )
    result = Pipeline(ctx).run()

    elapsed = time.perf_counter() - t0

    if verbose:
        console.log(f"Loaded {len(result.registry)} identities in {elapsed:.2f}s")

    return ctx, result


def write_json(
    data: Dict[str, Any],
    *,
    out: Path | None,
    pretty: bool,
):
    """
    Write JSON to stdout or file.
    """
    payload = serialize_to_json_string(data, pretty=pretty)

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)
