from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from campaign_registry.core.diagnostics import Diagnostics


@dataclass
class RunContext:
    """
    Shared pipeline context for one logical run.
    This object is passed between orchestration layers.
    """

    config: Any
    logger: Any

    registry_paths: List[str] = field(default_factory=list)
    session_paths: List[str] = field(default_factory=list)
    output_path: Optional[str] = None
    reference_date: Optional[date] = None

    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    stats: Dict[str, Any] = field(default_factory=dict)

    debug: bool = False

    def __post_init__(self) -> None:
        if self.diagnostics.logger is None:
            self.diagnostics.logger = self.logger
