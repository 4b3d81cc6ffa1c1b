# src/campaign_registry/utils/pathing.py

from __future__ import annotations

from pathlib import Path
from typing import Union


# This file lives at:
#   <project_root>/src/campaign_registry/utils/pathing.py
#
# Path(__file__).resolve().parents gives:
#   [0] .../src/campaign_registry/utils
#   [1] .../src/campaign_registry
#   [2] .../src
#   [3] .../ (project root)
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


def project_root() -> Path:
    """
    Return the absolute path to the project root directory.

    The project root is the directory that contains:
      - src/
      - tests/
      - config/
    """
    return _PROJECT_ROOT


def resolve_project_path(relative: Union[str, Path]) -> Path:
    """
    Resolve a path relative to the project root.

    Examples:
        resolve_project_path("config/campaign_registry.yml")
        resolve_project_path(Path("tests") / "data" / "registry.md")
    """
    return project_root() / Path(relative)


def tests_data_path(*parts: Union[str, Path]) -> Path:
    """
    Return the absolute path to a file under tests/data/.

    Examples:
        tests_data_path("registry_base.md")
        tests_data_path("sessions", "session_01.md")
    """
    return resolve_project_path(Path("tests") / "data" / Path(*parts))
