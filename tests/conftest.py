import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

DATA_DIR = PROJECT_ROOT / "tests" / "data"


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def base_registry_path() -> Path:
    return DATA_DIR / "registry_base.md"


@pytest.fixture
def override_registry_path() -> Path:
    return DATA_DIR / "registry_override.md"


@pytest.fixture
def session_paths() -> list:
    return [DATA_DIR / "session_01.md", DATA_DIR / "session_02.md"]
