import os
from pathlib import Path

import yaml

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "campaign_registry.yml"
CONFIG_ENV_VAR = "CAMPAIGN_REGISTRY_CONFIG"


class RegistryConfig:
    def __init__(self, data):
        self.paths = data.get("paths", {}) or {}
        self.logging = data.get("logging", {}) or {}
        self.index = data.get("index", {}) or {}
        self.resolver = data.get("resolver", {}) or {}
        self.sections = data.get("sections", {}) or {}
        self.tags = data.get("tags", {}) or {}
        self.debug = data.get("debug", False)


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else CONFIG_PATH


def load_config(path: Path | None = None) -> 'RegistryConfig':
    path = path or config_path()
    if not path.exists():
        # Installed without the repository's config/ directory: built-in defaults.
        return RegistryConfig({})

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return RegistryConfig(data)


_config_cache = None


def get_config() -> 'RegistryConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
