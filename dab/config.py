"""Configuration loaded from a YAML file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

DEFAULT_CONFIG_FILE = "dab.yaml"


@dataclass
class DabConfig:
    state_path: str = ".dab/state.json"
    log_level: str = "WARNING"


def load_config(path: str | Path | None = None) -> DabConfig:
    """Load config from ``path`` (default ``dab.yaml``); a missing file yields defaults."""
    path = Path(path or DEFAULT_CONFIG_FILE)
    if not path.exists():
        return DabConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    defaults = DabConfig()
    return DabConfig(
        state_path=str(data.get("state_path", defaults.state_path)),
        log_level=str(data.get("log_level", defaults.log_level)).upper(),
    )
