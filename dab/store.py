"""File-based snapshot storage for registry state.

Keeps the service snapshot as a single JSON document so state survives
between processes, the way a host's stable memory would across upgrades.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from dab.identity import DabError
from dab.service import RegistryService

logger = logging.getLogger(__name__)


class StateError(DabError):
    """Raised when the state file cannot be read or written."""


class StateStore:
    """JSON file holding one ``RegistryService`` snapshot."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> RegistryService:
        if not self.path.exists():
            raise StateError(f"No state at {self.path}; run 'dab init' first")
        try:
            data = json.loads(self.path.read_text())
            return RegistryService.from_snapshot(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise StateError(f"Corrupt state file {self.path}: {e}") from e
        except OSError as e:
            raise StateError(f"Cannot read {self.path}: {e}") from e

    def save(self, service: RegistryService) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.path.write_text(json.dumps(service.snapshot(), indent=2))
        except OSError as e:
            raise StateError(f"Cannot write {self.path}: {e}") from e
        logger.debug("Saved state to %s", self.path)
