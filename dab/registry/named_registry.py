"""Named registry — a controller-gated catalog of canister descriptors."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from dab.identity import ControllerGuard, Identity
from dab.registry.models import CanisterDescriptor
from dab.results import OperationResult

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 120

MSG_NAME_TOO_LONG = (
    f"The name of this canister has exceeded the limitation of {MAX_NAME_LENGTH} characters."
)
MSG_NO_EDIT_FIELD = "You should pass at least one of the principal_id or standard parameters."
MSG_NO_SUCH_ENTRY = "No such entry exists in the registry."
MSG_EDIT_MISSING = "The canister you want to change does not exist in the registry."


class NamedRegistry:
    """Maps canister names to descriptors.

    Mutations require the caller to be the controller held by ``guard``;
    reads are open to everyone. Names are unique: ``add`` on an existing
    name replaces the stored descriptor.
    """

    def __init__(self, guard: ControllerGuard):
        self.guard = guard
        self._entries: dict[str, CanisterDescriptor] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def _denied(self, caller: Identity, operation: str) -> bool:
        if self.guard.is_controller(caller):
            return False
        logger.warning("Rejected %s from non-controller %s", operation, caller)
        return True

    # ------------------------------------------------------------------
    # Mutations (controller only)
    # ------------------------------------------------------------------

    def add(self, caller: Identity, descriptor: CanisterDescriptor) -> OperationResult:
        """Insert or overwrite the entry stored under ``descriptor.name``."""
        if self._denied(caller, "add"):
            return OperationResult.auth_denied()

        if len(descriptor.name) > MAX_NAME_LENGTH:
            return OperationResult.validation_error(MSG_NAME_TOO_LONG)

        replaced = descriptor.name in self._entries
        self._entries[descriptor.name] = descriptor
        logger.info(
            "%s canister '%s' -> %s",
            "Replaced" if replaced else "Added",
            descriptor.name,
            descriptor.principal_id,
        )
        return OperationResult.success()

    def remove(self, caller: Identity, name: str) -> OperationResult:
        if self._denied(caller, "remove"):
            return OperationResult.auth_denied()

        if name not in self._entries:
            return OperationResult.not_found(MSG_NO_SUCH_ENTRY)

        del self._entries[name]
        logger.info("Removed canister '%s'", name)
        return OperationResult.success()

    def edit(
        self,
        caller: Identity,
        name: str,
        principal_id: Optional[Identity] = None,
        standard: Optional[str] = None,
    ) -> OperationResult:
        """Update one field of an existing entry.

        When ``principal_id`` is given it is applied and ``standard`` is
        ignored; ``standard`` is only applied on its own.
        """
        if self._denied(caller, "edit"):
            return OperationResult.auth_denied()

        if principal_id is None and standard is None:
            return OperationResult.validation_error(MSG_NO_EDIT_FIELD)

        current = self._entries.get(name)
        if current is None:
            return OperationResult.not_found(MSG_EDIT_MISSING)

        if principal_id is not None:
            updated = replace(current, principal_id=principal_id)
        else:
            updated = replace(current, standard=standard)
        self._entries[name] = updated
        logger.info("Edited canister '%s'", name)
        return OperationResult.success(updated)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[CanisterDescriptor]:
        return self._entries.get(name)

    def get_all(self) -> list[CanisterDescriptor]:
        """Return every descriptor. Order is not part of the contract."""
        return list(self._entries.values())

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, dict]:
        return {name: d.to_dict() for name, d in self._entries.items()}

    @classmethod
    def from_dict(cls, guard: ControllerGuard, data: dict[str, dict]) -> NamedRegistry:
        registry = cls(guard)
        for name, entry in data.items():
            descriptor = CanisterDescriptor.from_dict(entry)
            if descriptor.name != name:
                raise ValueError(
                    f"Registry key '{name}' holds a descriptor named '{descriptor.name}'"
                )
            registry._entries[name] = descriptor
        return registry
