"""Registry service — the single owner of all registry state.

One ``RegistryService`` is built at startup and handed to whatever layer
dispatches calls. Each public method runs under one lock, so the service
keeps the one-call-at-a-time guarantee even without a serializing host.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from dab.identity import ControllerGuard, Identity
from dab.registry.address_book import AddressBook
from dab.registry.models import AddressLookup, CanisterDescriptor
from dab.registry.named_registry import NamedRegistry
from dab.results import OperationResult

logger = logging.getLogger(__name__)


class RegistryService:
    """Named registry + address book behind a single controller."""

    def __init__(self, controller: Identity):
        self.guard = ControllerGuard()
        self.guard.initialize(controller)
        self.registry = NamedRegistry(self.guard)
        self.address_book = AddressBook()
        self._lock = threading.Lock()
        logger.debug("Registry service ready, controller %s", controller)

    @property
    def controller(self) -> Identity:
        return self.guard.controller

    def is_controller(self, caller: Identity) -> bool:
        with self._lock:
            return self.guard.is_controller(caller)

    # ── Named registry ───────────────────────────────────────────────

    def add(self, caller: Identity, descriptor: CanisterDescriptor) -> OperationResult:
        with self._lock:
            return self.registry.add(caller, descriptor)

    def remove(self, caller: Identity, name: str) -> OperationResult:
        with self._lock:
            return self.registry.remove(caller, name)

    def edit(
        self,
        caller: Identity,
        name: str,
        principal_id: Optional[Identity] = None,
        standard: Optional[str] = None,
    ) -> OperationResult:
        with self._lock:
            return self.registry.edit(caller, name, principal_id, standard)

    def get(self, name: str) -> Optional[CanisterDescriptor]:
        with self._lock:
            return self.registry.get(name)

    def get_all(self) -> list[CanisterDescriptor]:
        with self._lock:
            return self.registry.get_all()

    # ── Address book ─────────────────────────────────────────────────

    def add_address(self, caller: Identity, canister_name: str, canister_id: Identity) -> None:
        with self._lock:
            self.address_book.add_address(caller, canister_name, canister_id)

    def remove_address(self, caller: Identity, canister_name: str) -> None:
        with self._lock:
            self.address_book.remove_address(caller, canister_name)

    def get_address(self, caller: Identity, canister_name: str) -> AddressLookup:
        with self._lock:
            return self.address_book.get_address(caller, canister_name)

    def get_addresses(self, caller: Identity) -> list[AddressLookup]:
        with self._lock:
            return self.address_book.get_all(caller)

    def remove_addresses(self, caller: Identity) -> int:
        with self._lock:
            return self.address_book.remove_all(caller)

    # ── Snapshot ─────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        """Return the whole state as plain JSON-serializable data."""
        with self._lock:
            return {
                "controller": self.guard.controller.text,
                "registry": self.registry.to_dict(),
                "address_book": self.address_book.to_dict(),
            }

    @classmethod
    def from_snapshot(cls, data: dict) -> RegistryService:
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a mapping")
        registry = data.get("registry", {})
        address_book = data.get("address_book", [])
        if not isinstance(registry, dict):
            raise ValueError("Snapshot 'registry' must be a mapping")
        if not isinstance(address_book, list):
            raise ValueError("Snapshot 'address_book' must be a list")

        service = cls(Identity(data["controller"]))
        service.registry = NamedRegistry.from_dict(service.guard, registry)
        service.address_book = AddressBook.from_dict(address_book)
        return service
