"""Host adapter — maps host entry points onto a ``RegistryService``.

The host resolves the caller of every call and hands it over in a
``CallContext``. Update calls that mutate the named registry answer with
rendered text; reads answer with model objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dab.identity import Identity
from dab.registry.models import AddressLookup, CanisterDescriptor
from dab.results import render_result
from dab.service import RegistryService

REGISTRY_NAME = "NFT Registry Canister"
ADDRESS_BOOK_NAME = "DAB"


@dataclass(frozen=True)
class CallContext:
    """What the host knows about the current call."""

    caller: Identity


class RegistryCanister:
    """Entry points for both registries, bound to one service instance."""

    def __init__(self, service: RegistryService):
        self.service = service

    @classmethod
    def init(cls, ctx: CallContext) -> RegistryCanister:
        """Install hook: the caller of ``init`` becomes the controller."""
        return cls(RegistryService(ctx.caller))

    def pre_upgrade(self) -> dict:
        return self.service.snapshot()

    @classmethod
    def post_upgrade(cls, snapshot: dict) -> RegistryCanister:
        return cls(RegistryService.from_snapshot(snapshot))

    # ── Queries ──────────────────────────────────────────────────────

    @staticmethod
    def registry_name() -> str:
        return REGISTRY_NAME

    @staticmethod
    def address_book_name() -> str:
        return ADDRESS_BOOK_NAME

    # ── Named registry ───────────────────────────────────────────────

    def add(self, ctx: CallContext, canister_info: CanisterDescriptor) -> str:
        return render_result(self.service.add(ctx.caller, canister_info))

    def remove(self, ctx: CallContext, name: str) -> str:
        return render_result(self.service.remove(ctx.caller, name))

    def edit(
        self,
        ctx: CallContext,
        name: str,
        principal_id: Optional[Identity] = None,
        standard: Optional[str] = None,
    ) -> str:
        return render_result(self.service.edit(ctx.caller, name, principal_id, standard))

    def get_canister(self, ctx: CallContext, name: str) -> Optional[CanisterDescriptor]:
        return self.service.get(name)

    def get_all(self, ctx: CallContext) -> list[CanisterDescriptor]:
        return self.service.get_all()

    # ── Address book ─────────────────────────────────────────────────

    def add_address(self, ctx: CallContext, canister_name: str, canister_id: Identity) -> None:
        self.service.add_address(ctx.caller, canister_name, canister_id)

    def remove_address(self, ctx: CallContext, canister_name: str) -> None:
        self.service.remove_address(ctx.caller, canister_name)

    def get_address(self, ctx: CallContext, canister_name: str) -> AddressLookup:
        return self.service.get_address(ctx.caller, canister_name)

    def get_addresses(self, ctx: CallContext) -> list[AddressLookup]:
        return self.service.get_addresses(ctx.caller)

    def remove_addresses(self, ctx: CallContext) -> int:
        return self.service.remove_addresses(ctx.caller)
