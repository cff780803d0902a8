"""Registry data models — canister descriptors and address lookups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dab.identity import Identity


@dataclass(frozen=True)
class CanisterDescriptor:
    """A single entry in the named registry, keyed by ``name``."""

    principal_id: Identity
    name: str
    standard: str

    def to_dict(self) -> dict:
        return {
            "principal_id": self.principal_id.text,
            "name": self.name,
            "standard": self.standard,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CanisterDescriptor:
        return cls(
            principal_id=Identity(data["principal_id"]),
            name=data["name"],
            standard=data.get("standard", ""),
        )


@dataclass(frozen=True)
class AddressLookup:
    """Result of an address book lookup.

    Always echoes the requested name; ``canister_id`` is None on a miss.
    """

    canister_name: str
    canister_id: Optional[Identity] = None

    @property
    def found(self) -> bool:
        return self.canister_id is not None
