"""Address book — per-caller (owner, name) -> canister id map.

Keys are kept sorted by (owner, name) so every entry belonging to one
owner occupies a contiguous run and can be listed or dropped with a
bisect-bounded slice instead of a full scan.
"""

from __future__ import annotations

import bisect
import logging

from dab.identity import Identity
from dab.registry.models import AddressLookup

logger = logging.getLogger(__name__)

Key = tuple[Identity, str]


def _owner_of(key: Key) -> Identity:
    return key[0]


class AddressBook:
    """Self-service address book. An owner only ever touches its own keys."""

    def __init__(self) -> None:
        self._keys: list[Key] = []
        self._targets: dict[Key, Identity] = {}

    def __len__(self) -> int:
        return len(self._targets)

    def _owner_range(self, owner: Identity) -> tuple[int, int]:
        lo = bisect.bisect_left(self._keys, owner, key=_owner_of)
        hi = bisect.bisect_right(self._keys, owner, lo=lo, key=_owner_of)
        return lo, hi

    def add_address(self, owner: Identity, canister_name: str, canister_id: Identity) -> None:
        """Insert or overwrite ``(owner, canister_name)``."""
        key = (owner, canister_name)
        if key not in self._targets:
            bisect.insort(self._keys, key)
        self._targets[key] = canister_id
        logger.info("%s saved '%s' -> %s", owner, canister_name, canister_id)

    def remove_address(self, owner: Identity, canister_name: str) -> None:
        """Delete ``(owner, canister_name)``; a missing key is a no-op."""
        key = (owner, canister_name)
        if self._targets.pop(key, None) is None:
            return
        idx = bisect.bisect_left(self._keys, key)
        del self._keys[idx]
        logger.info("%s removed '%s'", owner, canister_name)

    def get_address(self, owner: Identity, canister_name: str) -> AddressLookup:
        return AddressLookup(
            canister_name=canister_name,
            canister_id=self._targets.get((owner, canister_name)),
        )

    def get_all(self, owner: Identity) -> list[AddressLookup]:
        """Return all of ``owner``'s entries, ordered by name."""
        lo, hi = self._owner_range(owner)
        return [
            AddressLookup(canister_name=name, canister_id=self._targets[(owner, name)])
            for _, name in self._keys[lo:hi]
        ]

    def remove_all(self, owner: Identity) -> int:
        """Delete every entry owned by ``owner``. Returns how many were removed."""
        lo, hi = self._owner_range(owner)
        for key in self._keys[lo:hi]:
            del self._targets[key]
        del self._keys[lo:hi]
        if hi > lo:
            logger.info("%s cleared %d address(es)", owner, hi - lo)
        return hi - lo

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_dict(self) -> list[dict]:
        return [
            {
                "account": owner.text,
                "canister_name": name,
                "canister_id": self._targets[(owner, name)].text,
            }
            for owner, name in self._keys
        ]

    @classmethod
    def from_dict(cls, data: list[dict]) -> AddressBook:
        book = cls()
        for record in data:
            key = (Identity(record["account"]), record["canister_name"])
            book._targets[key] = Identity(record["canister_id"])
        book._keys = sorted(book._targets)
        return book
