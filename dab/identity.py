"""Caller identities and the controller guard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


ANONYMOUS_PRINCIPAL = "2vxsx-fae"


class DabError(Exception):
    """Base class for invariant and state errors raised by dab."""


class ControllerNotInitialized(DabError, RuntimeError):
    """Raised when the controller is read before initialization.

    This is a broken startup invariant, not a recoverable condition.
    """


class ControllerAlreadySet(DabError):
    """Raised on any attempt to assign the controller a second time."""


@dataclass(frozen=True, order=True)
class Identity:
    """Opaque caller identity, compared by its principal text."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValueError("Identity text must be a non-empty string")

    @classmethod
    def anonymous(cls) -> Identity:
        return cls(ANONYMOUS_PRINCIPAL)

    def __str__(self) -> str:
        return self.text


class ControllerGuard:
    """Holds the single controller identity and answers access checks.

    The controller is assigned once, by whoever triggered initialization,
    and can never be rotated.
    """

    def __init__(self, controller: Optional[Identity] = None) -> None:
        self._controller = controller

    def initialize(self, caller: Identity) -> None:
        if self._controller is not None:
            raise ControllerAlreadySet(
                f"Controller is already set to '{self._controller}'"
            )
        self._controller = caller

    @property
    def initialized(self) -> bool:
        return self._controller is not None

    @property
    def controller(self) -> Identity:
        if self._controller is None:
            raise ControllerNotInitialized("Cannot read an uninitialized controller")
        return self._controller

    def is_controller(self, caller: Identity) -> bool:
        """Return True iff ``caller`` is the controller."""
        return caller == self.controller
