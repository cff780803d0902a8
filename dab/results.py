"""Typed operation results shared by both registries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResultKind(str, Enum):
    """Outcome of a registry operation."""

    success = "success"
    auth_denied = "auth_denied"
    validation_error = "validation_error"
    not_found = "not_found"


MSG_SUCCESS = "Operation was successful."
MSG_UNAUTHORIZED = "You are not authorized to make changes."


@dataclass(frozen=True)
class OperationResult:
    """Discriminated result: a kind, a human-readable message, an optional payload."""

    kind: ResultKind
    message: str = ""
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.success

    @classmethod
    def success(cls, payload: Any = None) -> OperationResult:
        return cls(ResultKind.success, MSG_SUCCESS, payload)

    @classmethod
    def auth_denied(cls) -> OperationResult:
        return cls(ResultKind.auth_denied, MSG_UNAUTHORIZED)

    @classmethod
    def validation_error(cls, message: str) -> OperationResult:
        return cls(ResultKind.validation_error, message)

    @classmethod
    def not_found(cls, message: str) -> OperationResult:
        return cls(ResultKind.not_found, message)


def render_result(result: OperationResult) -> str:
    """Render a result to the text the host boundary sends back."""
    return result.message or result.kind.value
