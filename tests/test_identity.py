"""Tests for identities and the controller guard."""

import pytest

from dab.identity import (
    ControllerAlreadySet,
    ControllerGuard,
    ControllerNotInitialized,
    Identity,
)

ALICE = Identity("alice-principal")
BOB = Identity("bob-principal")


def test_identity_equality_and_hash():
    assert Identity("alice-principal") == ALICE
    assert ALICE != BOB
    assert len({ALICE, Identity("alice-principal"), BOB}) == 2


def test_identity_ordering():
    assert sorted([BOB, ALICE]) == [ALICE, BOB]


def test_identity_rejects_empty_text():
    with pytest.raises(ValueError):
        Identity("")
    with pytest.raises(ValueError):
        Identity("   ")


def test_anonymous_identity():
    assert Identity.anonymous().text == "2vxsx-fae"


def test_guard_checks_controller():
    guard = ControllerGuard()
    guard.initialize(ALICE)
    assert guard.is_controller(ALICE)
    assert not guard.is_controller(BOB)
    assert guard.controller == ALICE


def test_guard_cannot_be_reassigned():
    guard = ControllerGuard()
    guard.initialize(ALICE)
    with pytest.raises(ControllerAlreadySet):
        guard.initialize(BOB)
    assert guard.controller == ALICE


def test_uninitialized_guard_is_fatal():
    guard = ControllerGuard()
    assert not guard.initialized
    with pytest.raises(ControllerNotInitialized):
        guard.is_controller(ALICE)
    with pytest.raises(RuntimeError):
        guard.controller
