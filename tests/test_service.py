"""Tests for the registry service, host adapter, state store and config."""

import json
import tempfile
import threading
from pathlib import Path

import pytest
import yaml

from dab.canister import CallContext, RegistryCanister
from dab.config import DabConfig, load_config
from dab.identity import ControllerAlreadySet, Identity
from dab.registry.models import AddressLookup, CanisterDescriptor
from dab.results import ResultKind
from dab.service import RegistryService
from dab.store import StateError, StateStore

ALICE = Identity("alice-principal")
BOB = Identity("bob-principal")
XTC = Identity("aanaa-xaaaa-aaaah-aaeiq-cai")


def _xtc() -> CanisterDescriptor:
    return CanisterDescriptor(principal_id=XTC, name="xtc", standard="Dank")


# --- Service ---


def test_service_controller_is_fixed():
    service = RegistryService(ALICE)
    assert service.controller == ALICE
    assert service.is_controller(ALICE)
    assert not service.is_controller(BOB)
    with pytest.raises(ControllerAlreadySet):
        service.guard.initialize(BOB)


def test_service_routes_both_registries():
    service = RegistryService(ALICE)
    assert service.add(ALICE, _xtc()).ok
    assert service.add(BOB, _xtc()).kind == ResultKind.auth_denied

    service.add_address(BOB, "xtc", XTC)
    assert service.get_address(BOB, "xtc").canister_id == XTC
    assert service.get_addresses(BOB) == [AddressLookup("xtc", XTC)]
    assert service.remove_addresses(BOB) == 1
    assert service.get("xtc") == _xtc()


def test_snapshot_round_trip():
    service = RegistryService(ALICE)
    service.add(ALICE, _xtc())
    service.add_address(BOB, "mine", XTC)

    data = json.loads(json.dumps(service.snapshot()))
    restored = RegistryService.from_snapshot(data)

    assert restored.controller == ALICE
    assert restored.get("xtc") == _xtc()
    assert restored.get_address(BOB, "mine").canister_id == XTC
    assert restored.remove(BOB, "xtc").kind == ResultKind.auth_denied
    assert restored.remove(ALICE, "xtc").ok


def test_concurrent_adds_are_serialized():
    service = RegistryService(ALICE)

    def worker(owner: Identity):
        for i in range(200):
            service.add_address(owner, f"name-{i:03d}", XTC)

    owners = [Identity(f"owner-{n}") for n in range(4)]
    threads = [threading.Thread(target=worker, args=(o,)) for o in owners]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(service.address_book) == 800
    for owner in owners:
        names = [lookup.canister_name for lookup in service.get_addresses(owner)]
        assert names == sorted(names)
        assert len(names) == 200


# --- Host adapter ---


def test_canister_init_sets_caller_as_controller():
    canister = RegistryCanister.init(CallContext(caller=ALICE))
    alice = CallContext(caller=ALICE)
    bob = CallContext(caller=BOB)

    assert canister.add(alice, _xtc()) == "Operation was successful."
    assert canister.add(bob, _xtc()) == "You are not authorized to make changes."
    assert canister.get_canister(bob, "xtc") == _xtc()
    assert canister.get_canister(bob, "dab") is None
    assert canister.get_all(bob) == [_xtc()]


def test_canister_rendered_messages():
    canister = RegistryCanister.init(CallContext(caller=ALICE))
    alice = CallContext(caller=ALICE)

    assert canister.remove(alice, "xtc") == "No such entry exists in the registry."
    assert (
        canister.edit(alice, "xtc", standard="DIP721")
        == "The canister you want to change does not exist in the registry."
    )
    assert (
        canister.edit(alice, "xtc")
        == "You should pass at least one of the principal_id or standard parameters."
    )
    long_name = CanisterDescriptor(principal_id=XTC, name="n" * 121, standard="Dank")
    assert (
        canister.add(alice, long_name)
        == "The name of this canister has exceeded the limitation of 120 characters."
    )


def test_canister_names():
    assert RegistryCanister.registry_name() == "NFT Registry Canister"
    assert RegistryCanister.address_book_name() == "DAB"


def test_canister_address_book_uses_caller():
    canister = RegistryCanister.init(CallContext(caller=ALICE))
    bob = CallContext(caller=BOB)

    canister.add_address(bob, "xtc", XTC)
    assert canister.get_address(bob, "xtc").canister_id == XTC
    assert canister.get_address(CallContext(caller=ALICE), "xtc").canister_id is None
    assert canister.get_addresses(bob) == [AddressLookup("xtc", XTC)]

    canister.remove_address(bob, "xtc")
    assert canister.get_addresses(bob) == []
    canister.add_address(bob, "xtc", XTC)
    assert canister.remove_addresses(bob) == 1


def test_canister_upgrade_keeps_state():
    canister = RegistryCanister.init(CallContext(caller=ALICE))
    canister.add(CallContext(caller=ALICE), _xtc())

    upgraded = RegistryCanister.post_upgrade(canister.pre_upgrade())
    assert upgraded.service.controller == ALICE
    assert upgraded.get_canister(CallContext(caller=BOB), "xtc") == _xtc()


# --- State store ---


def test_store_save_and_load():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = StateStore(Path(tmpdir) / "nested" / "state.json")
        assert not store.exists()

        service = RegistryService(ALICE)
        service.add(ALICE, _xtc())
        store.save(service)

        assert store.exists()
        loaded = store.load()
        assert loaded.controller == ALICE
        assert loaded.get("xtc") == _xtc()


def test_store_missing_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = StateStore(Path(tmpdir) / "state.json")
        with pytest.raises(StateError):
            store.load()


def test_store_corrupt_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "state.json"
        path.write_text("{not json")
        with pytest.raises(StateError):
            StateStore(path).load()

        path.write_text(json.dumps({"registry": {}}))
        with pytest.raises(StateError):
            StateStore(path).load()

        for bad in (
            {"controller": "alice-principal", "registry": None},
            {"controller": "alice-principal", "registry": []},
            {"controller": "alice-principal", "address_book": {}},
            {"controller": "alice-principal", "address_book": None},
            ["alice-principal"],
        ):
            path.write_text(json.dumps(bad))
            with pytest.raises(StateError):
                StateStore(path).load()


def test_store_rejects_misnamed_registry_entry():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "state.json"
        snapshot = {
            "controller": "alice-principal",
            "registry": {"a": {"principal_id": "p-1", "name": "b", "standard": "s"}},
        }
        path.write_text(json.dumps(snapshot))

        with pytest.raises(StateError):
            StateStore(path).load()


# --- Config ---


def test_config_defaults_when_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(Path(tmpdir) / "dab.yaml")
        assert config == DabConfig()


def test_config_from_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "dab.yaml"
        with open(path, "w") as f:
            yaml.dump({"state_path": "/tmp/dab-state.json", "log_level": "info"}, f)

        config = load_config(path)
        assert config.state_path == "/tmp/dab-state.json"
        assert config.log_level == "INFO"
