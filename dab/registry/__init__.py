"""Registries — the named canister registry and the per-caller address book.

- NamedRegistry: controller-gated name -> descriptor catalog with open reads
- AddressBook: self-service (owner, name) -> canister id map with owner range scans
"""
