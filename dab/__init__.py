"""DAB — canister registries for a single-controller execution host.

Two registries live side by side:
- Named registry: name -> canister descriptor, mutated only by the controller
- Address book: (caller, name) -> canister id, each caller manages its own entries
"""

__version__ = "0.1.0"
