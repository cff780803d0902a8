"""DAB CLI — drive the canister registries from the command line."""

import logging

import click
from rich.console import Console
from rich.table import Table

from dab import __version__
from dab.canister import ADDRESS_BOOK_NAME, REGISTRY_NAME
from dab.config import load_config
from dab.identity import DabError, Identity
from dab.registry.models import CanisterDescriptor
from dab.results import OperationResult, ResultKind, render_result
from dab.service import RegistryService
from dab.store import StateStore

console = Console()

_KIND_STYLE = {
    ResultKind.success: "green",
    ResultKind.auth_denied: "red",
    ResultKind.validation_error: "yellow",
    ResultKind.not_found: "yellow",
}


class Session:
    """Per-invocation state shared by every command."""

    def __init__(self, store: StateStore, caller: Identity):
        self.store = store
        self.caller = caller
        self._service: RegistryService | None = None

    @property
    def service(self) -> RegistryService:
        if self._service is None:
            self._service = self.store.load()
        return self._service

    def save(self) -> None:
        self.store.save(self.service)


def _identity(value: str) -> Identity:
    try:
        return Identity(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _report(result: OperationResult, session: Session) -> None:
    style = _KIND_STYLE[result.kind]
    console.print(f"  [{style}]{render_result(result)}[/]")
    if not result.ok:
        raise click.exceptions.Exit(1)
    _run(session.save)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Path to dab.yaml")
@click.option("--state", "state_path", default=None, help="State file (overrides config)")
@click.option(
    "--as",
    "caller",
    default=None,
    envvar="DAB_CALLER",
    help="Principal making the call (default: anonymous)",
)
@click.pass_context
def main(
    ctx: click.Context, config_path: str | None, state_path: str | None, caller: str | None
):
    """DAB — canister registry and per-caller address book."""
    config = load_config(config_path)
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    store = StateStore(state_path or config.state_path)
    ctx.obj = Session(store, _identity(caller) if caller else Identity.anonymous())


def _run(fn):
    """Turn dab errors into a clean CLI failure."""
    try:
        return fn()
    except (DabError, ValueError) as e:
        raise click.ClickException(str(e)) from e


# ── Init ─────────────────────────────────────────────────────────────


@main.command()
@click.pass_obj
def init(session: Session):
    """Create fresh state with the caller as controller."""
    if session.store.exists():
        raise click.ClickException(f"State already exists at {session.store.path}")

    service = RegistryService(session.caller)
    _run(lambda: session.store.save(service))
    console.print(f"\n[bold blue]DAB[/] — initialized, controller [cyan]{service.controller}[/]")


# ── Named registry ───────────────────────────────────────────────────


@main.group()
def registry():
    """Manage the named canister registry (controller only for changes)."""


@registry.command(name="add")
@click.argument("name")
@click.argument("principal_id")
@click.option("--standard", "-s", required=True, help="Token standard, e.g. DIP721")
@click.pass_obj
def registry_add(session: Session, name: str, principal_id: str, standard: str):
    """Add or replace a canister entry."""
    descriptor = CanisterDescriptor(
        principal_id=_identity(principal_id), name=name, standard=standard
    )
    _report(_run(lambda: session.service.add(session.caller, descriptor)), session)


@registry.command(name="remove")
@click.argument("name")
@click.pass_obj
def registry_remove(session: Session, name: str):
    """Remove a canister entry."""
    _report(_run(lambda: session.service.remove(session.caller, name)), session)


@registry.command(name="edit")
@click.argument("name")
@click.option("--principal", "-p", default=None, help="New canister principal")
@click.option("--standard", "-s", default=None, help="New token standard")
@click.pass_obj
def registry_edit(session: Session, name: str, principal: str | None, standard: str | None):
    """Edit an entry. --principal wins over --standard when both are given."""
    principal_id = _identity(principal) if principal is not None else None
    _report(
        _run(lambda: session.service.edit(session.caller, name, principal_id, standard)),
        session,
    )


@registry.command(name="get")
@click.argument("name")
@click.pass_obj
def registry_get(session: Session, name: str):
    """Show one canister entry."""
    descriptor = _run(lambda: session.service.get(name))
    if descriptor is None:
        console.print(f"[yellow]No canister named '{name}'.[/]")
        raise click.exceptions.Exit(1)

    console.print(f"  [cyan]{descriptor.name}[/] {descriptor.principal_id} ({descriptor.standard})")


@registry.command(name="list")
@click.pass_obj
def registry_list(session: Session):
    """List all canister entries."""
    entries = _run(lambda: session.service.get_all())

    if not entries:
        console.print("[yellow]Registry is empty.[/]")
        return

    table = Table(title=f"{REGISTRY_NAME} ({len(entries)} canisters)")
    table.add_column("Name", style="cyan")
    table.add_column("Principal")
    table.add_column("Standard")

    for entry in sorted(entries, key=lambda e: e.name):
        table.add_row(entry.name, str(entry.principal_id), entry.standard)

    console.print(table)


# ── Address book ─────────────────────────────────────────────────────


@main.group()
def address():
    """Manage the caller's own address book."""


@address.command(name="add")
@click.argument("name")
@click.argument("canister_id")
@click.pass_obj
def address_add(session: Session, name: str, canister_id: str):
    """Save a canister under NAME."""
    target = _identity(canister_id)
    _run(lambda: session.service.add_address(session.caller, name, target))
    _run(session.save)
    console.print(f"  [green]Saved '{name}' -> {target}[/]")


@address.command(name="remove")
@click.argument("name")
@click.pass_obj
def address_remove(session: Session, name: str):
    """Forget NAME (no error if it was never saved)."""
    _run(lambda: session.service.remove_address(session.caller, name))
    _run(session.save)
    console.print(f"  [green]Forgot '{name}'[/]")


@address.command(name="get")
@click.argument("name")
@click.pass_obj
def address_get(session: Session, name: str):
    """Resolve NAME to a canister id."""
    lookup = _run(lambda: session.service.get_address(session.caller, name))
    if not lookup.found:
        console.print(f"  [cyan]{lookup.canister_name}[/] [yellow]not found[/]")
        raise click.exceptions.Exit(1)

    console.print(f"  [cyan]{lookup.canister_name}[/] {lookup.canister_id}")


@address.command(name="list")
@click.pass_obj
def address_list(session: Session):
    """List the caller's saved canisters."""
    lookups = _run(lambda: session.service.get_addresses(session.caller))

    if not lookups:
        console.print("[yellow]Address book is empty.[/]")
        return

    table = Table(title=f"{ADDRESS_BOOK_NAME} — {session.caller} ({len(lookups)} entries)")
    table.add_column("Name", style="cyan")
    table.add_column("Canister")

    for lookup in lookups:
        table.add_row(lookup.canister_name, str(lookup.canister_id))

    console.print(table)


@address.command(name="clear")
@click.pass_obj
def address_clear(session: Session):
    """Remove every entry the caller has saved."""
    removed = _run(lambda: session.service.remove_addresses(session.caller))
    _run(session.save)
    console.print(f"  [green]Removed {removed} entr{'y' if removed == 1 else 'ies'}.[/]")


if __name__ == "__main__":
    main()
