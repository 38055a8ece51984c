"""svcbind CLI — inspect the services bound to an application."""

import logging
import re
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from svcbind import __version__
from svcbind.errors import AmbiguousMatchError, CatalogLoadError

console = Console()

EXIT_NO_MATCH = 1
EXIT_ERROR = 2

file_option = click.option(
    "--file",
    "-f",
    "binding_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Binding payload (JSON or YAML). Defaults to $VCAP_SERVICES.",
)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug diagnostics")
def main(verbose: bool):
    """svcbind — resolve the services bound to an application.

    Reads the VCAP_SERVICES payload (or a file of the same shape) and finds
    services by name, label, or tag.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def _load(binding_file: str | None):
    from svcbind.loader import load_catalog

    try:
        return load_catalog(binding_file)
    except CatalogLoadError as e:
        console.print(f"[red]Failed to load services:[/] {e}")
        sys.exit(EXIT_ERROR)


def _compile_filter(service_filter: str) -> re.Pattern:
    try:
        return re.compile(service_filter)
    except re.error as e:
        console.print(f"[red]Invalid filter[/] '{escape(service_filter)}': {e}")
        sys.exit(EXIT_ERROR)


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@file_option
def list_services(binding_file: str | None):
    """List all bound services."""
    catalog = _load(binding_file)

    if not catalog:
        console.print("[yellow]No services are bound.[/]")
        return

    table = Table(title=f"Bound services ({len(catalog)})")
    table.add_column("Name", style="cyan")
    table.add_column("Label")
    table.add_column("Tags")
    table.add_column("Credentials", style="dim")

    for service in catalog:
        credentials = service.credentials if isinstance(service.credentials, dict) else {}
        table.add_row(
            str(service.name or ""),
            str(service.label or ""),
            ", ".join(str(t) for t in service.tags),
            ", ".join(sorted(str(k) for k in credentials)),
        )

    console.print(table)


# ── Find ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("service_filter")
@file_option
def find(service_filter: str, binding_file: str | None):
    """Show the first service matching SERVICE_FILTER.

    SERVICE_FILTER is a regular expression searched against the name of
    user-provided services, the label, and the tags.
    """
    catalog = _load(binding_file)
    pattern = _compile_filter(service_filter)
    service = catalog.find_service(pattern)

    if service is None:
        console.print(f"[yellow]No service matches '{service_filter}'.[/]")
        sys.exit(EXIT_NO_MATCH)

    console.print(f"  [cyan]{service.display_name}[/] ({service.label})")
    if service.tags:
        console.print(f"    tags: {', '.join(str(t) for t in service.tags)}")
    if isinstance(service.credentials, dict) and service.credentials:
        keys = ", ".join(sorted(str(k) for k in service.credentials))
        console.print(f"    credentials: {keys}")


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("service_filter")
@click.option(
    "--credential",
    "-c",
    "credentials",
    multiple=True,
    help="Required credential key. Comma separated keys mean any one of them.",
)
@file_option
def check(service_filter: str, credentials: tuple, binding_file: str | None):
    """Check that exactly one service matches SERVICE_FILTER.

    Exits 0 when a single service matches and has every required credential,
    1 when none qualifies, and 2 when the filter is invalid or ambiguous.
    """
    catalog = _load(binding_file)
    pattern = _compile_filter(service_filter)
    required = [c.split(",") if "," in c else c for c in credentials]

    try:
        found = catalog.one_service(pattern, *required)
    except AmbiguousMatchError as e:
        console.print(f"[red]AMBIGUOUS[/] {e}")
        sys.exit(EXIT_ERROR)

    if not found:
        console.print(f"[yellow]NO MATCH[/] No single service qualifies for '{service_filter}'.")
        sys.exit(EXIT_NO_MATCH)

    service = catalog.find_service(pattern)
    console.print(f"[green]OK[/] {service.display_name} ({service.label})")


if __name__ == "__main__":
    main()
