from __future__ import annotations

import sys
from pathlib import Path
from typing import Mapping, Sequence, Union

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .cli_errors import handle_cli_errors
from .config import AppSettings
from .errors import GeoIPError
from .logging_config import LOG_FORMATS, setup_logging
from .models import LookupRecord
from .provisioner import DatabaseProvisioner
from .resolver import GeoResolver, default_db_dir
from .serialize import dumps, results_to_dict

console = Console()
config = AppSettings()

TABLE_COLUMNS = (
    ("Country", "country_code"),
    ("Region", "region"),
    ("City", "city"),
    ("Latitude", "latitude"),
    ("Longitude", "longitude"),
    ("Timezone", "timezone"),
    ("ASN", "asn"),
    ("Organization", "asn_org"),
)


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=config.LOG_LEVEL, show_default=True)
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Also write logs here.")
@click.option(
    "--log-format", type=click.Choice(sorted(LOG_FORMATS)), default="simple", show_default=True
)
@click.option("--color/--no-color", default=None, help="Colour log output (default: auto).")
def cli(log_level: str, log_file: Path | None, log_format: str, color: bool | None) -> None:
    """
    hostgeo: offline IP geolocation and ASN lookups.
    """
    setup_logging(log_level, log_file=log_file, log_format=log_format, use_color=color)


def _display_table(results: Mapping[str, Union[LookupRecord, GeoIPError]]) -> None:
    table = Table(title="GeoIP lookup")
    table.add_column("Address", style="cyan", no_wrap=True)
    for title, _ in TABLE_COLUMNS:
        table.add_column(title)

    for ip, result in results.items():
        if isinstance(result, GeoIPError):
            table.add_row(ip, f"[red]{result.message}[/red]", *[""] * (len(TABLE_COLUMNS) - 1))
            continue
        values = result.to_dict()
        table.add_row(
            ip,
            *[str(values.get(field, "")) for _, field in TABLE_COLUMNS],
            style=None if result.has_location else "dim",
        )

    console.print(table)


@cli.command()
@click.argument("addresses", nargs=-1, required=True)
@click.option("--db-dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--language", default=config.LOOKUP_LANGUAGE, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@handle_cli_errors(context="Lookup")
def lookup(
    addresses: Sequence[str], db_dir: Path | None, language: str, as_json: bool
) -> None:
    """Look up location and ASN data for one or more IP addresses."""
    with GeoResolver(db_dir, language=language) as resolver:
        results = resolver.lookup_many(addresses)

    if as_json:
        click.echo(dumps(results_to_dict(results)))
    else:
        _display_table(results)

    failed = sum(1 for result in results.values() if isinstance(result, GeoIPError))
    if failed:
        click.echo(f"{failed} of {len(results)} lookups failed", err=True)
        sys.exit(1)


@cli.command()
@click.option("--db-dir", type=click.Path(file_okay=False, path_type=Path))
@handle_cli_errors(context="Database download")
def update_databases(db_dir: Path | None) -> None:
    """Download any GeoIP database missing from the database directory."""
    target = db_dir or default_db_dir()
    console.print(f"Checking GeoIP databases in {target}...")
    paths = DatabaseProvisioner().ensure(target)
    console.print("✅ All databases present:")
    console.print(f"   {paths.city}")
    console.print(f"   {paths.asn}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":  # pragma: no cover - module execution convenience
    main()
