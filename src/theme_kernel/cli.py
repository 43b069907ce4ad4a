"""CLI entry point for the theme kernel."""

from __future__ import annotations

import sys

import click

from . import KERNEL_VERSION
from .core.errors import ConfigError, UsageError


@click.group()
@click.option("--log-level", default="WARNING", help="Log level for diagnostics on stderr")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Log output format",
)
def main(log_level: str, log_format: str) -> None:
    """Theme kernel configuration tools."""
    from .observability.logger import setup_logging

    setup_logging(level=log_level, format=log_format)


@main.command("export-config")
@click.argument("config_file")
@click.argument("environment", default="cli")
@click.option(
    "--kernel-version",
    default=KERNEL_VERSION,
    show_default=True,
    help="Kernel version checked against tolerant windows",
)
def export_config(config_file: str, environment: str, kernel_version: str) -> None:
    """Validate CONFIG_FILE and print it as pretty JSON.

    ENVIRONMENT defaults to "cli"; "production" and "prod" forbid tolerant mode.
    """
    from .config.exporter import ConfigExporter
    from .config.loader import load_raw_config
    from .config.schema import ConfigSchema

    try:
        raw = load_raw_config(config_file)
    except UsageError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)

    try:
        validated = ConfigSchema().validate(raw, kernel_version, environment)
    except ConfigError as exc:
        click.echo(f"Invalid configuration: {exc}", err=True)
        sys.exit(1)

    click.echo(ConfigExporter.to_json(validated))


@main.command()
def compat() -> None:
    """Show the config_version compatibility table."""
    from .config.policy import ConfigVersionPolicy

    records = ConfigVersionPolicy().records

    click.echo(f"{'Version':10s} {'State':12s} {'Tolerant':9s} {'Kernel window'}")
    click.echo("-" * 50)
    for version, record in sorted(records.items()):
        window = (
            f"[{record.tolerant_min_kernel}, {record.tolerant_max_kernel}]"
            if record.has_tolerant_window
            else "-"
        )
        tolerant = "yes" if record.allow_tolerant else "no"
        click.echo(f"{version:10s} {record.state.value:12s} {tolerant:9s} {window}")


if __name__ == "__main__":
    main()
