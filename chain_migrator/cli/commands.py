#!/usr/bin/env python3
"""
Main execution module for the chain state migration tool.

Assembles the click group from the subcommand modules and provides the
console-script entry point.
"""

from __future__ import annotations

from pathlib import Path

import click

from chain_migrator.cli import migrate_cmd, status_cmd  # noqa: F401  (register subcommands)
from chain_migrator.cli.common import cli, handle_exception
from chain_migrator.core.config import create_default_config

__all__ = ["cli", "handle_exception", "init_config", "main"]


@cli.command("init-config")
@click.option(
    "--output",
    default="config.yaml",
    show_default=True,
    help="Where to write the default config",
)
def init_config(output: str) -> None:
    """Write a default configuration file (never overwrites)."""
    if not create_default_config(Path(output)):
        raise SystemExit(1)
    click.echo(f"Wrote default configuration to {output}")


def main() -> None:
    """Main entry point for the chain state migration tool."""
    cli()


if __name__ == "__main__":
    main()
