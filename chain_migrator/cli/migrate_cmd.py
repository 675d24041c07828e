"""CLI command handler for the migrate workflow."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from chain_migrator.cli.common import cli, common_options, handle_exception
from chain_migrator.cli.report import (
    create_output_directory,
    print_run_summary,
    write_summary_report,
)
from chain_migrator.core.config import load_config
from chain_migrator.core.context import MigrationContext
from chain_migrator.core.migrator import ChainStateMigrator, RunSummary
from chain_migrator.services.dry_run_gateway import DryRunGateway
from chain_migrator.services.gateway import build_gateway
from chain_migrator.utils.logging import log_with_context, setup_logger

# Create logger instance
logger = logging.getLogger("chain_migrator")


# ---------------------------------------------------------------------------
# migrate subcommand
# ---------------------------------------------------------------------------


@cli.command()
@common_options
@click.option(
    "--dry_run",
    is_flag=True,
    default=False,
    help="Check the ledger and the dump and log what would be submitted, without sending transactions",
)
@click.option(
    "--output_dir",
    default="migration_output",
    show_default=True,
    help="Directory for run logs and reports",
)
def migrate(
    network: str,
    config: str,
    verbose: bool,
    dry_run: bool,
    output_dir: str,
) -> None:
    """Migrate the subgraph dump of a network onto the new deployment.

    Args:
        network: Network name to migrate.
        config: Path to config YAML.
        verbose: Enable verbose console logging.
        dry_run: Log what would be submitted without sending transactions.
        output_dir: Directory for run logs and reports.
    """
    run_dir = create_output_directory(output_dir)
    setup_logger(verbose, run_dir)

    log_startup_info(network, config, dry_run, verbose)
    log_with_context(logging.INFO, f"Output directory: {run_dir}")

    try:
        ctx = MigrationContext.for_network(
            network, load_config(Path(config)), dry_run=dry_run, verbose=verbose
        )
        summary = run_migration(ctx)
    except (Exception, KeyboardInterrupt) as e:
        handle_exception(e)
        sys.exit(1)

    print_run_summary(summary)
    write_summary_report(summary, run_dir)


def run_migration(ctx: MigrationContext, gateway: Optional[Any] = None) -> RunSummary:
    """Build the gateway for ``ctx`` (unless given) and run the migrator.

    Args:
        ctx: The migration context.
        gateway: Optional gateway to use instead of the web3 or dry-run one.

    Returns:
        The RunSummary of the completed run.
    """
    if gateway is None and not ctx.is_skipped_network:
        gateway = DryRunGateway() if ctx.dry_run else build_gateway(ctx)
    migrator = ChainStateMigrator(ctx, gateway)
    return migrator.migrate()


def log_startup_info(network: str, config: str, dry_run: bool, verbose: bool) -> None:
    """Log the parameters the migration was started with."""
    log_with_context(logging.INFO, "Starting migration with the following parameters:")
    log_with_context(logging.INFO, f"- Network: {network}")
    log_with_context(logging.INFO, f"- Config: {config}")
    log_with_context(logging.INFO, f"- Dry run: {dry_run}")
    log_with_context(logging.INFO, f"- Verbose logging: {verbose}")
