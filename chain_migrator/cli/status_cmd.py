"""CLI command handler for inspecting and resetting a network's ledger."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from chain_migrator.cli.common import cli, common_options, handle_exception
from chain_migrator.cli.report import print_ledger_status
from chain_migrator.core.config import load_config
from chain_migrator.core.context import MigrationContext
from chain_migrator.core.feed import load_feed
from chain_migrator.core.ledger import LedgerStore
from chain_migrator.exceptions import FeedError
from chain_migrator.utils.logging import log_with_context, setup_logger

# ---------------------------------------------------------------------------
# status subcommand
# ---------------------------------------------------------------------------


@cli.command()
@common_options
@click.option(
    "--reset",
    is_flag=True,
    default=False,
    help="Delete the network's ledger so every record is migrated again (asks for confirmation)",
)
def status(network: str, config: str, verbose: bool, reset: bool) -> None:
    """Show migration progress recorded in a network's ledger.

    Args:
        network: Network name to inspect.
        config: Path to config YAML.
        verbose: Enable verbose console logging.
        reset: Delete the ledger after confirmation.
    """
    setup_logger(verbose)

    try:
        ctx = MigrationContext.for_network(network, load_config(Path(config)))
        store = LedgerStore(ctx.ledger_dir)

        if reset:
            click.confirm(
                f"Delete the ledger for {ctx.network_name}? Already-migrated records "
                "will be submitted again on the next run",
                default=False,
                abort=True,
            )
            if not store.clear(ctx.chain_id):
                log_with_context(logging.INFO, f"No ledger found for {ctx.network_name}")
            return

        ledger = store.load(ctx.chain_id)
        try:
            feed = load_feed(ctx.dump_dir, ctx.network_name)
        except FeedError as e:
            log_with_context(logging.WARNING, f"Pending counts unavailable: {e}")
            feed = None
    except click.Abort:
        raise
    except Exception as e:
        handle_exception(e)
        sys.exit(1)

    print_ledger_status(ctx.network_name, ctx.chain_id, ledger, feed)
