"""Shared CLI infrastructure: option decorators, error handlers, and the CLI group."""

from __future__ import annotations

import logging
from typing import Callable

import click

import chain_migrator
from chain_migrator.exceptions import (
    ConfigError,
    FeedError,
    GatewayCallFailed,
    LedgerCorrupt,
    LedgerPersistFailed,
    MalformedRecord,
    MigratorError,
)
from chain_migrator.utils.logging import log_with_context

logger = logging.getLogger("chain_migrator")

RESUME_HINT = "Progress up to the failed record is saved in the ledger; re-run the same command to resume."


# ---------------------------------------------------------------------------
# Shared option decorator
# ---------------------------------------------------------------------------


def common_options(f: Callable[..., None]) -> Callable[..., None]:
    """Decorator that adds options shared across multiple subcommands.

    Args:
        f: The command function.

    Returns:
        ``f`` with --network, --config and --verbose attached.
    """
    f = click.option(
        "--network",
        required=True,
        help="Network name to migrate (e.g. mainnet, goerli)",
    )(f)
    f = click.option(
        "--config",
        default="config.yaml",
        show_default=True,
        help="Path to the migration config YAML",
    )(f)
    f = click.option(
        "--verbose",
        "-v",
        is_flag=True,
        default=False,
        help="Show DEBUG messages (per-record state changes, sent transactions) on the console",
    )(f)
    return f


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=chain_migrator.__version__, prog_name="chain-migrator")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Resumable on-chain state migration tool.

    Args:
        ctx: The Click context (injected by ``@click.pass_context``).
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def handle_gateway_error(e: GatewayCallFailed) -> None:
    """Report a failed on-chain operation with enough context to resume.

    Args:
        e: The gateway failure to report.
    """
    identity = f" for record {e.identity}" if e.identity else ""
    log_with_context(
        logging.ERROR,
        f"Transaction {e.label}{identity} failed ({e.kind}): {e}",
        label=e.label,
        identity=e.identity,
    )
    if e.kind == "reverted":
        log_with_context(
            logging.INFO,
            "The contract rejected the call. Check the record data and the migrating account's permissions.",
        )
    elif e.kind in ("timeout", "network"):
        log_with_context(
            logging.INFO,
            "The transaction may still confirm. Check it on-chain before re-running.",
        )
    log_with_context(logging.INFO, RESUME_HINT)


def handle_exception(e: BaseException) -> None:
    """Handle different types of exceptions.

    Args:
        e: The exception to handle.
    """
    if isinstance(e, GatewayCallFailed):
        handle_gateway_error(e)
    elif isinstance(e, MalformedRecord):
        log_with_context(
            logging.ERROR,
            f"Malformed record in category '{e.category}' at position {e.index}: {e}",
            category=e.category,
        )
        log_with_context(
            logging.INFO, "Fix the subgraph dump and re-run; completed records will be skipped."
        )
    elif isinstance(e, (LedgerPersistFailed, LedgerCorrupt)):
        log_with_context(logging.ERROR, f"Ledger error: {e}")
        log_with_context(
            logging.INFO,
            "Migration halted because progress can no longer be tracked safely.",
        )
    elif isinstance(e, (ConfigError, FeedError)):
        log_with_context(logging.ERROR, str(e))
    elif isinstance(e, MigratorError):
        log_with_context(logging.ERROR, str(e))
    elif isinstance(e, FileNotFoundError):
        log_with_context(logging.ERROR, f"File not found: {e}")
        log_with_context(
            logging.INFO,
            "Check the dump_dir, deployments_dir and abi_dir settings in the config.",
        )
    elif isinstance(e, KeyboardInterrupt):
        log_with_context(logging.WARNING, "Migration interrupted.")
        log_with_context(logging.INFO, RESUME_HINT)
    else:
        log_with_context(logging.ERROR, f"Migration failed: {e}", exc_info=True)
