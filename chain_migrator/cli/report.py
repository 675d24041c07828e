"""
Run summary and ledger status output for the chain state migration tool
"""

from __future__ import annotations

import datetime
import os
from typing import Optional

import click
import yaml

from chain_migrator.core.costs import gwei_to_ether
from chain_migrator.core.categories import CATEGORIES, record_identity
from chain_migrator.core.feed import RecordFeed
from chain_migrator.core.ledger import LEDGER_CATEGORIES, Ledger, is_migrated
from chain_migrator.core.migrator import RunSummary
from chain_migrator.utils.logging import logger


def create_output_directory(base_dir: str = "migration_output") -> str:
    """Create a timestamped output directory for this run and return its path."""
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    run_output_dir = os.path.join(base_dir, f"run_{timestamp}")
    os.makedirs(run_output_dir, exist_ok=True)
    return run_output_dir


def print_run_summary(summary: RunSummary) -> None:
    """Print the end-of-run summary with the projected gas costs."""
    title = "DRY RUN SUMMARY" if summary.dry_run else "MIGRATION SUMMARY"
    click.echo("\n" + "=" * 80)
    click.echo(title)
    click.echo("=" * 80)
    click.echo(f"Network: {summary.network_name} (chain id {summary.chain_id})")

    if summary.network_skipped:
        click.echo("Network is configured to be skipped; nothing was migrated.")
        click.echo("=" * 80)
        return

    verb = "Would migrate" if summary.dry_run else "Migrated"
    for category in LEDGER_CATEGORIES:
        click.echo(
            f"{category:<10} {verb}: {summary.executed.get(category, 0):>6}   "
            f"Already migrated: {summary.skipped.get(category, 0):>6}"
        )

    click.echo(f"\nTotal gas used: {summary.total_gas}")
    for category, gas in summary.gas_by_category.items():
        click.echo(f"  {category}: {gas}")
    click.echo("Projected cost:")
    for price, cost in summary.projected_costs.items():
        click.echo(f"  @ {price} gwei: {gwei_to_ether(cost)} ETH")
    click.echo("=" * 80)


def print_ledger_status(
    network_name: str,
    chain_id: int,
    ledger: Ledger,
    feed: Optional[RecordFeed] = None,
) -> None:
    """Print how many identities are migrated per category, and pending counts if a feed is given."""
    click.echo(f"Ledger status for {network_name} (chain id {chain_id})")
    feed_records = {}
    if feed is not None:
        feed_records = {c.ledger_key: c.feed_selector(feed) for c in CATEGORIES}

    for category in LEDGER_CATEGORIES:
        done = sum(1 for flag in ledger.get(category, {}).values() if flag)
        line = f"  {category:<10} migrated: {done:>6}"
        if category in feed_records:
            records = feed_records[category]
            identities = [record_identity(record) for record in records]
            pending = sum(
                1
                for identity in identities
                if identity is not None and not is_migrated(ledger, category, identity)
            )
            line += f"   pending: {pending:>6} of {len(records)}"
            malformed = identities.count(None)
            if malformed:
                line += f"   without id: {malformed}"
        click.echo(line)


def write_summary_report(summary: RunSummary, output_dir: str) -> str:
    """Write the run summary as YAML into ``output_dir`` and return its path."""
    report = {
        "network": summary.network_name,
        "chain_id": summary.chain_id,
        "dry_run": summary.dry_run,
        "network_skipped": summary.network_skipped,
        "executed": dict(summary.executed),
        "skipped": dict(summary.skipped),
        "total_gas": summary.total_gas,
        "gas_by_category": dict(summary.gas_by_category),
        "projected_costs_gwei": {int(k): int(v) for k, v in summary.projected_costs.items()},
        "generated_at": datetime.datetime.now().isoformat(),
    }
    report_file = os.path.join(output_dir, "migration_report.yaml")
    with open(report_file, "w") as f:
        yaml.safe_dump(report, f, default_flow_style=False, sort_keys=False)
    logger.info(f"Migration report saved to {report_file}")
    return report_file
