"""
Main migrator class for the chain state migration tool.

Walks the migration categories in their fixed order and, for every record
in feed order, checks the ledger, submits the migration transaction when
needed and persists the ledger before moving on. Any failure propagates
unchanged; the ledger already reflects every record completed before it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from tqdm import tqdm

from chain_migrator.core.categories import CATEGORIES, Category
from chain_migrator.core.context import MigrationContext
from chain_migrator.core.costs import CostAccumulator, gwei_to_ether
from chain_migrator.core.executor import TransactionExecutor
from chain_migrator.core.feed import Record, RecordFeed, load_feed
from chain_migrator.core.ledger import Ledger, LedgerStore, is_migrated
from chain_migrator.exceptions import MalformedRecord
from chain_migrator.utils.logging import log_with_context
from chain_migrator.utils.networks import get_deploy_address

BANNER = "~" * 59


class RecordState(Enum):
    """Lifecycle of a single record within a run."""

    PENDING = "pending"
    CHECKING = "checking"
    SKIPPED = "skipped"
    EXECUTING = "executing"
    RECORDED = "recorded"


@dataclass
class RunSummary:
    """Outcome of a completed migration run."""

    network_name: str
    chain_id: int
    dry_run: bool = False
    network_skipped: bool = False
    executed: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)
    total_gas: int = 0
    gas_by_category: dict[str, int] = field(default_factory=dict)
    projected_costs: dict[int, int] = field(default_factory=dict)

    @property
    def total_executed(self) -> int:
        return sum(self.executed.values())

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())


class ChainStateMigrator:
    """Migrates the subgraph dump of one network onto the new deployment."""

    def __init__(
        self,
        context: MigrationContext,
        gateway: Any,
        store: Optional[LedgerStore] = None,
        costs: Optional[CostAccumulator] = None,
        feed: Optional[RecordFeed] = None,
        categories: tuple[Category, ...] = CATEGORIES,
    ):
        self.ctx = context
        self.gateway = gateway
        self.store = store or LedgerStore(context.ledger_dir)
        self.costs = costs or CostAccumulator()
        self.executor = TransactionExecutor(self.costs, dry_run=context.dry_run)
        self.categories = categories
        self._feed = feed
        self._contracts: dict[str, Any] = {}
        self.ledger: Ledger = {}
        self.record_states: dict[str, RecordState] = {}

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _contract_address(self, name: str) -> str:
        override = self.ctx.config.contracts.get(name)
        if override:
            return override
        return get_deploy_address(self.ctx.deployments_dir, name, self.ctx.chain_id)

    def _contract(self, name: str) -> Any:
        """Return the gateway handle for ``name``, attaching it on first use."""
        if name not in self._contracts:
            address = self._contract_address(name)
            log_with_context(logging.INFO, f"  Loading {name} from: {address}")
            self._contracts[name] = self.gateway.get_contract(name, address)
        return self._contracts[name]

    def attach_contracts(self) -> None:
        """Resolve and attach every contract the categories use, in category order."""
        for category in self.categories:
            self._contract(category.contract_name)

    def _load_feed(self) -> RecordFeed:
        if self._feed is None:
            self._feed = load_feed(self.ctx.dump_dir, self.ctx.network_name)
        return self._feed

    # ------------------------------------------------------------------
    # Per-record processing
    # ------------------------------------------------------------------

    def _set_state(self, key: str, state: RecordState) -> RecordState:
        self.record_states[key] = state
        log_with_context(logging.DEBUG, f"{key} -> {state.value}")
        return state

    def process_record(self, category: Category, index: int, record: Record) -> RecordState:
        """Migrate one record unless the ledger says it is already done.

        Returns the terminal state reached, ``SKIPPED`` or ``RECORDED``.
        Exceptions from the executor or the ledger store propagate.
        """
        label = f"{self.ctx.config.tx_step}-{category.label_prefix}-{index}"

        identity = category.identity_fn(record)
        if identity is None:
            raise MalformedRecord(
                f"Record {index} in category '{category.ledger_key}' has no id "
                f"[TX-{label}]",
                category=category.ledger_key,
                index=index,
            )
        key = f"{category.ledger_key}:{identity}"
        self._set_state(key, RecordState.PENDING)
        fields = category.defaults_fn(record)

        self._set_state(key, RecordState.CHECKING)
        if is_migrated(self.ledger, category.ledger_key, identity):
            log_with_context(
                logging.INFO,
                f"  - [TX-{label}] Skipping: {identity} (already migrated)",
                category=category.ledger_key,
                label=label,
                identity=identity,
            )
            return self._set_state(key, RecordState.SKIPPED)

        self._set_state(key, RecordState.EXECUTING)
        contract = self._contract(category.contract_name)
        self.executor.execute(
            label,
            category.describe(identity, fields),
            category.operation_builder(contract, fields),
            category=category.ledger_key,
            identity=identity,
        )

        self.ledger.setdefault(category.ledger_key, {})[identity] = True
        if not self.ctx.dry_run:
            self.store.save(self.ctx.chain_id, self.ledger)
        return self._set_state(key, RecordState.RECORDED)

    def migrate_category(self, category: Category, records: tuple[Record, ...]) -> tuple[int, int]:
        """Process every record of a category in feed order.

        Returns ``(executed, skipped)`` counts.
        """
        log_with_context(
            logging.INFO,
            f"\n\n  Migrating {category.title.format(count=len(records))}...",
            category=category.ledger_key,
        )

        executed = skipped = 0
        pbar = tqdm(
            records,
            desc=f"{category.ledger_key}",
            disable=not records,
            leave=False,
        )
        for index, record in enumerate(pbar):
            state = self.process_record(category, index, record)
            if state is RecordState.RECORDED:
                executed += 1
            else:
                skipped += 1
        pbar.close()
        return executed, skipped

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def migrate(self) -> RunSummary:
        """Run the migration for the context's network."""
        summary = RunSummary(
            network_name=self.ctx.network_name,
            chain_id=self.ctx.chain_id,
            dry_run=self.ctx.dry_run,
        )

        if self.ctx.is_skipped_network:
            log_with_context(
                logging.INFO,
                f"Skipping migrations on {self.ctx.network_name} (chain id {self.ctx.chain_id})",
            )
            summary.network_skipped = True
            return summary

        log_with_context(logging.INFO, f"\n{BANNER}")
        log_with_context(
            logging.INFO,
            f"{self.ctx.log_prefix}Contract Migrations - {self.ctx.network_name} "
            f"(chain id {self.ctx.chain_id})",
        )
        log_with_context(logging.INFO, f"{BANNER}\n")

        self.attach_contracts()
        feed = self._load_feed()
        self.ledger = self.store.load(self.ctx.chain_id)

        for category in self.categories:
            executed, skipped = self.migrate_category(
                category, tuple(category.feed_selector(feed))
            )
            summary.executed[category.ledger_key] = executed
            summary.skipped[category.ledger_key] = skipped

        summary.total_gas = self.costs.total_gas
        summary.gas_by_category = dict(self.costs.by_category)
        summary.projected_costs = self.costs.project_costs(
            self.ctx.config.gas_price_tiers
        )

        log_with_context(logging.INFO, f"\n  {self.ctx.log_prefix}Contract Migration Complete.")
        log_with_context(logging.INFO, "     - Total Gas Cost")
        for price, cost in summary.projected_costs.items():
            log_with_context(
                logging.INFO, f"       @ {price} gwei: {gwei_to_ether(cost)} ETH"
            )
        log_with_context(logging.INFO, f"\n{BANNER}\n")
        return summary
