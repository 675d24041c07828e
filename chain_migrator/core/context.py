"""Immutable migration context.

MigrationContext is a frozen dataclass holding the configuration and the
resolved network identity for a migration run. It is created once by the
CLI and shared read-only with the migrator and the gateway factory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from chain_migrator.core.config import MigrationConfig
from chain_migrator.utils.networks import chain_id_by_name, chain_name_by_id


@dataclass(frozen=True)
class MigrationContext:
    """Immutable context for a migration run. Created once, shared everywhere."""

    # Network identity
    network_name: str
    chain_id: int

    # Mode flags
    dry_run: bool
    verbose: bool

    # Loaded configuration
    config: MigrationConfig

    @classmethod
    def for_network(
        cls,
        network: str,
        config: MigrationConfig,
        dry_run: bool = False,
        verbose: bool = False,
    ) -> MigrationContext:
        """Resolve ``network`` (name as given on the command line) into a context."""
        chain_id = chain_id_by_name(network, config.networks)
        return cls(
            network_name=chain_name_by_id(chain_id, config.networks),
            chain_id=chain_id,
            dry_run=dry_run,
            verbose=verbose,
            config=config,
        )

    @property
    def ledger_dir(self) -> Path:
        return Path(self.config.ledger_dir)

    @property
    def dump_dir(self) -> Path:
        return Path(self.config.dump_dir)

    @property
    def deployments_dir(self) -> Path:
        return Path(self.config.deployments_dir)

    @property
    def abi_dir(self) -> Path:
        return Path(self.config.abi_dir)

    @property
    def is_skipped_network(self) -> bool:
        """True for networks (e.g. local development chains) that are never migrated."""
        return self.chain_id in self.config.skip_chain_ids

    @property
    def log_prefix(self) -> str:
        """Mode-aware log prefix, ``"[DRY RUN] "`` or empty."""
        return "[DRY RUN] " if self.dry_run else ""
