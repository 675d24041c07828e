"""
Configuration module for the chain state migration tool.

This module provides functions for loading configuration settings from YAML
files into a typed MigrationConfig and for writing a default configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from chain_migrator.exceptions import ConfigError
from chain_migrator.utils.logging import log_with_context
from chain_migrator.utils.networks import HARDHAT_CHAIN_ID

DEFAULT_GAS_PRICE_TIERS = [10, 100, 150]  # gwei


@dataclass
class MigrationConfig:
    """Typed configuration for the migration tool.

    All fields have defaults so an empty or missing config file still yields
    a usable configuration (an RPC URL is only required for real runs).
    """

    # Chain access
    rpc_url: str = ""
    rpc_urls: dict[str, str] = field(default_factory=dict)
    private_key_env: str = "MIGRATOR_PRIVATE_KEY"
    receipt_timeout: int = 600

    # Filesystem layout
    ledger_dir: str = "migration_data/tracking"
    dump_dir: str = "migration_data/subgraph_dump"
    deployments_dir: str = "deployments"
    abi_dir: str = "abis"

    # Contract address overrides (contract name -> address)
    contracts: dict[str, str] = field(default_factory=dict)

    # Extra networks (name -> chain id)
    networks: dict[str, int] = field(default_factory=dict)
    skip_chain_ids: list[int] = field(default_factory=lambda: [HARDHAT_CHAIN_ID])

    # Reporting
    gas_price_tiers: list[int] = field(
        default_factory=lambda: list(DEFAULT_GAS_PRICE_TIERS)
    )
    tx_step: str = "8"

    def __post_init__(self) -> None:
        """Validate field values after initialization."""
        if not isinstance(self.gas_price_tiers, list) or len(self.gas_price_tiers) < 3:
            raise ConfigError(
                f"gas_price_tiers needs at least 3 tiers, got {self.gas_price_tiers}"
            )
        if any(not isinstance(t, int) or t < 0 for t in self.gas_price_tiers):
            raise ConfigError(
                f"gas_price_tiers must be non-negative integers (gwei), got {self.gas_price_tiers}"
            )
        if (
            not isinstance(self.receipt_timeout, int)
            or isinstance(self.receipt_timeout, bool)
            or self.receipt_timeout <= 0
        ):
            raise ConfigError(
                f"receipt_timeout must be positive, got {self.receipt_timeout}"
            )

    def rpc_url_for(self, network_name: str) -> str:
        """Return the RPC endpoint for a network, falling back to ``rpc_url``."""
        return self.rpc_urls.get(network_name, self.rpc_url)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationConfig:
        """Create a MigrationConfig from a raw config dictionary."""
        return cls(
            rpc_url=data.get("rpc_url") or "",
            rpc_urls=data.get("rpc_urls") or {},
            private_key_env=data.get("private_key_env", "MIGRATOR_PRIVATE_KEY"),
            receipt_timeout=(
                600 if data.get("receipt_timeout") is None else data["receipt_timeout"]
            ),
            ledger_dir=data.get("ledger_dir", "migration_data/tracking"),
            dump_dir=data.get("dump_dir", "migration_data/subgraph_dump"),
            deployments_dir=data.get("deployments_dir", "deployments"),
            abi_dir=data.get("abi_dir", "abis"),
            contracts=data.get("contracts") or {},
            networks=data.get("networks") or {},
            skip_chain_ids=data.get("skip_chain_ids", [HARDHAT_CHAIN_ID]) or [],
            gas_price_tiers=data.get("gas_price_tiers") or list(DEFAULT_GAS_PRICE_TIERS),
            tx_step=str(data.get("tx_step", "8")),
        )


def load_config(config_path: Path) -> MigrationConfig:
    """
    Load configuration from YAML file and apply default values.

    A missing file logs a warning and yields the defaults. A file that
    exists but cannot be parsed is an error.

    Args:
        config_path: Path to the config YAML file

    Returns:
        MigrationConfig with all necessary defaults applied

    Raises:
        ConfigError: If the file is unreadable or holds invalid values
    """
    raw: dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path) as f:
                loaded_config = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            raise ConfigError(f"Failed to load config file {config_path}: {e}") from e
        # Handle None result from empty file
        if loaded_config is not None:
            if not isinstance(loaded_config, dict):
                raise ConfigError(f"Config file {config_path} must contain a mapping")
            raw = loaded_config
        log_with_context(logging.INFO, f"Loaded configuration from {config_path}")
    else:
        log_with_context(
            logging.WARNING,
            f"Config file {config_path} not found, using default settings",
        )

    return MigrationConfig.from_dict(raw)


def create_default_config(output_path: Path) -> bool:
    """
    Create a default configuration file with recommended settings.

    Will not overwrite an existing configuration file.

    Args:
        output_path: Path where the default config should be saved

    Returns:
        True if the config file was created successfully, False otherwise
    """
    if output_path.exists():
        log_with_context(
            logging.WARNING,
            f"Config file {output_path} already exists, not overwriting",
        )
        return False

    default_config = {
        "rpc_url": "http://localhost:8545",
        "rpc_urls": {"mainnet": "https://mainnet.example.org/rpc"},
        "private_key_env": "MIGRATOR_PRIVATE_KEY",
        "receipt_timeout": 600,
        "ledger_dir": "migration_data/tracking",
        "dump_dir": "migration_data/subgraph_dump",
        "deployments_dir": "deployments",
        "abi_dir": "abis",
        "contracts": {},
        "networks": {},
        "skip_chain_ids": [HARDHAT_CHAIN_ID],
        "gas_price_tiers": list(DEFAULT_GAS_PRICE_TIERS),
        "tx_step": "8",
    }

    try:
        with open(output_path, "w") as f:
            yaml.safe_dump(default_config, f, default_flow_style=False)
        log_with_context(logging.INFO, f"Created default config file at {output_path}")
        return True
    except OSError as e:
        log_with_context(logging.ERROR, f"Failed to create default config file: {e}")
        return False
