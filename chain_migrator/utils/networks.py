"""
Network helpers: chain id <-> network name mapping and deployment lookups.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Optional

from chain_migrator.exceptions import ConfigError
from chain_migrator.utils.logging import log_with_context

HARDHAT_CHAIN_ID = 31337

CHAIN_IDS: dict[str, int] = {
    "mainnet": 1,
    "homestead": 1,
    "ropsten": 3,
    "rinkeby": 4,
    "goerli": 5,
    "kovan": 42,
    "sepolia": 11155111,
    "polygon": 137,
    "mumbai": 80001,
    "hardhat": HARDHAT_CHAIN_ID,
}

# Reverse lookup picks the canonical name when several aliases share an id
_CANONICAL_NAMES: dict[int, str] = {
    1: "mainnet",
    3: "ropsten",
    4: "rinkeby",
    5: "goerli",
    42: "kovan",
    11155111: "sepolia",
    137: "polygon",
    80001: "mumbai",
    HARDHAT_CHAIN_ID: "hardhat",
}


def chain_id_by_name(name: str, extra: Optional[Mapping[str, int]] = None) -> int:
    """
    Resolve a network name to its chain id.

    Args:
        name: Network name, case-insensitive (e.g. ``"Mainnet"``)
        extra: Additional ``name -> chain id`` entries from configuration,
            consulted before the built-in table

    Returns:
        The chain id

    Raises:
        ConfigError: If the network name is unknown
    """
    key = name.lower()
    if extra:
        lowered = {k.lower(): v for k, v in extra.items()}
        if key in lowered:
            return int(lowered[key])
    if key in CHAIN_IDS:
        return CHAIN_IDS[key]
    raise ConfigError(f"Unknown network '{name}'. Add it under 'networks' in config.")


def chain_name_by_id(chain_id: int, extra: Optional[Mapping[str, int]] = None) -> str:
    """Resolve a chain id to its canonical lower-case network name."""
    if extra:
        for name, value in extra.items():
            if int(value) == chain_id:
                return name.lower()
    if chain_id in _CANONICAL_NAMES:
        return _CANONICAL_NAMES[chain_id]
    raise ConfigError(f"No network name known for chain id {chain_id}")


def get_deploy_address(deployments_dir: Path, name: str, chain_id: int) -> str:
    """
    Read a contract's deployed address from ``<deployments_dir>/<chain_id>.json``.

    The file maps contract names to ``{"address": ...}`` objects.

    Raises:
        ConfigError: If the file is missing, unreadable, or lacks the contract
    """
    path = deployments_dir / f"{chain_id}.json"
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError as e:
        raise ConfigError(f"Deployment data not found: {path}") from e
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Failed to read deployment data {path}: {e}") from e

    entry = data.get(name) if isinstance(data, dict) else None
    address = entry.get("address") if isinstance(entry, dict) else None
    if not address:
        raise ConfigError(f"No deployed address for {name} in {path}")

    log_with_context(logging.DEBUG, f"Deployment data for {name}: {address}")
    return address
