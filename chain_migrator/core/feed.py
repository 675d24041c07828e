"""
Record feed loaded from a per-network subgraph dump.

Layout under ``dump_dir``::

    <network_name>/ChargedSettings.json   {"nftCreatorSettings": [...], "nftSettings": [...]}
    <network_name>/ChargedState.json      [...]

Records are exposed as read-only mappings and never modified.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from chain_migrator.exceptions import FeedError
from chain_migrator.utils.logging import log_with_context

Record = Mapping[str, Any]


@dataclass(frozen=True)
class RecordFeed:
    """The three ordered record lists of one network's dump."""

    creator_settings: tuple[Record, ...] = ()
    contract_settings: tuple[Record, ...] = ()
    token_state: tuple[Record, ...] = ()


def _freeze(records: Any, source: str) -> tuple[Record, ...]:
    if records is None:
        return ()
    if not isinstance(records, list):
        raise FeedError(f"Expected a list of records in {source}, got {type(records).__name__}")
    frozen = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise FeedError(f"Record {index} in {source} is not an object")
        frozen.append(MappingProxyType(dict(record)))
    return tuple(frozen)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except FileNotFoundError as e:
        raise FeedError(f"Subgraph dump file not found: {path}") from e
    except (json.JSONDecodeError, OSError) as e:
        raise FeedError(f"Failed to read subgraph dump {path}: {e}") from e


def load_feed(dump_dir: Path, network_name: str) -> RecordFeed:
    """
    Load the subgraph dump for a network.

    Args:
        dump_dir: Root directory of the subgraph dumps
        network_name: Lower-case network name (dump subdirectory)

    Returns:
        RecordFeed with records in dump order

    Raises:
        FeedError: If a dump file is missing, unreadable, or malformed
    """
    network_dir = Path(dump_dir) / network_name.lower()

    settings_path = network_dir / "ChargedSettings.json"
    settings = _read_json(settings_path)
    if not isinstance(settings, dict):
        raise FeedError(f"{settings_path} must contain an object")

    state_path = network_dir / "ChargedState.json"
    state = _read_json(state_path)

    feed = RecordFeed(
        creator_settings=_freeze(
            settings.get("nftCreatorSettings"), f"{settings_path}:nftCreatorSettings"
        ),
        contract_settings=_freeze(
            settings.get("nftSettings"), f"{settings_path}:nftSettings"
        ),
        token_state=_freeze(state, str(state_path)),
    )

    log_with_context(
        logging.INFO,
        f"Loaded subgraph dump for {network_name}: "
        f"{len(feed.creator_settings)} accounts, "
        f"{len(feed.contract_settings)} contracts, "
        f"{len(feed.token_state)} NFTs",
    )
    return feed


def records_from(records: Sequence[dict[str, Any]]) -> tuple[Record, ...]:
    """Freeze an in-memory list of records (used when building feeds directly)."""
    return _freeze(list(records), "<memory>")
