"""Per-network tracking ledger for resumable migrations.

The ledger maps each category to the identities already migrated on a
network. It is written through after every successful operation using a
temp file, fsync and rename, so a crash leaves either the previous or the
new ledger on disk.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict

from chain_migrator.exceptions import LedgerCorrupt, LedgerPersistFailed
from chain_migrator.types import LedgerFile
from chain_migrator.utils.logging import log_with_context

LEDGER_SCHEMA_VERSION = 1

LEDGER_CATEGORIES = ("accounts", "contracts", "nfts")

Ledger = Dict[str, Dict[str, bool]]


def empty_ledger() -> Ledger:
    """Return a ledger with every category present and empty."""
    return {category: {} for category in LEDGER_CATEGORIES}


def is_migrated(ledger: Ledger, category: str, identity: str) -> bool:
    """Return True iff ``identity`` is marked migrated under ``category``.

    A category missing from the ledger means nothing in it was migrated.
    """
    return bool(ledger.get(category, {}).get(identity, False))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LedgerStore:
    """Durable ledger storage, one JSON file per network under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, network_id: int | str) -> Path:
        return self.root / f"migration-{network_id}.json"

    def load(self, network_id: int | str) -> Ledger:
        """Load the last persisted ledger for a network.

        Returns an empty ledger when none exists. Categories absent from the
        file are filled in as empty mappings.

        Raises:
            LedgerCorrupt: If the file exists but cannot be parsed.
        """
        path = self.path_for(network_id)
        if not path.exists():
            log_with_context(
                logging.DEBUG, f"No ledger at {path}, starting from empty ledger"
            )
            return empty_ledger()

        try:
            raw = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            raise LedgerCorrupt(f"Failed to read ledger {path}: {e}") from e

        if not isinstance(raw, dict):
            raise LedgerCorrupt(f"Ledger file {path} has invalid format")

        version = raw.get("schema_version", LEDGER_SCHEMA_VERSION)
        if version != LEDGER_SCHEMA_VERSION:
            raise LedgerCorrupt(
                f"Ledger schema version {version} != {LEDGER_SCHEMA_VERSION} in {path}"
            )

        ledger = empty_ledger()
        for category in LEDGER_CATEGORIES:
            entries = raw.get(category) or {}
            if not isinstance(entries, dict):
                raise LedgerCorrupt(f"Ledger category '{category}' in {path} is not a mapping")
            ledger[category] = {str(k): bool(v) for k, v in entries.items()}

        log_with_context(
            logging.DEBUG,
            f"Loaded ledger {path}: "
            + ", ".join(f"{c}={len(ledger[c])}" for c in LEDGER_CATEGORIES),
        )
        return ledger

    def save(self, network_id: int | str, ledger: Ledger) -> None:
        """Atomically overwrite the persisted ledger for a network.

        Raises:
            LedgerPersistFailed: If the ledger could not be written durably.
        """
        path = self.path_for(network_id)
        tmp = path.with_suffix(".tmp")
        payload: LedgerFile = {
            "schema_version": LEDGER_SCHEMA_VERSION,
            "last_updated": _now_iso(),
            **{category: dict(ledger.get(category, {})) for category in LEDGER_CATEGORIES},
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w") as f:
                f.write(json.dumps(payload, indent=2) + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError as e:
            log_with_context(logging.ERROR, f"Failed to write ledger {path}: {e}")
            raise LedgerPersistFailed(f"Failed to write ledger {path}: {e}") from e

    def clear(self, network_id: int | str) -> bool:
        """Remove a network's ledger. Returns True if a file was removed."""
        path = self.path_for(network_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise LedgerPersistFailed(f"Failed to remove ledger {path}: {e}") from e
        log_with_context(logging.INFO, f"Removed ledger {path}")
        return True
