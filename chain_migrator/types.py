"""Shared type definitions for the chain state migration tool."""

from __future__ import annotations

from typing import Dict, TypedDict


class LedgerFile(TypedDict, total=False):
    """On-disk shape of a per-network tracking ledger."""

    schema_version: int
    last_updated: str
    accounts: Dict[str, bool]
    contracts: Dict[str, bool]
    nfts: Dict[str, bool]


class TxReceipt(TypedDict, total=False):
    """The parts of a transaction receipt the migrator reads."""

    gasUsed: int
    status: int
    transactionHash: str
