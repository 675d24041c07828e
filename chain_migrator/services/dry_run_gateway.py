"""No-op chain gateway for dry-run mode.

Mirrors the ``get_contract(name, address).call(method, *args)`` interface of
the web3 gateway but logs instead of submitting transactions. Every call
returns a receipt-shaped dict with zero gas so cost totals stay at zero.
"""

from __future__ import annotations

import logging
from typing import Any

from chain_migrator.types import TxReceipt
from chain_migrator.utils.logging import log_with_context


class DryRunContract:
    """Stub contract handle that records calls."""

    def __init__(self, gateway: DryRunGateway, name: str, address: str) -> None:
        self.gateway = gateway
        self.name = name
        self.address = address

    def call(self, method: str, *args: Any) -> TxReceipt:
        self.gateway.calls.append((self.name, method, args))
        log_with_context(
            logging.DEBUG,
            f"[DRY RUN] Would call {self.name}({self.address}).{method}{args}",
        )
        return {"gasUsed": 0, "status": 1}


class DryRunGateway:
    """Gateway stand-in used when ``--dry_run`` is given."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []

    def get_contract(self, name: str, address: str) -> DryRunContract:
        return DryRunContract(self, name, address)
