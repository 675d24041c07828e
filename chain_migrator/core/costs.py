"""Gas accounting for a migration run."""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from web3 import Web3

GWEI = 10**9


class CostAccumulator:
    """Running gas total for the operations executed in this run.

    Never persisted; each run counts only what it actually submitted.
    """

    def __init__(self) -> None:
        self.total_gas = 0
        self.operation_count = 0
        self.by_category: dict[str, int] = defaultdict(int)

    def record(self, gas_used: int, category: str | None = None) -> None:
        if gas_used < 0:
            raise ValueError(f"gas_used must be non-negative, got {gas_used}")
        self.total_gas += gas_used
        self.operation_count += 1
        if category:
            self.by_category[category] += gas_used

    def project_costs(self, price_tiers: Iterable[int]) -> dict[int, int]:
        """Map each gas price (gwei) to ``total_gas * price`` (gwei)."""
        return {price: self.total_gas * price for price in price_tiers}


def gwei_to_ether(amount_gwei: int) -> Decimal:
    """Convert a gwei amount to ether."""
    return Web3.from_wei(amount_gwei * GWEI, "ether")
