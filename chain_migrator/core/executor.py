"""
Transaction execution wrapper.

Runs one state-mutating gateway call at a time, waits for its receipt,
records the gas it consumed and classifies failures. Errors are never
swallowed: they are re-raised as GatewayCallFailed for the orchestrator
to halt on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import requests
from web3.exceptions import ContractLogicError, TimeExhausted

from chain_migrator.core.costs import CostAccumulator
from chain_migrator.exceptions import GatewayCallFailed
from chain_migrator.utils.logging import log_with_context

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"

ERROR_REVERTED = "reverted"
ERROR_TIMEOUT = "timeout"
ERROR_NETWORK = "network"
ERROR_UNKNOWN = "unknown"


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one executed operation."""

    label: str
    status: str
    gas_used: int = 0
    tx_hash: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS


def classify_error(error: BaseException) -> str:
    """Map a gateway exception to an error classification."""
    if isinstance(error, ContractLogicError):
        return ERROR_REVERTED
    if isinstance(error, (TimeExhausted, TimeoutError, requests.Timeout)):
        return ERROR_TIMEOUT
    if isinstance(error, (ConnectionError, requests.ConnectionError)):
        return ERROR_NETWORK
    return ERROR_UNKNOWN


def _tx_hash_of(receipt: Mapping[str, Any]) -> Optional[str]:
    tx_hash = receipt.get("transactionHash")
    if tx_hash is None:
        return None
    return tx_hash.hex() if hasattr(tx_hash, "hex") else str(tx_hash)


class TransactionExecutor:
    """Executes operations sequentially and feeds their gas into ``costs``."""

    def __init__(self, costs: CostAccumulator, dry_run: bool = False) -> None:
        self.costs = costs
        self.dry_run = dry_run
        self.results: list[OperationResult] = []

    def execute(
        self,
        label: str,
        description: str,
        operation_fn: Callable[[], Mapping[str, Any]],
        category: Optional[str] = None,
        identity: Optional[str] = None,
    ) -> OperationResult:
        """
        Run ``operation_fn`` and wait for it to confirm.

        Args:
            label: Short transaction tag used in progress lines (e.g. ``8-a-0``)
            description: Human-readable description of the operation
            operation_fn: Performs exactly one gateway call and returns its receipt
            category: Ledger category the operation belongs to
            identity: Identity key of the record being migrated

        Returns:
            The successful OperationResult

        Raises:
            GatewayCallFailed: If the call raised or the receipt reports a revert
        """
        prefix = "[DRY RUN] " if self.dry_run else ""
        log_with_context(
            logging.INFO,
            f"  - {prefix}[TX-{label}] {description}",
            category=category,
            label=label,
            identity=identity,
        )

        try:
            receipt = operation_fn()
        except Exception as e:
            kind = classify_error(e)
            self.results.append(
                OperationResult(label=label, status=STATUS_FAILED, error_kind=kind)
            )
            log_with_context(
                logging.ERROR,
                f"  - [TX-{label}] Failed ({kind}): {e}",
                category=category,
                label=label,
                identity=identity,
            )
            raise GatewayCallFailed(
                f"Transaction {label} failed ({kind}): {e}",
                label=label,
                kind=kind,
                identity=identity,
            ) from e

        tx_hash = _tx_hash_of(receipt)
        gas_used = int(receipt.get("gasUsed", 0))
        if receipt.get("status", 1) == 0:
            # A reverted transaction still pays for its gas
            self.costs.record(gas_used, category)
            self.results.append(
                OperationResult(
                    label=label,
                    status=STATUS_FAILED,
                    gas_used=gas_used,
                    tx_hash=tx_hash,
                    error_kind=ERROR_REVERTED,
                )
            )
            raise GatewayCallFailed(
                f"Transaction {label} reverted (tx {tx_hash})",
                label=label,
                kind=ERROR_REVERTED,
                identity=identity,
            )

        self.costs.record(gas_used, category)
        result = OperationResult(
            label=label, status=STATUS_SUCCESS, gas_used=gas_used, tx_hash=tx_hash
        )
        self.results.append(result)

        log_with_context(
            logging.DEBUG,
            f"  - [TX-{label}] Confirmed, gas used: {gas_used}"
            + (f", tx: {tx_hash}" if tx_hash else ""),
            category=category,
            label=label,
            identity=identity,
        )
        return result
