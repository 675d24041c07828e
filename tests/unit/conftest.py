"""Unit test configuration and shared fixtures."""

from __future__ import annotations

from typing import Any, Callable, Optional

import pytest

from chain_migrator.core.config import MigrationConfig
from chain_migrator.core.context import MigrationContext
from chain_migrator.core.feed import RecordFeed, records_from

# ---------------------------------------------------------------------------
# Fake chain gateway
# ---------------------------------------------------------------------------


class FakeContract:
    """Contract handle that records calls and returns canned receipts."""

    def __init__(self, gateway: FakeGateway, name: str, address: str) -> None:
        self.gateway = gateway
        self.name = name
        self.address = address

    def call(self, method: str, *args: Any) -> dict[str, Any]:
        gw = self.gateway
        gw.calls.append((self.name, method, args))
        if gw.on_call is not None:
            gw.on_call(len(gw.calls), self.name, method, args)
        if gw.fail_on_call is not None and len(gw.calls) == gw.fail_on_call:
            raise gw.error
        return {
            "gasUsed": gw.gas_per_call,
            "status": 1,
            "transactionHash": f"0x{len(gw.calls):064x}",
        }


class FakeGateway:
    """In-memory stand-in for the web3 gateway.

    Args:
        gas_per_call: ``gasUsed`` reported by every receipt.
        fail_on_call: 1-based call number that raises ``error``.
        error: Exception raised on ``fail_on_call``.
        on_call: Hook invoked as ``on_call(call_number, name, method, args)``
            before the receipt is returned.
    """

    def __init__(
        self,
        gas_per_call: int = 50_000,
        fail_on_call: Optional[int] = None,
        error: Optional[BaseException] = None,
        on_call: Optional[Callable[..., None]] = None,
    ) -> None:
        self.gas_per_call = gas_per_call
        self.fail_on_call = fail_on_call
        self.error = error or ConnectionError("node unreachable")
        self.on_call = on_call
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.contracts: dict[str, FakeContract] = {}

    def get_contract(self, name: str, address: str) -> FakeContract:
        contract = FakeContract(self, name, address)
        self.contracts[name] = contract
        return contract


@pytest.fixture()
def fake_gateway():
    """Factory fixture returning a new FakeGateway for the given kwargs."""
    return FakeGateway


# ---------------------------------------------------------------------------
# Context and feed builders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_context(tmp_path, deployments_dir):
    """Factory fixture building a goerli MigrationContext rooted in ``tmp_path``.

    Usage in tests::

        def test_something(make_context):
            ctx = make_context(dry_run=True, gas_price_tiers=[1, 2, 3])
    """

    def _make(dry_run: bool = False, **config_overrides: Any) -> MigrationContext:
        values: dict[str, Any] = {
            "ledger_dir": str(tmp_path / "tracking"),
            "dump_dir": str(tmp_path / "subgraph_dump"),
            "deployments_dir": str(deployments_dir),
            "abi_dir": str(tmp_path / "abis"),
        }
        values.update(config_overrides)
        return MigrationContext.for_network(
            "goerli", MigrationConfig(**values), dry_run=dry_run
        )

    return _make


@pytest.fixture()
def make_feed(creator_settings, contract_settings, token_state):
    """Factory fixture building a RecordFeed, defaulting to the sample records."""

    def _make(
        accounts: Optional[list[dict[str, Any]]] = None,
        contracts: Optional[list[dict[str, Any]]] = None,
        nfts: Optional[list[dict[str, Any]]] = None,
    ) -> RecordFeed:
        return RecordFeed(
            creator_settings=records_from(
                creator_settings if accounts is None else accounts
            ),
            contract_settings=records_from(
                contract_settings if contracts is None else contracts
            ),
            token_state=records_from(token_state if nfts is None else nfts),
        )

    return _make
