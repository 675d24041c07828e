"""Encoding of subgraph records against the real contract ABIs.

These tests build genuine web3 contract objects and ABI-encode each
category's call, stopping before anything is signed or sent.
"""

from __future__ import annotations

import pytest
from web3 import Web3
from web3.constants import ADDRESS_ZERO

from chain_migrator.core.categories import CATEGORIES
from chain_migrator.core.feed import records_from
from chain_migrator.services.gateway import Web3ContractHandle, coerce_args

LOWERCASE_ADDRESS = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"

CHARGED_SETTINGS_ABI = [
    {
        "type": "function",
        "name": "migrateToken",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "contractAddress", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
            {"name": "creator", "type": "address"},
            {"name": "annuityPercent", "type": "uint256"},
            {"name": "annuityReceiver", "type": "address"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "enableNftContracts",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "contracts", "type": "address[]"}],
        "outputs": [],
    },
]

CHARGED_STATE_ABI = [
    {
        "type": "function",
        "name": "migrateToken",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "contractAddress", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
            {"name": "releaseTimelockExpiry", "type": "uint256"},
            {"name": "releaseTimelockLockedBy", "type": "address"},
            {"name": "tempLockExpiry", "type": "uint256"},
        ],
        "outputs": [],
    },
]

ABIS = {"ChargedSettings": CHARGED_SETTINGS_ABI, "ChargedState": CHARGED_STATE_ABI}


class EncodingGateway:
    """Stands in for Web3Gateway.transact and keeps the encoded calldata."""

    def __init__(self) -> None:
        self.w3 = Web3()
        self.encoded: list[str] = []

    def get_contract(self, name: str, address: str) -> Web3ContractHandle:
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(address), abi=ABIS[name]
        )
        return Web3ContractHandle(self, name, contract)

    def transact(self, fn) -> dict:
        self.encoded.append(fn._encode_transaction_data())
        return {"gasUsed": 1, "status": 1}

    def decode(self, index: int, types: list[str]) -> tuple:
        data = self.encoded[index]
        return self.w3.codec.decode(types, bytes.fromhex(data[10:]))


def _run(category_key: str, records, gateway: EncodingGateway) -> None:
    category = next(c for c in CATEGORIES if c.ledger_key == category_key)
    contract = gateway.get_contract(category.contract_name, "0x" + "12" * 20)
    for record in records_from(records):
        category.operation_builder(contract, category.defaults_fn(record))()


class TestCategoryEncoding:
    def test_creator_settings_records_encode(self, creator_settings):
        gateway = EncodingGateway()
        records = [dict(creator_settings[1], contractAddress=LOWERCASE_ADDRESS)]

        _run("accounts", creator_settings[:1] + records, gateway)

        types = ["address", "uint256", "address", "uint256", "address"]
        first = gateway.decode(0, types)
        assert first[1] == 1
        assert first[3] == 500
        second = gateway.decode(1, types)
        assert second[0].lower() == LOWERCASE_ADDRESS
        assert second[1] == 2
        assert second[4] == Web3.to_checksum_address(ADDRESS_ZERO)

    def test_contract_settings_records_encode(self, contract_settings):
        gateway = EncodingGateway()
        records = contract_settings + [{"id": "c9", "contractAddress": LOWERCASE_ADDRESS}]

        _run("contracts", records, gateway)

        assert len(gateway.encoded) == 4
        (addresses,) = gateway.decode(3, ["address[]"])
        assert [a.lower() for a in addresses] == [LOWERCASE_ADDRESS]

    def test_token_state_records_with_empty_locks_encode(self, token_state):
        gateway = EncodingGateway()

        _run("nfts", token_state, gateway)

        types = ["address", "uint256", "uint256", "address", "uint256"]
        full = gateway.decode(0, types)
        assert full[1:3] == (42, 1700000000)
        assert full[4] == 1700000500
        empty = gateway.decode(1, types)
        assert empty[1] == 43
        assert empty[2] == 0
        assert empty[3] == Web3.to_checksum_address(ADDRESS_ZERO)
        assert empty[4] == 0


class TestCoerceArgs:
    def test_numeric_strings_become_ints(self):
        args = coerce_args(CHARGED_STATE_ABI, "migrateToken", (LOWERCASE_ADDRESS, "7", "0x10", ADDRESS_ZERO, "0"))

        assert args == (Web3.to_checksum_address(LOWERCASE_ADDRESS), 7, 16, ADDRESS_ZERO, 0)

    def test_address_arrays_are_checksummed(self):
        (addresses,) = coerce_args(CHARGED_SETTINGS_ABI, "enableNftContracts", ([LOWERCASE_ADDRESS],))

        assert addresses == [Web3.to_checksum_address(LOWERCASE_ADDRESS)]

    def test_unknown_method_passes_through(self):
        assert coerce_args(CHARGED_STATE_ABI, "burn", ("1",)) == ("1",)

    def test_non_numeric_string_raises(self):
        with pytest.raises(ValueError):
            coerce_args(CHARGED_STATE_ABI, "migrateToken", (LOWERCASE_ADDRESS, "abc", "0", ADDRESS_ZERO, "0"))
