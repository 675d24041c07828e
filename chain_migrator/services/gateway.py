"""
Chain gateway backed by web3.

Exposes the small surface the migrator needs:
``get_contract(name, address).call(method, *args)`` submits one signed
transaction and blocks until its receipt is available.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from web3 import Web3
from web3.contract import Contract

from chain_migrator.core.context import MigrationContext
from chain_migrator.exceptions import ConfigError
from chain_migrator.utils.logging import log_with_context


def load_abi(abi_dir: Path, name: str) -> List[Dict[str, Any]]:
    """
    Load a contract ABI from ``<abi_dir>/<name>.json``.

    Accepts either a bare ABI list or an artifact object with an ``abi`` key.
    """
    path = Path(abi_dir) / f"{name}.json"
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError as e:
        raise ConfigError(f"ABI file not found for {name}: {path}") from e
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Failed to read ABI {path}: {e}") from e

    abi = data.get("abi") if isinstance(data, dict) else data
    if not isinstance(abi, list):
        raise ConfigError(f"ABI file {path} does not contain an ABI list")
    return abi


def _abi_inputs(abi: Any, method: str, arg_count: int) -> Optional[List[Dict[str, Any]]]:
    """Return the inputs of the ABI function ``method`` taking ``arg_count`` arguments."""
    for entry in abi or []:
        if (
            entry.get("type") == "function"
            and entry.get("name") == method
            and len(entry.get("inputs", [])) == arg_count
        ):
            return entry["inputs"]
    return None


def _coerce_arg(abi_type: str, value: Any) -> Any:
    """Convert a subgraph value (numbers as strings, lowercase addresses) for ``abi_type``."""
    if abi_type.endswith("[]") and isinstance(value, (list, tuple)):
        return [_coerce_arg(abi_type[:-2], item) for item in value]
    if not isinstance(value, str):
        return value
    if abi_type == "address":
        return Web3.to_checksum_address(value)
    if abi_type.startswith(("uint", "int")):
        return int(value, 16) if value.lower().startswith("0x") else int(value)
    return value


def coerce_args(abi: Any, method: str, args: Tuple[Any, ...]) -> Tuple[Any, ...]:
    """Match ``args`` to the ABI input types of ``method``; unknown methods pass through."""
    inputs = _abi_inputs(abi, method, len(args))
    if inputs is None:
        return args
    return tuple(_coerce_arg(spec["type"], value) for spec, value in zip(inputs, args))


class Web3ContractHandle:
    """A deployed contract bound to the gateway's signing account."""

    def __init__(self, gateway: Web3Gateway, name: str, contract: Contract):
        self.gateway = gateway
        self.name = name
        self.contract = contract

    @property
    def address(self) -> str:
        return self.contract.address

    def call(self, method: str, *args: Any) -> Dict[str, Any]:
        args = coerce_args(self.contract.abi, method, args)
        fn = getattr(self.contract.functions, method)(*args)
        log_with_context(logging.DEBUG, f"Submitting {self.name}.{method}{args}")
        return self.gateway.transact(fn)


class Web3Gateway:
    """Signs and submits transactions from a single account, one at a time."""

    def __init__(
        self,
        w3: Web3,
        private_key: str,
        abi_dir: Path,
        receipt_timeout: int = 600,
    ):
        self.w3 = w3
        self.account = w3.eth.account.from_key(private_key)
        self.abi_dir = Path(abi_dir)
        self.receipt_timeout = receipt_timeout
        self._nonce: Optional[int] = None
        self._chain_id: Optional[int] = None

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = self.w3.eth.chain_id
        return self._chain_id

    def get_contract(self, name: str, address: str) -> Web3ContractHandle:
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=load_abi(self.abi_dir, name),
        )
        return Web3ContractHandle(self, name, contract)

    def transact(self, fn: Any) -> Dict[str, Any]:
        """Build, sign and send ``fn`` as a transaction, then wait for its receipt."""
        if self._nonce is None:
            self._nonce = self.w3.eth.get_transaction_count(
                self.account.address, "pending"
            )

        tx = fn.build_transaction(
            {
                "from": self.account.address,
                "nonce": self._nonce,
                "chainId": self.chain_id,
            }
        )
        signed = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        # The nonce is consumed once the transaction is accepted by the node
        self._nonce += 1

        log_with_context(logging.DEBUG, f"Sent transaction {tx_hash.hex()}, waiting for receipt")
        receipt = self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.receipt_timeout
        )
        return dict(receipt)


def build_gateway(ctx: MigrationContext, w3: Optional[Web3] = None) -> Web3Gateway:
    """
    Create the web3 gateway for a run.

    Args:
        ctx: The migration context
        w3: Optional pre-built Web3 instance (otherwise an HTTP provider is
            created from the configured RPC URL)

    Raises:
        ConfigError: If the RPC URL or private key is missing, the node is
            unreachable, or the node reports a different chain id
    """
    config = ctx.config
    if w3 is None:
        rpc_url = config.rpc_url_for(ctx.network_name)
        if not rpc_url:
            raise ConfigError(
                f"No RPC URL configured for {ctx.network_name}. Set 'rpc_url' or 'rpc_urls'."
            )
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        if not w3.is_connected():
            raise ConfigError(f"Failed to connect to RPC endpoint {rpc_url}")

    private_key = os.environ.get(config.private_key_env)
    if not private_key:
        raise ConfigError(
            f"Environment variable {config.private_key_env} must hold the migration account's private key"
        )

    gateway = Web3Gateway(
        w3,
        private_key,
        ctx.abi_dir,
        receipt_timeout=config.receipt_timeout,
    )
    if gateway.chain_id != ctx.chain_id:
        raise ConfigError(
            f"RPC endpoint reports chain id {gateway.chain_id}, expected {ctx.chain_id} ({ctx.network_name})"
        )

    log_with_context(
        logging.INFO,
        f"Connected to {ctx.network_name} (chain id {ctx.chain_id}) as {gateway.account.address}",
    )
    return gateway
