"""
Migration category descriptors.

Each category is described by data (where its records come from, how a
record's identity is derived, which defaults apply, and which gateway call
migrates it) so a single orchestrator loop can process all of them in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from web3.constants import ADDRESS_ZERO

from chain_migrator.core.feed import Record, RecordFeed

CHARGED_SETTINGS = "ChargedSettings"
CHARGED_STATE = "ChargedState"

ZERO_LOCK = "0"

Fields = Mapping[str, Any]
OperationBuilder = Callable[[Any, Fields], Callable[[], Mapping[str, Any]]]


def _is_empty(value: Any) -> bool:
    return value is None or (hasattr(value, "__len__") and len(value) == 0)


def _or_default(record: Record, key: str, default: str) -> Any:
    value = record.get(key)
    return default if _is_empty(value) else value


def record_identity(record: Record) -> Optional[str]:
    """Identity key of a record: its ``id`` field, or None when absent/empty."""
    value = record.get("id")
    if _is_empty(value):
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def creator_settings_fields(record: Record) -> dict[str, Any]:
    return {
        "contractAddress": record.get("contractAddress"),
        "tokenId": record.get("tokenId"),
        "creatorAddress": record.get("creatorAddress"),
        "annuityPercent": record.get("annuityPercent"),
        "annuityRedirect": _or_default(record, "annuityRedirect", ADDRESS_ZERO),
    }


def contract_settings_fields(record: Record) -> dict[str, Any]:
    return {"contractAddress": record.get("contractAddress")}


def token_state_fields(record: Record) -> dict[str, Any]:
    # Defaults are read from this record only, never from another category's data
    return {
        "contractAddress": record.get("contractAddress"),
        "tokenId": record.get("tokenId"),
        "releaseTimelockExpiry": _or_default(record, "releaseTimelockExpiry", ZERO_LOCK),
        "releaseTimelockLockedBy": _or_default(
            record, "releaseTimelockLockedBy", ADDRESS_ZERO
        ),
        "tempLockExpiry": _or_default(record, "tempLockExpiry", ZERO_LOCK),
    }


# ---------------------------------------------------------------------------
# Operation builders
# ---------------------------------------------------------------------------


def migrate_creator_settings(contract: Any, fields: Fields) -> Callable[[], Mapping[str, Any]]:
    return lambda: contract.call(
        "migrateToken",
        fields["contractAddress"],
        fields["tokenId"],
        fields["creatorAddress"],
        fields["annuityPercent"],
        fields["annuityRedirect"],
    )


def enable_contract(contract: Any, fields: Fields) -> Callable[[], Mapping[str, Any]]:
    return lambda: contract.call("enableNftContracts", [fields["contractAddress"]])


def migrate_token_state(contract: Any, fields: Fields) -> Callable[[], Mapping[str, Any]]:
    return lambda: contract.call(
        "migrateToken",
        fields["contractAddress"],
        fields["tokenId"],
        fields["releaseTimelockExpiry"],
        fields["releaseTimelockLockedBy"],
        fields["tempLockExpiry"],
    )


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Category:
    """Everything the orchestrator needs to migrate one kind of record."""

    ledger_key: str
    label_prefix: str
    title: str
    contract_name: str
    feed_selector: Callable[[RecordFeed], Sequence[Record]]
    identity_fn: Callable[[Record], Optional[str]]
    defaults_fn: Callable[[Record], dict[str, Any]]
    operation_builder: OperationBuilder
    describe: Callable[[str, Fields], str]


CATEGORIES: tuple[Category, ...] = (
    Category(
        ledger_key="accounts",
        label_prefix="a",
        title=f"{CHARGED_SETTINGS} for {{count}} Accounts",
        contract_name=CHARGED_SETTINGS,
        feed_selector=lambda feed: feed.creator_settings,
        identity_fn=record_identity,
        defaults_fn=creator_settings_fields,
        operation_builder=migrate_creator_settings,
        describe=lambda identity, fields: f"Migrating {CHARGED_SETTINGS} for: {identity}",
    ),
    Category(
        ledger_key="contracts",
        label_prefix="b",
        title=f"{CHARGED_SETTINGS} for {{count}} Contracts",
        contract_name=CHARGED_SETTINGS,
        feed_selector=lambda feed: feed.contract_settings,
        identity_fn=record_identity,
        defaults_fn=contract_settings_fields,
        operation_builder=enable_contract,
        describe=lambda identity, fields: (
            f"Migrating {CHARGED_SETTINGS} for: {fields['contractAddress']}"
        ),
    ),
    Category(
        ledger_key="nfts",
        label_prefix="c",
        title=f"{CHARGED_STATE} for {{count}} NFTs",
        contract_name=CHARGED_STATE,
        feed_selector=lambda feed: feed.token_state,
        identity_fn=record_identity,
        defaults_fn=token_state_fields,
        operation_builder=migrate_token_state,
        describe=lambda identity, fields: f"Migrating {CHARGED_STATE} for: {identity}",
    ),
)
