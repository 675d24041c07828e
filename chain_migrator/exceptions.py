"""Custom exception hierarchy for the chain state migration tool."""

from __future__ import annotations


class MigratorError(Exception):
    """Base exception for all migration-related errors."""


class ConfigError(MigratorError):
    """Raised when configuration is invalid or missing."""


class FeedError(MigratorError):
    """Raised when the subgraph dump is missing, unreadable or malformed."""


class MalformedRecord(MigratorError):
    """Raised when a feed record lacks the field its identity is derived from."""

    def __init__(self, message: str, category: str, index: int) -> None:
        super().__init__(message)
        self.category = category
        self.index = index


class GatewayCallFailed(MigratorError):
    """Raised when an on-chain operation fails (network error, revert, timeout)."""

    def __init__(
        self,
        message: str,
        label: str,
        kind: str = "unknown",
        identity: str | None = None,
    ) -> None:
        super().__init__(message)
        self.label = label
        self.kind = kind
        self.identity = identity


class LedgerPersistFailed(MigratorError):
    """Raised when the tracking ledger cannot be written durably."""


class LedgerCorrupt(MigratorError):
    """Raised when a persisted tracking ledger cannot be read back."""
