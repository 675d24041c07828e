"""Core migration logic including the ledger, executor and orchestration."""

__all__ = [
    "categories",
    "config",
    "context",
    "costs",
    "executor",
    "feed",
    "ledger",
    "migrator",
]
