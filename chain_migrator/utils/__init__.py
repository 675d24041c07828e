"""Shared utilities for logging and network lookups."""

__all__ = [
    "logging",
    "networks",
]
