"""Chain gateway implementations."""

__all__ = [
    "dry_run_gateway",
    "gateway",
]
