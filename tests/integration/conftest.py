"""Integration test configuration.

These tests require a live JSON-RPC node and are skipped by default.
Set MIGRATOR_RPC_URL (and MIGRATOR_NETWORK, default ``goerli``) to enable
them. Building the gateway also needs MIGRATOR_PRIVATE_KEY.
"""

import os

import pytest


@pytest.fixture()
def live_network():
    return os.environ.get("MIGRATOR_NETWORK", "goerli")
