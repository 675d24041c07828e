"""Shared test fixtures for the chain_migrator test suite."""

import json

import pytest

SETTINGS_ADDRESS = "0x1111111111111111111111111111111111111111"
STATE_ADDRESS = "0x2222222222222222222222222222222222222222"
NFT_CONTRACT = "0x3333333333333333333333333333333333333333"
OTHER_NFT_CONTRACT = "0x4444444444444444444444444444444444444444"
CREATOR = "0x5555555555555555555555555555555555555555"
REDIRECT = "0x6666666666666666666666666666666666666666"


@pytest.fixture()
def creator_settings():
    """Return sample ``nftCreatorSettings`` records."""
    return [
        {
            "id": "a1",
            "contractAddress": NFT_CONTRACT,
            "tokenId": "1",
            "creatorAddress": CREATOR,
            "annuityPercent": "500",
            "annuityRedirect": REDIRECT,
        },
        {
            "id": "a2",
            "contractAddress": NFT_CONTRACT,
            "tokenId": "2",
            "creatorAddress": CREATOR,
            "annuityPercent": "250",
            "annuityRedirect": "",
        },
    ]


@pytest.fixture()
def contract_settings():
    """Return sample ``nftSettings`` records."""
    return [
        {"id": "c1", "contractAddress": NFT_CONTRACT},
        {"id": "c2", "contractAddress": OTHER_NFT_CONTRACT},
        {"id": "c3", "contractAddress": "0x7777777777777777777777777777777777777777"},
    ]


@pytest.fixture()
def token_state():
    """Return sample ``ChargedState`` records."""
    return [
        {
            "id": "n1",
            "contractAddress": OTHER_NFT_CONTRACT,
            "tokenId": "42",
            "releaseTimelockExpiry": "1700000000",
            "releaseTimelockLockedBy": CREATOR,
            "tempLockExpiry": "1700000500",
        },
        {
            "id": "n2",
            "contractAddress": OTHER_NFT_CONTRACT,
            "tokenId": "43",
            "releaseTimelockExpiry": "",
            "releaseTimelockLockedBy": "",
        },
    ]


@pytest.fixture()
def dump_dir(tmp_path, creator_settings, contract_settings, token_state):
    """Create a subgraph dump for the ``goerli`` network and return its root."""
    root = tmp_path / "subgraph_dump"
    network_dir = root / "goerli"
    network_dir.mkdir(parents=True)
    (network_dir / "ChargedSettings.json").write_text(
        json.dumps(
            {"nftCreatorSettings": creator_settings, "nftSettings": contract_settings}
        )
    )
    (network_dir / "ChargedState.json").write_text(json.dumps(token_state))
    return root


@pytest.fixture()
def deployments_dir(tmp_path):
    """Create deployment data for chain id 5 and return its directory."""
    root = tmp_path / "deployments"
    root.mkdir()
    (root / "5.json").write_text(
        json.dumps(
            {
                "ChargedSettings": {"address": SETTINGS_ADDRESS},
                "ChargedState": {"address": STATE_ADDRESS},
            }
        )
    )
    return root
