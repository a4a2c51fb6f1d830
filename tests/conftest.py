"""Shared fixtures for the RLC Wallet tests."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from rlc_wallet.config import ChainConfig, FaucetSourceConfig, WalletSettings
from rlc_wallet.wallet.chains import Chain
from rlc_wallet.wallet.keys import wallet_from_private_key
from rlc_wallet.wallet.provider import Web3Provider

TEST_PRIV_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_TOKEN = "0x607F4C5BB672230e8672085532f7e901544a7375"
DESTINATION = "0x000000000000000000000000000000000000dEaD"

ONE_ETHER = 10**18


@pytest.fixture
def wallet():
    return wallet_from_private_key(TEST_PRIV_KEY)


@pytest.fixture
def token_chain():
    return Chain(
        name="mainnet",
        chain_id=1,
        rpc_url="http://localhost:8545",
        native_symbol="ETH",
        explorer_url="https://etherscan.io",
        token_address=TEST_TOKEN,
    )


@pytest.fixture
def bare_chain():
    return Chain(
        name="kovan",
        chain_id=42,
        rpc_url="http://localhost:8546",
        native_symbol="ETH",
        explorer_url="https://kovan.etherscan.io",
    )


@pytest.fixture
def provider():
    """A provider double; every remote call must be stubbed by the test."""
    return MagicMock(spec=Web3Provider)


@pytest.fixture
def settings():
    return WalletSettings(
        chains=[
            ChainConfig(
                name="mainnet",
                chain_id=1,
                rpc_url="http://localhost:8545",
                explorer_url="https://etherscan.io",
                token_address=TEST_TOKEN,
            ),
            ChainConfig(
                name="kovan",
                chain_id=42,
                rpc_url="http://localhost:8546",
                explorer_url="https://kovan.etherscan.io",
            ),
        ],
        faucets=[
            FaucetSourceConfig(
                name="manual-kovan",
                kind="native",
                chain_name="kovan",
                message="Ask on the kovan faucet",
            ),
        ],
        destinations={"iexec": DESTINATION},
        poll_interval_seconds=0,
        max_attempts=3,
    )
