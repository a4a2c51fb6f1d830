"""Tests for SweepOrchestrator."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from rlc_wallet.errors import BroadcastError, TransactionFailed
from rlc_wallet.wallet.models import TransactionReceipt
from rlc_wallet.wallet.sweep import SweepOrchestrator
from rlc_wallet.wallet.transfers import Transfers
from rlc_wallet.wallet.units import to_smallest_unit
from tests.conftest import DESTINATION, ONE_ETHER

RESERVE = to_smallest_unit("0.01")


def _receipt(tx_hash):
    return TransactionReceipt(transactionHash=tx_hash, blockNumber=1, gasUsed=21000, status=1)


@pytest.fixture
def transfers():
    mock = MagicMock(spec=Transfers)
    calls = []

    async def send_token(chain, wallet, to, amount):
        calls.append(("token", to, amount))
        return _receipt("0x01")

    async def send_native(chain, wallet, to, value):
        calls.append(("native", to, value))
        return _receipt("0x02")

    mock.send_token = AsyncMock(side_effect=send_token)
    mock.send_native = AsyncMock(side_effect=send_native)
    mock.calls = calls
    return mock


@pytest.mark.asyncio
async def test_token_then_native(provider, transfers, wallet, token_chain):
    provider.get_token_balance.return_value = 100
    provider.get_native_balance.return_value = ONE_ETHER

    result = await SweepOrchestrator(provider, transfers, RESERVE).sweep(token_chain, wallet, DESTINATION)

    assert transfers.calls == [
        ("token", DESTINATION, 100),
        ("native", DESTINATION, to_smallest_unit("0.99")),
    ]
    assert result.transfers == 2
    assert result.token_amount == 100
    assert result.native_amount == 99 * 10**16


@pytest.mark.asyncio
async def test_token_failure_aborts_before_native(provider, transfers, wallet, token_chain):
    provider.get_token_balance.return_value = 100
    provider.get_native_balance.return_value = ONE_ETHER
    transfers.send_token.side_effect = TransactionFailed("mainnet", "0x01", "receipt status is 0")

    with pytest.raises(TransactionFailed):
        await SweepOrchestrator(provider, transfers, RESERVE).sweep(token_chain, wallet, DESTINATION)

    transfers.send_native.assert_not_called()
    provider.get_native_balance.assert_not_called()


@pytest.mark.asyncio
async def test_native_failure_propagates(provider, transfers, wallet, token_chain):
    provider.get_token_balance.return_value = 0
    provider.get_native_balance.return_value = ONE_ETHER
    transfers.send_native.side_effect = BroadcastError("rejected", "mainnet")

    with pytest.raises(BroadcastError):
        await SweepOrchestrator(provider, transfers, RESERVE).sweep(token_chain, wallet, DESTINATION)

    transfers.send_token.assert_not_called()


@pytest.mark.asyncio
async def test_nothing_to_sweep(provider, transfers, wallet, token_chain):
    provider.get_token_balance.return_value = 0
    provider.get_native_balance.return_value = to_smallest_unit("0.005")

    result = await SweepOrchestrator(provider, transfers, RESERVE).sweep(token_chain, wallet, DESTINATION)

    assert transfers.calls == []
    assert result.transfers == 0


@pytest.mark.asyncio
async def test_exactly_reserve_is_not_swept(provider, transfers, wallet, token_chain):
    provider.get_token_balance.return_value = 0
    provider.get_native_balance.return_value = RESERVE

    result = await SweepOrchestrator(provider, transfers, RESERVE).sweep(token_chain, wallet, DESTINATION)

    assert result.transfers == 0


@pytest.mark.asyncio
async def test_chain_without_token_skips_token_step(provider, transfers, wallet, bare_chain):
    provider.get_native_balance.return_value = 2 * ONE_ETHER

    result = await SweepOrchestrator(provider, transfers, RESERVE).sweep(bare_chain, wallet, DESTINATION)

    provider.get_token_balance.assert_not_called()
    assert transfers.calls == [("native", DESTINATION, 2 * ONE_ETHER - RESERVE)]
    assert result.token_receipt is None
