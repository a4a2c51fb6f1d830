"""Drain RLC, then native coin minus a reserve, to one destination."""

from __future__ import annotations

import asyncio
import logging

from rlc_wallet.wallet.chains import Chain
from rlc_wallet.wallet.keys import Wallet
from rlc_wallet.wallet.models import SweepResult
from rlc_wallet.wallet.provider import Web3Provider
from rlc_wallet.wallet.transfers import Transfers

logger = logging.getLogger("rlc_wallet.wallet.sweep")


class SweepOrchestrator:
    """Two strictly sequential steps; the first failure aborts the sweep.

    The token transfer runs first because its fee is paid in native coin.
    Nothing already broadcast is rolled back.
    """

    def __init__(self, provider: Web3Provider, transfers: Transfers, reserve_wei: int) -> None:
        self.provider = provider
        self.transfers = transfers
        self.reserve_wei = reserve_wei

    async def sweep(self, chain: Chain, wallet: Wallet, destination: str) -> SweepResult:
        result = SweepResult(chain_name=chain.name, destination=destination)

        if chain.has_token:
            token_balance = await asyncio.to_thread(
                self.provider.get_token_balance, wallet.address, chain
            )
            logger.debug(f"RLC balance on {chain.name}: {token_balance}")
            if token_balance > 0:
                result.token_receipt = await self.transfers.send_token(
                    chain, wallet, destination, token_balance
                )
                result.token_amount = token_balance
        else:
            logger.info(f"No RLC contract on {chain.name}, skipping token sweep")

        native_balance = await asyncio.to_thread(
            self.provider.get_native_balance, wallet.address, chain
        )
        logger.debug(f"Native balance on {chain.name}: {native_balance}")
        sweepable = native_balance - self.reserve_wei
        if sweepable > 0:
            result.native_receipt = await self.transfers.send_native(
                chain, wallet, destination, sweepable
            )
            result.native_amount = sweepable

        logger.info(f"Wallet swept to {destination} on {chain.name} ({result.transfers} transfers)")
        return result
