"""Submit-then-confirm transfers of native coin and RLC."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from rlc_wallet.wallet.chains import Chain
from rlc_wallet.wallet.keys import Wallet
from rlc_wallet.wallet.models import SubmittedTransaction, TransactionReceipt
from rlc_wallet.wallet.provider import Web3Provider
from rlc_wallet.wallet.submitter import TransactionSubmitter
from rlc_wallet.wallet.waiter import ConfirmationWaiter

logger = logging.getLogger("rlc_wallet.wallet.transfers")


class Transfers:
    """Pairs :class:`TransactionSubmitter` with :class:`ConfirmationWaiter`."""

    def __init__(
        self,
        provider: Web3Provider,
        submitter: TransactionSubmitter,
        waiter: ConfirmationWaiter,
        poll_interval: float = 2.0,
        max_attempts: int = 90,
    ) -> None:
        self.provider = provider
        self.submitter = submitter
        self.waiter = waiter
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    async def _submit_and_wait(
        self,
        chain: Chain,
        wallet: Wallet,
        to: str,
        value: int,
        data: Optional[bytes],
    ) -> TransactionReceipt:
        submitted: SubmittedTransaction = await asyncio.to_thread(
            self.submitter.submit, chain, wallet, to, value, data
        )
        return await self.waiter.wait_for_receipt(
            chain,
            submitted.tx_hash,
            self.poll_interval,
            self.max_attempts,
            gas_limit=submitted.gas_limit,
        )

    async def send_native(self, chain: Chain, wallet: Wallet, to: str, value_wei: int) -> TransactionReceipt:
        """Transfer *value_wei* to *to* and wait for it to be mined."""
        logger.info(f"Sending {value_wei} wei to {to} on {chain.name}")
        return await self._submit_and_wait(chain, wallet, to, value_wei, None)

    async def send_token(self, chain: Chain, wallet: Wallet, to: str, amount: int) -> TransactionReceipt:
        """Transfer *amount* nRLC to *to* and wait for it to be mined.

        Raises ``ConfigurationError`` if the chain has no RLC contract.
        """
        token = self.provider.get_token(chain)
        data = token.encode_transfer(to, amount)
        logger.info(f"Sending {amount} nRLC to {to} on {chain.name}")
        return await self._submit_and_wait(chain, wallet, token.address, 0, data)
