"""Poll a chain for a transaction receipt and classify the outcome."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from rlc_wallet.errors import ConfirmationTimeout, TransactionFailed
from rlc_wallet.wallet.chains import Chain
from rlc_wallet.wallet.models import TransactionReceipt
from rlc_wallet.wallet.provider import Web3Provider

logger = logging.getLogger("rlc_wallet.wallet.waiter")


def _normalize(raw: dict) -> dict:
    data = {}
    for key, value in raw.items():
        if isinstance(value, (bytes, bytearray)):
            value = "0x" + bytes(value).hex()
        data[key] = value
    return data


class ConfirmationWaiter:
    """Fixed-interval receipt polling with an attempt budget."""

    def __init__(self, provider: Web3Provider) -> None:
        self.provider = provider

    async def wait_for_receipt(
        self,
        chain: Chain,
        tx_hash: str,
        poll_interval: float,
        max_attempts: int,
        gas_limit: Optional[int] = None,
    ) -> TransactionReceipt:
        """Wait until *tx_hash* is mined on *chain* and check it succeeded.

        Args:
            chain: Chain the transaction was broadcast to
            tx_hash: Hash returned by the submitter
            poll_interval: Seconds between receipt lookups
            max_attempts: Lookups before giving up
            gas_limit: Gas the transaction was sent with; fetched from the
                chain when omitted and the receipt has no status field

        Returns:
            The validated receipt

        Raises:
            ConfirmationTimeout: If no receipt shows up within the budget
            TransactionFailed: If the receipt reports a revert
        """
        for attempt in range(1, max_attempts + 1):
            try:
                raw = await asyncio.to_thread(self.provider.get_receipt, chain, tx_hash)
            except Exception as exc:
                logger.warning(
                    f"Receipt lookup {attempt}/{max_attempts} for {tx_hash} on {chain.name} failed: {exc}"
                )
                raw = None

            if raw is not None:
                logger.debug(f"Receipt for {tx_hash}: {raw}")
                return await self._check(chain, tx_hash, raw, gas_limit)

            if attempt < max_attempts:
                await asyncio.sleep(poll_interval)

        raise ConfirmationTimeout(chain.name, tx_hash, max_attempts)

    async def _check(
        self,
        chain: Chain,
        tx_hash: str,
        raw: dict,
        gas_limit: Optional[int],
    ) -> TransactionReceipt:
        receipt = TransactionReceipt.model_validate(_normalize(raw))
        receipt.gas_limit = gas_limit

        if receipt.status is not None:
            if receipt.status == 0:
                raise TransactionFailed(chain.name, tx_hash, "receipt status is 0")
            logger.info(f"Transaction {tx_hash} confirmed on {chain.name}")
            return receipt

        # No status field: a call that burnt all its gas is taken as reverted
        if gas_limit is None:
            gas_limit = await asyncio.to_thread(
                self.provider.get_transaction_gas, chain, tx_hash
            )
        receipt.gas_limit = gas_limit
        if receipt.gas_used == gas_limit:
            raise TransactionFailed(
                chain.name, tx_hash, f"all {gas_limit} gas was used"
            )
        logger.info(f"Transaction {tx_hash} confirmed on {chain.name}")
        return receipt
