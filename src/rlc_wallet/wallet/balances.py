"""Concurrent native and token balance queries across chains."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Callable, Sequence

from rlc_wallet.errors import PartialQueryFailure
from rlc_wallet.wallet.chains import Chain
from rlc_wallet.wallet.models import BalanceEntry, BalanceReport
from rlc_wallet.wallet.provider import Web3Provider
from rlc_wallet.wallet.units import from_smallest_unit

logger = logging.getLogger("rlc_wallet.wallet.balances")


class BalanceAggregator:
    """Fans out one query per chain and joins on all of them.

    A failing or slow chain reports zero; it never fails the whole report.
    """

    def __init__(self, provider: Web3Provider, timeout: float = 15.0) -> None:
        self.provider = provider
        self.timeout = timeout

    async def _query(self, fn: Callable[[str, Chain], int], address: str, chain: Chain) -> int:
        return await asyncio.wait_for(asyncio.to_thread(fn, address, chain), self.timeout)

    async def aggregate(self, address: str, chains: Sequence[Chain]) -> BalanceReport:
        """Return one entry per chain, in the order *chains* was given."""
        token_chains = [chain for chain in chains if chain.has_token]

        native_results, token_results = await asyncio.gather(
            asyncio.gather(
                *(self._query(self.provider.get_native_balance, address, c) for c in chains),
                return_exceptions=True,
            ),
            asyncio.gather(
                *(self._query(self.provider.get_token_balance, address, c) for c in token_chains),
                return_exceptions=True,
            ),
        )
        token_by_chain = dict(zip((c.name for c in token_chains), token_results))

        report = BalanceReport(address=address)
        for chain, native in zip(chains, native_results):
            entry = BalanceEntry(chain_name=chain.name)

            if _failed(native):
                entry.native_error = _describe(native)
                report.failures.append(PartialQueryFailure(chain.name, native))
                logger.warning(f"Failed to get balance on {chain.name}: {entry.native_error}")
            else:
                entry.native_balance = from_smallest_unit(native)

            if chain.name in token_by_chain:
                token = token_by_chain[chain.name]
                if _failed(token):
                    entry.token_balance = Decimal(0)
                    entry.token_error = _describe(token)
                    report.failures.append(PartialQueryFailure(f"{chain.name} RLC", token))
                    logger.warning(f"Failed to get RLC balance on {chain.name}: {entry.token_error}")
                else:
                    entry.token_balance = Decimal(token)

            report.entries.append(entry)
        return report


def _failed(result: object) -> bool:
    if isinstance(result, BaseException):
        if not isinstance(result, Exception):
            raise result
        return True
    return False


def _describe(exc: BaseException) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return "timed out"
    return str(exc) or type(exc).__name__
