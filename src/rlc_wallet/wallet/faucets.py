"""Faucet requests for native coin (ETH) and RLC, using httpx."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence, Union

import httpx

from rlc_wallet.config import FaucetKind, FaucetSourceConfig
from rlc_wallet.errors import ConfigurationError
from rlc_wallet.wallet.models import FaucetResponse, FaucetResult

logger = logging.getLogger("rlc_wallet.wallet.faucets")

_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "rlc-wallet",
}


def _fill(template: Any, values: dict[str, str]) -> Any:
    """Substitute ``{address}`` / ``{chain_name}`` in strings of a JSON-like body."""
    if isinstance(template, str):
        return template.format(**values)
    if isinstance(template, dict):
        return {k: _fill(v, values) for k, v in template.items()}
    if isinstance(template, list):
        return [_fill(item, values) for item in template]
    return template


class FaucetAggregator:
    """Asks every matching faucet at once; a broken faucet becomes an error entry."""

    def __init__(
        self,
        sources: Sequence[FaucetSourceConfig],
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.sources = list(sources)
        self.timeout = timeout
        self._transport = transport

    def matching(self, kind: FaucetKind, chain_name: str) -> list[FaucetSourceConfig]:
        return [
            source
            for source in self.sources
            if source.kind == kind
            and (source.chain_name is None or source.chain_name == chain_name)
        ]

    async def request_funds(
        self,
        kind: Union[FaucetKind, str],
        chain_name: str,
        address: str,
    ) -> FaucetResult:
        """Query all faucets of *kind* serving *chain_name* for *address*.

        Raises
        ------
        ConfigurationError
            If no faucet matches; individual faucet failures never raise.
        """
        kind = FaucetKind(kind)
        sources = self.matching(kind, chain_name)
        if not sources:
            raise ConfigurationError(
                f"No {kind.value} faucet configured for chain '{chain_name}'"
            )

        values = {"address": address, "chain_name": chain_name}
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=_HEADERS, transport=self._transport
        ) as client:
            responses = await asyncio.gather(
                *(self._call(client, source, values) for source in sources)
            )
        return FaucetResult(responses=list(responses))

    async def _call(
        self,
        client: httpx.AsyncClient,
        source: FaucetSourceConfig,
        values: dict[str, str],
    ) -> FaucetResponse:
        if not source.url:
            return FaucetResponse(source_name=source.name, payload={"message": source.message or ""})

        try:
            url = _fill(source.url, values)
            body = _fill(source.json_body, values) if source.json_body is not None else None
            resp = await client.request(source.method.upper(), url, json=body)
            payload = resp.json()
        except httpx.HTTPError as e:
            logger.warning(f"Faucet {source.name} unreachable: {e}")
            return FaucetResponse(source_name=source.name, error=f"{source.name} faucet is down: {e}")
        except ValueError as e:
            # non-JSON body
            logger.warning(f"Faucet {source.name} returned an unusable answer: {e}")
            return FaucetResponse(source_name=source.name, error=f"{source.name} returned an invalid response")
        except Exception as e:
            # bad url template or request setup; one source never fails the batch
            logger.warning(f"Faucet {source.name} request failed: {e!r}")
            return FaucetResponse(source_name=source.name, error=f"{source.name} request failed: {e}")

        logger.debug(f"Faucet {source.name} answered {payload}")
        return FaucetResponse(source_name=source.name, payload=payload)
