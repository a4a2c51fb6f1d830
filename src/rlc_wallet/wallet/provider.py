"""Web3 multi-chain provider for the configured EVM networks."""

from __future__ import annotations

import logging
from typing import Optional

from web3 import Web3
from web3.exceptions import TransactionNotFound
from web3.middleware import ExtraDataToPOAMiddleware

from rlc_wallet.wallet.chains import Chain
from rlc_wallet.wallet.token import TokenContract

logger = logging.getLogger("rlc_wallet.wallet.provider")


class Web3Provider:
    """Manages Web3 connections and token bindings across chains.

    All methods are blocking; async callers run them through
    ``asyncio.to_thread``.
    """

    def __init__(self, request_timeout: float = 15.0) -> None:
        self.request_timeout = request_timeout
        self._instances: dict[str, Web3] = {}
        self._tokens: dict[str, TokenContract] = {}

    def get_web3(self, chain: Chain) -> Web3:
        """Return a (cached) Web3 instance for the given chain.

        Injects POA middleware for non-mainnet chains.
        """
        if chain.name in self._instances:
            return self._instances[chain.name]

        w3 = Web3(
            Web3.HTTPProvider(
                chain.rpc_url, request_kwargs={"timeout": self.request_timeout}
            )
        )

        # Testnets and sidechains carry oversized extraData
        if chain.chain_id != 1:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        self._instances[chain.name] = w3
        return w3

    def get_token(self, chain: Chain) -> TokenContract:
        """Return the RLC binding for *chain*.

        Raises ``ConfigurationError`` when the chain has no token contract.
        """
        if chain.name not in self._tokens:
            address = chain.require_token_address()
            self._tokens[chain.name] = TokenContract(self.get_web3(chain), address)
        return self._tokens[chain.name]

    def get_native_balance(self, address: str, chain: Chain) -> int:
        """Native balance in wei."""
        w3 = self.get_web3(chain)
        checksum = Web3.to_checksum_address(address)
        return int(w3.eth.get_balance(checksum))

    def get_token_balance(self, address: str, chain: Chain) -> int:
        """Token balance in nRLC."""
        return self.get_token(chain).balance_of(address)

    def get_receipt(self, chain: Chain, tx_hash: str) -> Optional[dict]:
        """Return the receipt as a plain dict, or ``None`` while still pending."""
        w3 = self.get_web3(chain)
        try:
            receipt = w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        if receipt is None:
            return None
        return dict(receipt)

    def get_transaction_gas(self, chain: Chain, tx_hash: str) -> int:
        """Gas limit the transaction was sent with."""
        w3 = self.get_web3(chain)
        tx = w3.eth.get_transaction(tx_hash)
        return int(tx["gas"])
