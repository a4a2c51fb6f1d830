"""Build, sign and broadcast transactions."""

from __future__ import annotations

import logging
from typing import Optional

from web3 import Web3

from rlc_wallet.errors import BroadcastError, SigningError
from rlc_wallet.wallet.chains import Chain
from rlc_wallet.wallet.keys import Wallet
from rlc_wallet.wallet.models import SubmittedTransaction
from rlc_wallet.wallet.provider import Web3Provider

logger = logging.getLogger("rlc_wallet.wallet.submitter")


class TransactionSubmitter:
    """Sends one transaction per call; never retries.

    A caller that wants to resend must call :meth:`submit` again, which
    builds a fresh request with a fresh nonce.
    """

    def __init__(self, provider: Web3Provider, gas_buffer: float = 1.2) -> None:
        self.provider = provider
        self.gas_buffer = gas_buffer

    def submit(
        self,
        chain: Chain,
        wallet: Wallet,
        to: str,
        value: int = 0,
        data: Optional[bytes] = None,
    ) -> SubmittedTransaction:
        """Sign with the wallet key for ``chain.chain_id`` and broadcast.

        Returns the transaction hash together with the gas limit that was
        sent, which the confirmation step needs to detect a revert.

        Raises
        ------
        BroadcastError
            If the endpoint cannot build the transaction (nonce, fees, gas
            estimate) or rejects the signed bytes.
        SigningError
            If the key cannot sign for this chain.
        """
        w3 = self.provider.get_web3(chain)

        try:
            tx = self._build(w3, chain, wallet.address, to, value, data or b"")
        except Exception as exc:
            logger.error(f"Could not build transaction on {chain.name}: {exc}")
            raise BroadcastError(
                f"Could not build transaction on {chain.name}: {exc}", chain.name
            ) from exc

        try:
            signed = w3.eth.account.sign_transaction(tx, wallet.private_key)
        except Exception as exc:
            logger.error(f"Transaction signing failed on {chain.name}: {exc}")
            raise SigningError(
                f"Failed to sign transaction for chain id {chain.chain_id}: {exc}",
                chain.name,
            ) from exc

        try:
            raw_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as exc:
            logger.error(f"Failed to send transaction on {chain.name}: {exc}")
            raise BroadcastError(
                f"{chain.name} rejected the transaction: {exc}", chain.name
            ) from exc

        tx_hash = Web3.to_hex(raw_hash)
        logger.info(f"Transaction sent on {chain.name}: {tx_hash}")
        return SubmittedTransaction(tx_hash=tx_hash, chain_name=chain.name, gas_limit=tx["gas"])

    def _build(
        self,
        w3: Web3,
        chain: Chain,
        from_address: str,
        to: str,
        value: int,
        data: bytes,
    ) -> dict:
        """Compose the request.

        Uses EIP-1559 fee parameters with a legacy gas price fallback.
        """
        tx: dict = {
            "from": from_address,
            "to": Web3.to_checksum_address(to),
            "value": int(value),
            "data": data,
            "nonce": w3.eth.get_transaction_count(from_address),
            "chainId": chain.chain_id,
        }

        latest = w3.eth.get_block("latest")
        base_fee = latest.get("baseFeePerGas")
        if base_fee is not None:
            max_priority = Web3.to_wei(1.5, "gwei")
            tx["maxFeePerGas"] = base_fee * 2 + max_priority
            tx["maxPriorityFeePerGas"] = max_priority
        else:
            tx["gasPrice"] = w3.eth.gas_price

        estimate = w3.eth.estimate_gas(tx)
        # Headroom keeps a successful call below the limit, see ConfirmationWaiter
        tx["gas"] = int(estimate * self.gas_buffer)
        logger.debug(f"Estimated gas {estimate}, sending with {tx['gas']}")
        return tx
