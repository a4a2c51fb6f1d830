"""Exception hierarchy for RLC Wallet."""

from __future__ import annotations

from typing import Any, Optional


class WalletError(Exception):
    """Base class for every error raised by the wallet."""


class ConfigurationError(WalletError):
    """A chain, contract, faucet or destination mapping is missing."""


class UserAborted(WalletError):
    """The user declined an interactive confirmation."""


class TransactionError(WalletError):
    """A send could not be completed on *chain_name*."""

    def __init__(
        self,
        message: str,
        chain_name: str,
        tx_hash: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.chain_name = chain_name
        self.tx_hash = tx_hash


class SigningError(TransactionError):
    """The private key could not sign the transaction for the chain id."""


class BroadcastError(TransactionError):
    """The endpoint refused to build or accept the transaction."""


class ConfirmationTimeout(TransactionError):
    """No receipt appeared within the polling budget."""

    def __init__(self, chain_name: str, tx_hash: str, attempts: int) -> None:
        super().__init__(
            f"No receipt for {tx_hash} on {chain_name} after {attempts} attempts",
            chain_name,
            tx_hash,
        )
        self.attempts = attempts


class TransactionFailed(TransactionError):
    """A receipt was found but the execution reverted."""

    def __init__(self, chain_name: str, tx_hash: str, reason: str) -> None:
        super().__init__(
            f"Transaction {tx_hash} failed on {chain_name}: {reason}",
            chain_name,
            tx_hash,
        )
        self.reason = reason


class PartialQueryFailure(WalletError):
    """One source inside an aggregate query failed.

    These are collected into reports, never raised out of an aggregator.
    """

    def __init__(self, source: str, cause: Any) -> None:
        super().__init__(f"{source}: {cause}")
        self.source = source
        self.cause = cause
