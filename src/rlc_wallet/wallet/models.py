"""Result models shared by the wallet components."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from rlc_wallet.errors import PartialQueryFailure


class TransactionReceipt(BaseModel):
    """Subset of a mined transaction's receipt."""

    model_config = ConfigDict(populate_by_name=True)

    transaction_hash: str = Field(..., alias="transactionHash")
    block_number: Optional[int] = Field(None, alias="blockNumber")
    gas_used: int = Field(..., alias="gasUsed")
    # Absent on chains that predate typed receipts
    status: Optional[int] = None
    gas_limit: Optional[int] = None


class SubmittedTransaction(BaseModel):
    """A broadcast transaction and the gas limit it was sent with."""

    tx_hash: str
    chain_name: str
    gas_limit: int


@dataclass
class BalanceEntry:
    chain_name: str
    native_balance: Decimal = Decimal(0)
    token_balance: Optional[Decimal] = None  # None = no token contract on this chain
    native_error: Optional[str] = None
    token_error: Optional[str] = None


@dataclass
class BalanceReport:
    """Balances in configuration order plus the failures met while querying."""

    address: str
    entries: list[BalanceEntry] = field(default_factory=list)
    failures: list[PartialQueryFailure] = field(default_factory=list)

    def get(self, chain_name: str) -> BalanceEntry:
        for entry in self.entries:
            if entry.chain_name == chain_name:
                return entry
        raise KeyError(chain_name)


@dataclass
class FaucetResponse:
    source_name: str
    payload: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FaucetResult:
    responses: list[FaucetResponse] = field(default_factory=list)


@dataclass
class SweepResult:
    """What a sweep actually broadcast (amounts in smallest units)."""

    chain_name: str
    destination: str
    token_amount: int = 0
    token_receipt: Optional[TransactionReceipt] = None
    native_amount: int = 0
    native_receipt: Optional[TransactionReceipt] = None

    @property
    def transfers(self) -> int:
        return int(self.token_receipt is not None) + int(self.native_receipt is not None)
