"""High-level wallet manager used by the CLI."""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional, Union

from web3 import Web3

from rlc_wallet.config import FaucetKind, WalletSettings
from rlc_wallet.errors import ConfigurationError, UserAborted
from rlc_wallet.wallet.balances import BalanceAggregator
from rlc_wallet.wallet.chains import Chain, ChainRegistry
from rlc_wallet.wallet.faucets import FaucetAggregator
from rlc_wallet.wallet.keys import Wallet
from rlc_wallet.wallet.keystore import create_wallet, load_wallet
from rlc_wallet.wallet.models import BalanceReport, FaucetResult, SweepResult, TransactionReceipt
from rlc_wallet.wallet.provider import Web3Provider
from rlc_wallet.wallet.submitter import TransactionSubmitter
from rlc_wallet.wallet.sweep import SweepOrchestrator
from rlc_wallet.wallet.transfers import Transfers
from rlc_wallet.wallet.units import format_amount, to_decimal, to_smallest_unit
from rlc_wallet.wallet.waiter import ConfirmationWaiter

logger = logging.getLogger("rlc_wallet.wallet.manager")

Confirm = Callable[[str], bool]


def always_yes(message: str) -> bool:
    """Confirmation strategy that accepts everything (``--yes`` and tests)."""
    return True


class WalletManager:
    """Orchestrates keystore, chains, transfers and aggregators per command."""

    def __init__(
        self,
        settings: WalletSettings,
        confirm: Confirm = always_yes,
        base_dir: Optional[Path] = None,
        provider: Optional[Web3Provider] = None,
        faucets: Optional[FaucetAggregator] = None,
    ) -> None:
        self.settings = settings
        self.confirm = confirm
        self.wallet_path = (base_dir or Path.cwd()) / settings.wallet_file
        self.chains = ChainRegistry.from_configs(settings.chains)
        self.provider = provider or Web3Provider(request_timeout=settings.query_timeout_seconds)

        self.balances = BalanceAggregator(self.provider, timeout=settings.query_timeout_seconds)
        self.faucets = faucets or FaucetAggregator(
            settings.faucets, timeout=settings.query_timeout_seconds
        )
        self.transfers = Transfers(
            self.provider,
            TransactionSubmitter(self.provider, gas_buffer=settings.gas_buffer),
            ConfirmationWaiter(self.provider),
            poll_interval=settings.poll_interval_seconds,
            max_attempts=settings.max_attempts,
        )
        self.sweeper = SweepOrchestrator(
            self.provider, self.transfers, reserve_wei=to_smallest_unit(settings.reserve)
        )
        self._wallet: Optional[Wallet] = None

    # ------------------------------------------------------------------
    # Wallet lifecycle
    # ------------------------------------------------------------------

    def create(self) -> Wallet:
        """Generate a wallet file, asking before replacing an existing one."""
        self._wallet = create_wallet(self.wallet_path, self.confirm)
        return self._wallet

    def has_wallet(self) -> bool:
        return self.wallet_path.exists()

    @property
    def wallet(self) -> Wallet:
        """The loaded wallet; offers to create one when the file is missing."""
        if self._wallet is None:
            self._wallet = load_wallet(self.wallet_path, self.confirm)
        return self._wallet

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def chain(self, chain_name: str) -> Chain:
        return self.chains.get(chain_name)

    def resolve_destination(self, to: Optional[str] = None) -> tuple[str, str]:
        """Return ``(label, checksum address)`` for a name or a literal address."""
        label = to or self.settings.default_destination
        if Web3.is_address(label):
            return label, Web3.to_checksum_address(label)
        address = self.settings.destinations.get(label)
        if address is None:
            raise ConfigurationError(
                f"Unknown destination '{label}'. Add it under 'destinations' in the config "
                "or pass an address."
            )
        if not Web3.is_address(address):
            raise ConfigurationError(f"Destination '{label}' is not a valid address: {address}")
        return label, Web3.to_checksum_address(address)

    def _ask(self, message: str) -> None:
        if not self.confirm(message):
            logger.info(f"Declined: {message}")
            raise UserAborted("Transfer aborted by user.")

    # ------------------------------------------------------------------
    # Balances and faucets
    # ------------------------------------------------------------------

    async def show(self) -> BalanceReport:
        """Native and RLC balances on every configured chain."""
        return await self.balances.aggregate(self.wallet.address, self.chains.all())

    async def get_eth(self, chain_name: str) -> FaucetResult:
        chain = self.chain(chain_name)
        return await self.faucets.request_funds(FaucetKind.NATIVE, chain.name, self.wallet.address)

    async def get_rlc(self, chain_name: str) -> FaucetResult:
        chain = self.chain(chain_name)
        return await self.faucets.request_funds(FaucetKind.TOKEN, chain.name, self.wallet.address)

    # ------------------------------------------------------------------
    # Sends
    # ------------------------------------------------------------------

    async def send_eth(
        self,
        chain_name: str,
        amount: Union[str, Decimal],
        to: Optional[str] = None,
    ) -> TransactionReceipt:
        """Send *amount* native coin (display units) after confirmation."""
        wallet = self.wallet
        label, address = self.resolve_destination(to)
        chain = self.chain(chain_name)
        value = to_smallest_unit(amount) if to_decimal(amount) > 0 else 0
        if value <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")

        self._ask(
            f"Do you want to send {format_amount(to_decimal(amount))} {chain.name} "
            f"{chain.native_symbol} to {label}"
        )
        return await self.transfers.send_native(chain, wallet, address, value)

    async def send_rlc(
        self,
        chain_name: str,
        amount: Union[str, int],
        to: Optional[str] = None,
    ) -> TransactionReceipt:
        """Send *amount* nRLC after confirmation."""
        wallet = self.wallet
        label, address = self.resolve_destination(to)
        chain = self.chain(chain_name)
        chain.require_token_address()
        try:
            nrlc = int(amount)
        except ValueError:
            raise ValueError(f"nRLC amount must be an integer, got {amount}") from None
        if nrlc <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")

        self._ask(f"Do you want to send {nrlc} {chain.name} nRLC to {label}")
        return await self.transfers.send_token(chain, wallet, address, nrlc)

    async def sweep(self, chain_name: str, to: Optional[str] = None) -> SweepResult:
        """Send all RLC, then all native coin but the reserve, to *to*."""
        wallet = self.wallet
        label, address = self.resolve_destination(to)
        chain = self.chain(chain_name)

        self._ask(
            f"Do you want to sweep all {chain.name} nRLC and {chain.native_symbol} "
            f"(keeping {format_amount(self.settings.reserve)}) to {label}"
        )
        return await self.sweeper.sweep(chain, wallet, address)
