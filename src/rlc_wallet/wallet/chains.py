"""Chain definitions for the configured EVM networks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from rlc_wallet.config import ChainConfig
from rlc_wallet.errors import ConfigurationError


@dataclass(frozen=True)
class Chain:
    """An EVM-compatible blockchain network."""

    name: str
    chain_id: int
    rpc_url: str
    native_symbol: str
    explorer_url: str
    token_address: Optional[str] = None

    @classmethod
    def from_config(cls, cfg: ChainConfig) -> Chain:
        return cls(
            name=cfg.name,
            chain_id=cfg.chain_id,
            rpc_url=cfg.rpc_url,
            native_symbol=cfg.native_symbol,
            explorer_url=cfg.explorer_url.rstrip("/"),
            token_address=cfg.token_address,
        )

    @property
    def has_token(self) -> bool:
        return bool(self.token_address)

    def require_token_address(self) -> str:
        """Return the token contract address or raise ``ConfigurationError``."""
        if not self.token_address:
            raise ConfigurationError(
                f"No RLC contract configured for chain '{self.name}'"
            )
        return self.token_address

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url}/tx/{tx_hash}"


class ChainRegistry:
    """Read-only lookup of chains by name or numeric id, in configuration order."""

    def __init__(self, chains: Iterable[Chain]) -> None:
        self._chains: dict[str, Chain] = {}
        for chain in chains:
            if chain.name in self._chains:
                raise ConfigurationError(f"Duplicate chain name '{chain.name}'")
            self._chains[chain.name] = chain

    @classmethod
    def from_configs(cls, configs: Iterable[ChainConfig]) -> ChainRegistry:
        return cls(Chain.from_config(cfg) for cfg in configs)

    def get(self, key: Union[str, int]) -> Chain:
        """Get a chain by name or chain id. Raises ``ConfigurationError`` if not found."""
        if isinstance(key, str) and key in self._chains:
            return self._chains[key]
        try:
            chain_id = int(key)
        except (TypeError, ValueError):
            chain_id = None
        if chain_id is not None:
            for chain in self._chains.values():
                if chain.chain_id == chain_id:
                    return chain
        raise ConfigurationError(
            f"Unknown chain '{key}'. Available: {self.names()}"
        )

    def names(self) -> list[str]:
        """Return the names of all configured chains."""
        return list(self._chains.keys())

    def all(self) -> list[Chain]:
        return list(self._chains.values())

    def __len__(self) -> int:
        return len(self._chains)
