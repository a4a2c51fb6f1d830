"""Configuration system for RLC Wallet.

Defaults ship with the package in ``defaults.yaml``.  A user file (by default
``rlc-wallet.yaml`` in the working directory) overrides top-level keys.  Both
support ``${VAR}`` environment variable expansion.
"""

from __future__ import annotations

import os
import re
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from rlc_wallet.errors import ConfigurationError


# ---------------------------------------------------------------------------
# ${VAR} expansion for RPC urls and faucet endpoints
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def _expand_env_vars(value: str) -> str:
    """Fill ``${INFURA_PROJECT_ID}``-style placeholders from the environment.

    An unset variable stays in the string, so a testnet RPC url without a
    project id fails with ``.../v3/${INFURA_PROJECT_ID}`` in the per-chain
    balance error rather than hitting a bare ``/v3/`` endpoint.
    """
    return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)


def _expand_env_recursive(obj: object) -> object:
    """Expand placeholders in every string of a loaded YAML document."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, list):
        return [_expand_env_recursive(item) for item in obj]
    if isinstance(obj, dict):
        return {key: _expand_env_recursive(item) for key, item in obj.items()}
    return obj


# ---------------------------------------------------------------------------
# Pydantic v2 models
# ---------------------------------------------------------------------------


class ChainConfig(BaseModel):
    """A single EVM network and, optionally, its RLC contract address."""

    name: str
    chain_id: int
    rpc_url: str
    native_symbol: str = "ETH"
    explorer_url: str = ""
    token_address: Optional[str] = None


class FaucetKind(str, Enum):
    NATIVE = "native"
    TOKEN = "token"


class FaucetSourceConfig(BaseModel):
    """A faucet endpoint.

    ``url`` and ``json_body`` may contain ``{address}`` and ``{chain_name}``
    placeholders.  A source with a ``message`` and no ``url`` is a manual
    faucet: it answers with the message and performs no request.
    """

    name: str
    kind: FaucetKind
    chain_name: Optional[str] = None  # None = serves every chain
    method: str = "GET"
    url: Optional[str] = None
    json_body: Optional[dict[str, Any]] = None
    message: Optional[str] = None


class WalletSettings(BaseModel):
    """Root configuration object."""

    wallet_file: str = "wallet.json"
    chains: list[ChainConfig] = Field(default_factory=list)
    faucets: list[FaucetSourceConfig] = Field(default_factory=list)
    destinations: dict[str, str] = Field(default_factory=dict)
    default_destination: str = "iexec"
    reserve: Decimal = Decimal("0.01")           # native units kept back by sweep
    poll_interval_seconds: float = 2.0
    max_attempts: int = 90                        # receipt polls before timing out
    query_timeout_seconds: float = 15.0           # per remote call in aggregates
    gas_buffer: float = 1.2                       # multiplier on estimated gas


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

_DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.yaml"

USER_CONFIG_NAME = "rlc-wallet.yaml"


def _read_yaml(path: Path) -> dict:
    raw_data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(f"{path} must contain a YAML mapping")
    return raw_data


def load_config(path: Path | None = None, base: Path | None = None) -> WalletSettings:
    """Load the packaged defaults and overlay a user file on top.

    Parameters
    ----------
    path:
        Explicit user configuration file.  It must exist.
    base:
        Directory searched for ``rlc-wallet.yaml`` when *path* is not given.
        Defaults to the current working directory.

    Raises
    ------
    ConfigurationError
        If *path* does not exist or a file is not a YAML mapping.
    """
    data = _read_yaml(_DEFAULTS_PATH)

    if path is None:
        candidate = (base or Path.cwd()) / USER_CONFIG_NAME
        path = candidate if candidate.exists() else None
    elif not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    if path is not None:
        data.update(_read_yaml(path))

    expanded = _expand_env_recursive(data)
    return WalletSettings.model_validate(expanded)
