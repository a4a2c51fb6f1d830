"""Key-pair generation and address derivation using eth-account."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from eth_account import Account
from eth_keys import keys
from hexbytes import HexBytes


@dataclass(frozen=True)
class Wallet:
    """A single secp256k1 key pair.

    ``public_key`` and ``address`` are always derived from ``private_key``;
    build instances with :func:`wallet_from_private_key` or
    :func:`generate_wallet`.
    """

    private_key: bytes = field(repr=False)
    public_key: bytes
    address: str

    @property
    def private_key_hex(self) -> str:
        return "0x" + self.private_key.hex()

    @property
    def public_key_hex(self) -> str:
        return "0x" + self.public_key.hex()


def _normalize_private_key(private_key: Union[str, bytes]) -> bytes:
    raw = bytes(HexBytes(private_key))
    if len(raw) != 32:
        raise ValueError(f"Private key must be 32 bytes, got {len(raw)}")
    return raw


def wallet_from_private_key(private_key: Union[str, bytes]) -> Wallet:
    """Derive the public key and checksummed address from a private key.

    Parameters
    ----------
    private_key:
        Raw 32 bytes or a hex string, with or without ``0x``.

    Raises
    ------
    ValueError
        If the key is not 32 bytes or is outside the curve order.
    """
    raw = _normalize_private_key(private_key)
    try:
        pk = keys.PrivateKey(raw)
    except Exception as exc:
        raise ValueError(f"Invalid private key: {exc}") from exc
    public_key = pk.public_key
    return Wallet(
        private_key=raw,
        public_key=public_key.to_bytes(),
        address=public_key.to_checksum_address(),
    )


def generate_wallet() -> Wallet:
    """Generate a fresh random key pair."""
    acct = Account.create()
    return wallet_from_private_key(bytes(acct.key))
