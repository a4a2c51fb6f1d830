"""Wallet file persistence (``{"privateKey": "0x..."}`` JSON document)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional

from rlc_wallet.errors import UserAborted
from rlc_wallet.wallet.keys import Wallet, generate_wallet, wallet_from_private_key

logger = logging.getLogger("rlc_wallet.wallet.keystore")

Confirm = Callable[[str], bool]


def _serialize(wallet: Wallet) -> str:
    return json.dumps({"privateKey": wallet.private_key_hex}, indent=4)


def save_wallet(wallet: Wallet, wallet_path: Path, confirm: Confirm) -> bool:
    """Write *wallet* to *wallet_path*.

    The file is created exclusively.  If it already exists, *confirm* is
    asked before replacing it.

    Returns
    -------
    bool
        ``True`` if the file was written, ``False`` if the existing wallet
        was kept.
    """
    payload = _serialize(wallet)
    wallet_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(wallet_path, "x", encoding="utf-8") as fh:
            fh.write(payload)
        return True
    except FileExistsError:
        if not confirm(f"{wallet_path.name} already exists, replace it with new wallet?"):
            logger.info("Keeping old wallet")
            return False
        wallet_path.write_text(payload, encoding="utf-8")
        return True


def create_wallet(wallet_path: Path, confirm: Confirm) -> Wallet:
    """Generate a new key pair and persist it.

    When the user keeps an existing file, the wallet stored in it is returned
    instead of the freshly generated one.
    """
    wallet = generate_wallet()
    if save_wallet(wallet, wallet_path, confirm):
        logger.info(f"Wallet {wallet.address} written to {wallet_path}")
        return wallet
    return load_wallet(wallet_path)


def load_wallet(wallet_path: Path, confirm: Optional[Confirm] = None) -> Wallet:
    """Read the private key from *wallet_path* and re-derive the wallet.

    If the file is missing and *confirm* is given, the user is offered to
    create one.

    Raises
    ------
    UserAborted
        If the file is missing and creation is declined (or not offered).
    ValueError
        If the file does not hold a usable ``privateKey``.
    """
    try:
        raw = wallet_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if confirm is not None and confirm(
            f"You don't have a {wallet_path.name} yet, create one?"
        ):
            return create_wallet(wallet_path, confirm)
        raise UserAborted("Aborting. You need a wallet to continue")

    data = json.loads(raw)
    private_key = data.get("privateKey") if isinstance(data, dict) else None
    if not private_key:
        raise ValueError(f"{wallet_path} has no 'privateKey' entry")
    return wallet_from_private_key(private_key)
