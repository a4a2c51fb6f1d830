"""Tests for key derivation and the wallet file."""
import json

import pytest
from eth_account import Account

from rlc_wallet.errors import UserAborted
from rlc_wallet.wallet.keys import generate_wallet, wallet_from_private_key
from rlc_wallet.wallet.keystore import create_wallet, load_wallet, save_wallet
from tests.conftest import TEST_PRIV_KEY


def test_derivation_is_deterministic():
    first = wallet_from_private_key(TEST_PRIV_KEY)
    second = wallet_from_private_key(TEST_PRIV_KEY)
    assert first == second
    assert first.public_key == second.public_key
    assert first.address == second.address


def test_address_matches_eth_account():
    wallet = wallet_from_private_key(TEST_PRIV_KEY)
    assert wallet.address == Account.from_key(TEST_PRIV_KEY).address
    assert len(wallet.public_key) == 64
    assert len(wallet.private_key) == 32


def test_accepts_bytes_and_unprefixed_hex():
    raw = bytes.fromhex(TEST_PRIV_KEY[2:])
    assert wallet_from_private_key(raw).address == wallet_from_private_key(TEST_PRIV_KEY[2:]).address


def test_rejects_short_key():
    with pytest.raises(ValueError, match="32 bytes"):
        wallet_from_private_key("0x1234")


def test_private_key_not_in_repr():
    wallet = wallet_from_private_key(TEST_PRIV_KEY)
    assert TEST_PRIV_KEY[2:] not in repr(wallet)


def test_generate_wallet_rederives():
    wallet = generate_wallet()
    assert wallet_from_private_key(wallet.private_key) == wallet


def test_save_then_load(tmp_path):
    path = tmp_path / "wallet.json"
    wallet = wallet_from_private_key(TEST_PRIV_KEY)
    assert save_wallet(wallet, path, confirm=lambda msg: False)

    assert json.loads(path.read_text()) == {"privateKey": TEST_PRIV_KEY}
    assert load_wallet(path) == wallet


def test_overwrite_declined_keeps_old_wallet(tmp_path):
    path = tmp_path / "wallet.json"
    old = wallet_from_private_key(TEST_PRIV_KEY)
    save_wallet(old, path, confirm=lambda msg: True)

    asked = []
    kept = create_wallet(path, confirm=lambda msg: asked.append(msg) or False)

    assert kept == old
    assert "already exists" in asked[0]


def test_overwrite_accepted_replaces_wallet(tmp_path):
    path = tmp_path / "wallet.json"
    old = wallet_from_private_key(TEST_PRIV_KEY)
    save_wallet(old, path, confirm=lambda msg: True)

    new = create_wallet(path, confirm=lambda msg: True)

    assert new.address != old.address
    assert load_wallet(path) == new


def test_missing_wallet_declined(tmp_path):
    with pytest.raises(UserAborted):
        load_wallet(tmp_path / "wallet.json", confirm=lambda msg: False)
    assert not (tmp_path / "wallet.json").exists()


def test_missing_wallet_created_on_request(tmp_path):
    path = tmp_path / "wallet.json"
    wallet = load_wallet(path, confirm=lambda msg: True)
    assert path.exists()
    assert load_wallet(path) == wallet


def test_wallet_file_without_key(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text("{}")
    with pytest.raises(ValueError, match="privateKey"):
        load_wallet(path)
