"""Tests for configuration loading and the chain registry."""
from decimal import Decimal

import pytest
from web3 import Web3

from rlc_wallet.config import FaucetKind, load_config
from rlc_wallet.errors import ConfigurationError
from rlc_wallet.wallet.chains import ChainRegistry


def test_packaged_defaults(tmp_path):
    settings = load_config(base=tmp_path)

    names = [c.name for c in settings.chains]
    assert names == ["mainnet", "ropsten", "rinkeby", "kovan"]
    assert settings.reserve == Decimal("0.01")
    assert settings.default_destination == "iexec"
    kinds = {f.kind for f in settings.faucets}
    assert kinds == {FaucetKind.NATIVE, FaucetKind.TOKEN}


def test_every_token_faucet_chain_has_rlc_contract(tmp_path):
    settings = load_config(base=tmp_path)
    token_faucets = [f for f in settings.faucets if f.kind == FaucetKind.TOKEN]
    assert token_faucets

    for chain in settings.chains:
        if any(f.chain_name in (None, chain.name) for f in token_faucets):
            assert chain.token_address and Web3.is_address(chain.token_address), chain.name


def test_user_file_overrides_top_level_keys(tmp_path):
    (tmp_path / "rlc-wallet.yaml").write_text(
        "reserve: '0.05'\n"
        "destinations:\n"
        "  iexec: '0x000000000000000000000000000000000000dEaD'\n"
    )
    settings = load_config(base=tmp_path)

    assert settings.reserve == Decimal("0.05")
    assert settings.destinations["iexec"].endswith("dEaD")
    # Untouched keys keep their defaults
    assert len(settings.chains) == 4


def test_env_vars_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("INFURA_PROJECT_ID", "abc123")
    settings = load_config(base=tmp_path)

    ropsten = next(c for c in settings.chains if c.name == "ropsten")
    assert ropsten.rpc_url.endswith("/v3/abc123")


def test_unset_env_var_left_in_place(tmp_path, monkeypatch):
    monkeypatch.delenv("INFURA_PROJECT_ID", raising=False)
    settings = load_config(base=tmp_path)

    kovan = next(c for c in settings.chains if c.name == "kovan")
    assert kovan.rpc_url.endswith("/v3/${INFURA_PROJECT_ID}")


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_config(tmp_path / "nope.yaml")


def test_non_mapping_file(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_config(path)


class TestChainRegistry:

    def test_lookup_by_name_and_id(self, settings):
        registry = ChainRegistry.from_configs(settings.chains)
        assert registry.get("kovan").chain_id == 42
        assert registry.get(1).name == "mainnet"
        assert registry.get("42").name == "kovan"
        assert registry.names() == ["mainnet", "kovan"]

    def test_unknown_chain(self, settings):
        registry = ChainRegistry.from_configs(settings.chains)
        with pytest.raises(ConfigurationError, match="Unknown chain 'goerli'"):
            registry.get("goerli")

    def test_duplicate_names_rejected(self, settings):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            ChainRegistry.from_configs(settings.chains + settings.chains[:1])

    def test_token_address_required(self, bare_chain, token_chain):
        assert token_chain.require_token_address() == token_chain.token_address
        with pytest.raises(ConfigurationError, match="No RLC contract"):
            bare_chain.require_token_address()

    def test_explorer_links(self, token_chain):
        assert token_chain.tx_url("0xabc") == "https://etherscan.io/tx/0xabc"
        assert token_chain.address_url("0x1") == "https://etherscan.io/address/0x1"
