"""Tests for unit conversions."""
from decimal import Decimal

import pytest
from web3 import Web3

from rlc_wallet.wallet.units import format_amount, from_smallest_unit, to_smallest_unit


def test_to_wei():
    assert to_smallest_unit("1") == 10**18
    assert to_smallest_unit("0.99") == 99 * 10**16
    assert to_smallest_unit(Decimal("1.5")) == 15 * 10**17


def test_float_goes_through_str():
    assert to_smallest_unit(0.1) == 10**17


def test_extra_digits_truncated():
    assert to_smallest_unit("0.0000000000000000019") == 1
    assert to_smallest_unit("1.23", unit="gwei") == 1230000000


def test_rejects_nan():
    with pytest.raises(ValueError):
        to_smallest_unit("NaN")


def test_from_wei_is_exact():
    assert from_smallest_unit(15 * 10**17) == Decimal("1.5")
    assert from_smallest_unit(1) == Decimal("1E-18")
    assert from_smallest_unit(123456789, unit="gwei") == Decimal("0.123456789")


def test_format_amount():
    assert format_amount(from_smallest_unit(10**20)) == "100"
    assert format_amount(Decimal("1.500")) == "1.5"
    assert format_amount(Decimal(0)) == "0"


def test_matches_web3_converters():
    assert to_smallest_unit("2.5") == Web3.to_wei(Decimal("2.5"), "ether")
    assert from_smallest_unit(10**18) == Web3.from_wei(10**18, "ether")
    assert from_smallest_unit(0) == Decimal(0)


def test_rejects_garbage():
    with pytest.raises(ValueError, match="Invalid amount"):
        to_smallest_unit("lots")
