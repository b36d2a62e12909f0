"""Unit tests for the fixed-point amount codec"""

import pytest
from rusd_gateway.domain.amounts import (
    I128_MAX,
    I128_MIN,
    ensure_i128,
    exchange_rate,
    format_amount,
    parse_amount,
    shorten,
)
from rusd_gateway.domain.exceptions import InvalidAmount


def test_format_amount_examples():
    """Test trailing zeros are never padded into the display form"""
    assert format_amount(123456789, 7) == "12.3456789"
    assert format_amount(100000000, 7) == "10"
    assert format_amount(0, 7) == "0"
    assert format_amount(5, 7) == "0.0000005"
    assert format_amount(15_000000, 7) == "1.5"


def test_format_amount_negative():
    assert format_amount(-15_000000, 7) == "-1.5"
    assert format_amount(-1, 2) == "-0.01"


def test_format_amount_zero_decimals():
    assert format_amount(42, 0) == "42"
    assert format_amount(-42, 0) == "-42"


def test_parse_amount_examples():
    assert parse_amount("12.3456789", 7) == 123456789
    assert parse_amount("10", 7) == 100000000
    assert parse_amount(".5", 7) == 5000000
    assert parse_amount("  3.25  ", 2) == 325


def test_parse_amount_truncates_excess_precision():
    """Test excess fractional digits are dropped, not rounded"""
    assert parse_amount("12.34567891234", 7) == 123456789
    assert parse_amount("0.99999999", 7) == 9999999


def test_parse_amount_empty_and_negative_zero():
    for decimals in (0, 2, 7, 18):
        assert parse_amount("", decimals) == 0
        assert parse_amount("   ", decimals) == 0
    assert parse_amount("-0.00", 2) == 0


def test_parse_amount_negative():
    assert parse_amount("-1.5", 7) == -15_000000


@pytest.mark.parametrize("text", ["abc", "1.2.3", "1,5", "+5", "--1", "1e5", "1 000", "١٢"])
def test_parse_amount_rejects_non_numeric(text):
    with pytest.raises(InvalidAmount):
        parse_amount(text, 7)


@pytest.mark.parametrize("decimals", [0, 1, 6, 7, 18])
def test_parse_inverts_format(decimals):
    """Test parse(format(v)) reconstructs v exactly within the precision"""
    for value in (0, 1, 9, 10, 123456789, 10**decimals, 10**decimals + 1, I128_MAX):
        assert parse_amount(format_amount(value, decimals), decimals) == value
        assert parse_amount(format_amount(-value, decimals), decimals) == -value


def test_ensure_i128_bounds():
    assert ensure_i128(I128_MAX) == I128_MAX
    assert ensure_i128(I128_MIN) == I128_MIN
    with pytest.raises(InvalidAmount):
        ensure_i128(I128_MAX + 1)
    with pytest.raises(InvalidAmount):
        ensure_i128(I128_MIN - 1)


def test_shorten():
    assert shorten("GABCDEFGHIJKLMNOP") == "GABC...MNOP"
    assert shorten("CONTRACTID", 2) == "CO...ID"
    assert shorten("") == ""


def test_exchange_rate():
    """Test collateral per issued token at 6 decimals, parity when unknown"""
    assert exchange_rate(None, None) == "1.000000"
    assert exchange_rate(30_0000000, 0) == "1.000000"
    assert exchange_rate(0, 25_0000000) == "1.000000"
    assert exchange_rate(30_0000000, 25_0000000) == "1.2"
    assert exchange_rate(10, 3) == "3.333333"
