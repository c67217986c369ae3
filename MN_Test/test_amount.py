from decimal import Decimal
from fractions import Fraction

import pytest

from MN_Account.amount import Coin, TokenAmount, add_coins, parse_token_amount
from MN_Tool_Box.errors import AmountParseError


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1234.567891", 1234567891),
        ("0.0000001", 0),
        ("1.9999999", 1999999),
        ("100", 100000000),
        ("0", 0),
        ("0.000001", 1),
        ("1000000000000.123456", 1000000000000123456),
        ("123456789012345678901234567890.5", 123456789012345678901234567890500000),
    ],
)
def test_base_units_truncate(text, expected):
    assert parse_token_amount(text).to_base_units(6) == expected


def test_other_exponents():
    amount = parse_token_amount("1.23456789")
    assert amount.to_base_units(0) == 1
    assert amount.to_base_units(8) == 123456789
    assert amount.to_base_units(18) == 1234567890000000000


def test_truncation_remainder():
    assert parse_token_amount("0.0000001").truncation_remainder(6) == Fraction(1, 10)
    assert parse_token_amount("2.5000005").truncation_remainder(6) == Fraction(1, 2)
    assert parse_token_amount("2.5").truncation_remainder(6) == 0


def test_truncation_remainder_stays_below_one_base_unit():
    many_nines = parse_token_amount("0.000000" + "9" * 30)
    remainder = many_nines.truncation_remainder(6)
    assert many_nines.to_base_units(6) == 0
    assert 0 <= remainder < 1
    assert remainder == 1 - Fraction(1, 10 ** 30)


@pytest.mark.parametrize("text", ["-5", "abc", "", "  ", "1e5", "NaN", "Infinity", "1.", ".5", "1,000", "+3"])
def test_malformed_amounts_raise(text):
    with pytest.raises(AmountParseError):
        parse_token_amount(text)


def test_surrounding_whitespace_is_ignored():
    assert parse_token_amount(" 42.5 ") == TokenAmount(Decimal("42.5"))


def test_add_coins_merges_and_sorts():
    merged = add_coins([Coin("uumee", 5), Coin("ibc/abc", 1)], [Coin("uumee", 7), Coin("zero", 0)])
    assert merged == (Coin("ibc/abc", 1), Coin("uumee", 12))


def test_negative_coin_rejected():
    with pytest.raises(ValueError):
        Coin("uumee", -1)
