from __future__ import annotations

from decimal import Decimal

import pytest

from gymdesk.core.errors import InvalidAmount
from gymdesk.services.money import MAX_AMOUNT, MAX_CENTS, amount_matches_cents, amount_to_cents, cents_to_amount


def test_cents_to_amount_keeps_two_decimals():
    assert cents_to_amount(150) == Decimal("1.50")
    assert str(cents_to_amount(0)) == "0.00"
    assert str(cents_to_amount(10000)) == "100.00"


def test_amount_to_cents_accepts_decimal_int_and_string():
    assert amount_to_cents(Decimal("1.50")) == 150
    assert amount_to_cents("19.99") == 1999
    assert amount_to_cents(25) == 2500
    assert amount_to_cents(Decimal("0.1")) == 10


@pytest.mark.parametrize("cents", [0, 1, 99, 100, 6000, 12345, 10**12 + 7, 10**27, 10**28 + 1, 10**40 + 99])
def test_cents_survive_conversion(cents):
    assert amount_to_cents(cents_to_amount(cents)) == cents


@pytest.mark.parametrize("value", [Decimal("-0.01"), "-5", Decimal("1.005"), "abc", 1.5, True, Decimal("NaN")])
def test_amount_to_cents_rejects_bad_amounts(value):
    with pytest.raises(InvalidAmount):
        amount_to_cents(value)


@pytest.mark.parametrize("value", [-1, 1.5, "150", False])
def test_cents_to_amount_rejects_non_cent_values(value):
    with pytest.raises(InvalidAmount):
        cents_to_amount(value)


def test_large_amount_keeps_every_digit():
    assert str(cents_to_amount(10**28 + 1)) == "100000000000000000000000000.01"
    assert amount_to_cents("123456789012345678901234567890.12") == 12345678901234567890123456789012


def test_column_limit_matches_display_limit():
    assert cents_to_amount(MAX_CENTS) == MAX_AMOUNT
    assert amount_to_cents(MAX_AMOUNT) == MAX_CENTS


def test_amount_matches_cents():
    assert amount_matches_cents(Decimal("60.00"), 6000)
    assert amount_matches_cents(Decimal("0.5"), 50)
    assert not amount_matches_cents(Decimal("60.00"), 6001)
