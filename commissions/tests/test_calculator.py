from decimal import Decimal

import pytest

from commissions.calculator import calculate, calculate_for_total
from commissions.services import set_current
from core.errors import BusinessRuleViolation, InvalidAmount, InvalidCommission
from orders.money import q2


def test_basic_breakdown():
    b = calculate(Decimal("100.00"), Decimal("15"))
    assert b.commission_amount == Decimal("15.00")
    assert b.vendor_amount == Decimal("85.00")


def test_vendor_amount_is_derived_by_subtraction():
    # rounding each side independently would give 0.03 + 0.03
    b = calculate("0.05", "50")
    assert b.commission_amount == Decimal("0.03")
    assert b.vendor_amount == Decimal("0.02")


@pytest.mark.parametrize(
    "amount,pct",
    [
        ("33.33", "33.33"),
        ("0.01", "99.99"),
        ("19.995", "12.5"),
        ("1234567.89", "7.25"),
        ("0", "50"),
        ("10.10", "0"),
        ("10.10", "100"),
    ],
)
def test_commission_plus_vendor_equals_rounded_amount(amount, pct):
    b = calculate(amount, pct)
    assert b.commission_amount + b.vendor_amount == q2(Decimal(amount))
    assert b.commission_amount >= 0
    assert b.vendor_amount >= 0


@pytest.mark.parametrize("pct", ["-0.01", "100.01", "250"])
def test_percentage_out_of_bounds(pct):
    with pytest.raises(InvalidCommission):
        calculate("10.00", pct)


def test_negative_amount_is_rejected():
    with pytest.raises(InvalidAmount) as exc:
        calculate("-1.00", "10")
    assert isinstance(exc.value, BusinessRuleViolation)


def test_non_numeric_percentage():
    with pytest.raises(InvalidCommission):
        calculate("10.00", "ten")


@pytest.mark.django_db
def test_calculate_for_total_uses_current_policy():
    set_current(Decimal("12.5"))
    out = calculate_for_total(Decimal("80.00"))
    assert out == {
        "commission_percentage": Decimal("12.50"),
        "commission_amount": Decimal("10.00"),
        "vendor_amount": Decimal("70.00"),
        "order_total": Decimal("80.00"),
    }


@pytest.mark.django_db
def test_calculate_for_total_with_explicit_percentage_ignores_policy():
    set_current(Decimal("40"))
    out = calculate_for_total("200", "5")
    assert out["commission_amount"] == Decimal("10.00")
    assert out["vendor_amount"] == Decimal("190.00")
