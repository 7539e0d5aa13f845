"""
Commission arithmetic.

``calculate`` is pure: the commission is rounded once and the vendor share
is derived by subtraction, so ``commission_amount + vendor_amount`` always
equals the amount rounded to cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from core.errors import InvalidAmount, InvalidCommission
from orders.money import D, percent_of, q2


@dataclass(frozen=True)
class CommissionBreakdown:
    commission_amount: Decimal
    vendor_amount: Decimal


def _decimal(value, error_cls, field: str) -> Decimal:
    try:
        out = D(value)
    except (InvalidOperation, ValueError, TypeError):
        raise error_cls(f"{field} must be a number.", field=field)
    if not out.is_finite():
        raise error_cls(f"{field} must be a finite number.", field=field)
    return out


def calculate(amount, percentage) -> CommissionBreakdown:
    pct = _decimal(percentage, InvalidCommission, "percentage")
    if pct < 0 or pct > 100:
        raise InvalidCommission("Commission percentage must be between 0 and 100.", field="percentage")
    amt = _decimal(amount, InvalidAmount, "amount")
    if amt < 0:
        raise InvalidAmount(field="amount")

    commission = percent_of(amt, pct)
    return CommissionBreakdown(commission_amount=commission, vendor_amount=q2(amt) - commission)


def calculate_for_total(order_total, percentage=None) -> dict:
    """Breakdown of an order total; uses the current policy when no percentage is given."""
    if percentage is None:
        from .services import get_current

        percentage = get_current().percentage
    breakdown = calculate(order_total, percentage)
    return {
        "commission_percentage": q2(percentage),
        "commission_amount": breakdown.commission_amount,
        "vendor_amount": breakdown.vendor_amount,
        "order_total": q2(order_total),
    }
