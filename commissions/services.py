"""
Commission policy store.

The table is an append log: the current commission is the latest row, or a
zero default while the log is empty. ``set_current`` updates the latest row
in place (creating the first one when needed); ``reset_to_default`` always
appends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction

from core.errors import InvalidCommission
from core.models import log_action
from orders.money import D, ZERO, q2

from .models import CommissionSetting

logger = logging.getLogger(__name__)

DEFAULT_MAX_PERCENT = Decimal("50")
RECENT_LIMIT = 10


@dataclass(frozen=True)
class CurrentCommission:
    percentage: Decimal
    updated_at: datetime | None
    setting_id: int | None = None
    is_default: bool = False


def max_percent() -> Decimal:
    return D(getattr(settings, "COMMISSION_MAX_PERCENT", DEFAULT_MAX_PERCENT))


def _latest(qs=None) -> CommissionSetting | None:
    qs = qs if qs is not None else CommissionSetting.objects.all()
    return qs.order_by("-created_at", "-id").first()


def _as_current(row: CommissionSetting | None) -> CurrentCommission:
    if row is None:
        return CurrentCommission(percentage=ZERO, updated_at=None, is_default=True)
    return CurrentCommission(
        percentage=q2(row.commission), updated_at=row.updated_at, setting_id=row.pk
    )


def get_current() -> CurrentCommission:
    return _as_current(_latest())


def validate_percentage(percentage) -> Decimal:
    try:
        pct = D(percentage)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidCommission("Commission must be a number.", field="percentage")
    ceiling = max_percent()
    if not pct.is_finite() or pct < 0 or pct > ceiling:
        raise InvalidCommission(
            f"Commission must be between 0 and {ceiling}.",
            field="percentage",
            extra={"max_percent": str(ceiling)},
        )
    return q2(pct)


@transaction.atomic
def set_current(percentage, actor=None, request_id: str = "") -> CurrentCommission:
    pct = validate_percentage(percentage)
    row = _latest(CommissionSetting.objects.select_for_update())
    if row is None:
        row = CommissionSetting.objects.create(commission=pct)
        old = None
    else:
        old = row.commission
        row.commission = pct
        row.save(update_fields=["commission", "updated_at"])
    log_action(
        actor,
        None,
        "commission_set",
        "CommissionSetting",
        row.pk,
        {"from": str(old) if old is not None else None, "to": str(pct)},
        request_id=request_id,
    )
    logger.info("commission set to %s (setting=%s)", pct, row.pk)
    return _as_current(row)


def history(from_date=None, to_date=None) -> list[CommissionSetting]:
    """Entries in non-decreasing ``updated_at`` order; bounds are inclusive.

    Plain dates cover the whole day.
    """
    qs = CommissionSetting.objects.all()
    if from_date is not None:
        if isinstance(from_date, datetime):
            qs = qs.filter(updated_at__gte=from_date)
        elif isinstance(from_date, date):
            qs = qs.filter(updated_at__date__gte=from_date)
    if to_date is not None:
        if isinstance(to_date, datetime):
            qs = qs.filter(updated_at__lte=to_date)
        elif isinstance(to_date, date):
            qs = qs.filter(updated_at__date__lte=to_date)
    return list(qs.order_by("updated_at", "id"))


@transaction.atomic
def reset_to_default(actor=None, request_id: str = "") -> CurrentCommission:
    row = CommissionSetting.objects.create(commission=ZERO)
    log_action(actor, None, "commission_reset", "CommissionSetting", row.pk, request_id=request_id)
    logger.info("commission reset to default (setting=%s)", row.pk)
    return _as_current(row)


def stats() -> dict:
    current = get_current()
    recent = list(CommissionSetting.objects.order_by("-created_at", "-id")[:RECENT_LIMIT])
    recent.reverse()
    return {
        "current_percentage": current.percentage,
        "updated_at": current.updated_at,
        "is_default": current.is_default,
        "total_changes": CommissionSetting.objects.count(),
        "recent": recent,
    }


def resolve_vendor_percentage(vendor) -> Decimal:
    """Vendor override when set, otherwise the platform commission."""
    override = getattr(vendor, "commission_pct", None)
    if override is not None:
        return q2(override)
    return get_current().percentage
