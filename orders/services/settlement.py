"""
Vendor order settlement.

A vendor order is settled once, when it is delivered: the commission
breakdown is stamped on the row and the vendor's share is credited to the
ledger in the same transaction. The `settled_at` stamp is written with a
conditional update, so a duplicate settlement event credits nothing.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from commissions.calculator import calculate
from commissions.services import resolve_vendor_percentage
from core.errors import BusinessRuleViolation, InvalidTransition, Unauthorized, VendorOrderNotFound
from core.models import log_action
from ledger import services as ledger
from vendor_app.services import can_act_for_vendor

from ..models import VOID_STATUSES, OrderStatus, VendorOrder

logger = logging.getLogger(__name__)


def _lock_vendor_order(vendor_order_id) -> VendorOrder:
    try:
        return (
            VendorOrder.objects.select_for_update()
            .select_related("vendor", "order")
            .get(pk=vendor_order_id)
        )
    except (VendorOrder.DoesNotExist, ValueError, TypeError):
        raise VendorOrderNotFound(f"Vendor order {vendor_order_id} does not exist.")


def _require_live_parent(vo: VendorOrder) -> None:
    if vo.order.status in VOID_STATUSES:
        raise InvalidTransition(
            f"Order {vo.order_id} is {vo.order.status}; its vendor orders can only be cancelled or refunded.",
            current_state=vo.order.status,
            extra={"order_id": vo.order_id},
        )


@transaction.atomic
def settle_vendor_order(vendor_order_id, actor=None, request_id: str = ""):
    """Credit the vendor's earnings for a delivered vendor order.

    Returns the ledger entry, or None when the order was already settled.
    """
    vo = _lock_vendor_order(vendor_order_id)
    if vo.settled_at is not None:
        logger.info("vendor order %s already settled at %s", vo.pk, vo.settled_at)
        return None
    if vo.status != OrderStatus.DELIVERED:
        raise InvalidTransition(
            "Only delivered vendor orders can be settled.",
            current_state=vo.status,
        )
    _require_live_parent(vo)

    pct = resolve_vendor_percentage(vo.vendor)
    breakdown = calculate(vo.total_amount, pct)
    updated = VendorOrder.objects.filter(pk=vo.pk, settled_at__isnull=True).update(
        settled_at=timezone.now(),
        commission_pct=pct,
        commission_amount=breakdown.commission_amount,
        vendor_amount=breakdown.vendor_amount,
        updated_at=timezone.now(),
    )
    if not updated:
        return None

    entry = ledger.credit(
        vo.vendor_id,
        breakdown.vendor_amount,
        vendor_order=vo,
        memo=f"Vendor order {vo.pk} (order {vo.order_id})",
    )
    log_action(
        actor,
        vo.vendor_id,
        "vendor_order_settled",
        "VendorOrder",
        vo.pk,
        {
            "commission_pct": str(pct),
            "commission_amount": str(breakdown.commission_amount),
            "vendor_amount": str(breakdown.vendor_amount),
        },
        request_id=request_id,
    )
    logger.info(
        "vendor order %s settled: total=%s pct=%s vendor_amount=%s",
        vo.pk,
        vo.total_amount,
        pct,
        breakdown.vendor_amount,
    )
    return entry


@transaction.atomic
def update_vendor_order_status(
    vendor_order_id, new_status: str, actor=None, request_id: str = ""
) -> VendorOrder:
    """Move a vendor order forward; delivering it settles it."""
    vo = _lock_vendor_order(vendor_order_id)
    if actor is not None and not can_act_for_vendor(actor, vo.vendor, "STAFF"):
        raise Unauthorized("You may not update orders for this vendor.")
    if new_status not in OrderStatus.values:
        raise BusinessRuleViolation(f"Unknown order status {new_status!r}.", field="status")
    if not vo.can_transition_to(new_status):
        raise InvalidTransition(
            f"Cannot move vendor order from {vo.status} to {new_status}.",
            current_state=vo.status,
        )
    if new_status not in VOID_STATUSES:
        _require_live_parent(vo)

    old = vo.status
    updated = VendorOrder.objects.filter(pk=vo.pk, status=old).update(
        status=new_status, updated_at=timezone.now()
    )
    if not updated:  # pragma: no cover - row is locked above
        raise InvalidTransition(current_state=old)
    log_action(
        actor,
        vo.vendor_id,
        "vendor_order_status",
        "VendorOrder",
        vo.pk,
        {"from": old, "to": new_status},
        request_id=request_id,
    )

    if new_status == OrderStatus.DELIVERED:
        settle_vendor_order(vo.pk, actor=actor, request_id=request_id)
    vo.refresh_from_db()
    return vo
