"""
Split a multi-vendor order into per-vendor VendorOrders.

Order-level tax, shipping and discount are allocated by each vendor's share
of the item subtotal. Shares are rounded to cents and the rounding remainder
goes to the vendor with the largest subtotal (lowest vendor id on ties), so
the vendor totals always add up to the order total.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal

from django.db import transaction

from core.errors import (
    BusinessRuleViolation,
    DuplicateVendorOrder,
    EmptyOrder,
    InvalidTransition,
    OrderNotFound,
    UnknownVendor,
)
from core.models import log_action
from vendor_app.models import Vendor

from ..models import VOID_STATUSES, Order, OrderItem, OrderStatus, VendorOrder
from ..money import D, ZERO, q2

logger = logging.getLogger(__name__)


def allocate_proportionally(amount, weights: dict[int, Decimal]) -> dict[int, Decimal]:
    """Distribute `amount` over `weights` keys, exact to the cent."""
    amount = q2(amount)
    if not weights:
        return {}
    shares = {k: ZERO for k in weights}
    if amount == 0:
        return shares
    total = sum((D(w) for w in weights.values()), ZERO)
    if total > 0:
        shares = {k: q2(amount * D(w) / total) for k, w in weights.items()}
    target = min(weights, key=lambda k: (-D(weights[k]), k))
    shares[target] += amount - sum(shares.values(), ZERO)
    return shares


def _vendor_subtotals(items) -> dict[int, Decimal]:
    sums: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for it in items:
        sums[it.vendor_id] += it.line_total()
    return {vid: q2(total) for vid, total in sums.items()}


@transaction.atomic
def split_order(order_id, actor=None, request_id: str = "") -> list[VendorOrder]:
    """Create one VendorOrder per vendor and tag every item with it.

    All validation happens before the first write; the whole split commits
    or nothing does.
    """
    try:
        order = Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValueError, TypeError):
        raise OrderNotFound(f"Order {order_id} does not exist.", field="order_id")
    if order.status in VOID_STATUSES:
        raise InvalidTransition(
            f"Order {order.pk} is {order.status} and cannot be split.",
            current_state=order.status,
            extra={"order_id": order.pk},
        )

    items = list(OrderItem.objects.select_for_update().filter(order=order).order_by("id"))
    if not items:
        raise EmptyOrder(f"Order {order.pk} has no items.", extra={"order_id": order.pk})

    subtotals = _vendor_subtotals(items)
    vendor_ids = sorted(subtotals)
    known = set(Vendor.objects.filter(pk__in=vendor_ids).values_list("pk", flat=True))
    missing = [vid for vid in vendor_ids if vid not in known]
    if missing:
        raise UnknownVendor(
            f"Order {order.pk} references unknown vendor(s): {missing}.",
            field="vendor_id",
            extra={"order_id": order.pk, "vendor_ids": missing},
        )

    existing = sorted(
        VendorOrder.objects.filter(order=order).values_list("vendor_id", flat=True)
    )
    if existing or any(it.vendor_order_id is not None for it in items):
        raise DuplicateVendorOrder(
            f"Order {order.pk} has already been split.",
            extra={"order_id": order.pk, "vendor_ids": existing},
        )

    expected = q2(sum(subtotals.values(), ZERO) + order.tax_amount + order.shipping - order.discount)
    if expected != q2(order.total_amount):
        raise BusinessRuleViolation(
            f"Order {order.pk} total {order.total_amount} does not match its items ({expected}).",
            code="order_total_mismatch",
            field="total_amount",
            extra={"order_id": order.pk, "expected_total": str(expected)},
        )

    tax = allocate_proportionally(order.tax_amount, subtotals)
    shipping = allocate_proportionally(order.shipping, subtotals)
    discount = allocate_proportionally(order.discount, subtotals)

    created: list[VendorOrder] = []
    for vid in vendor_ids:
        vo = VendorOrder.objects.create(
            vendor_id=vid,
            order=order,
            status=OrderStatus.PENDING,
            subtotal=subtotals[vid],
            tax_amount=tax[vid],
            shipping=shipping[vid],
            discount=discount[vid],
            total_amount=q2(subtotals[vid] + tax[vid] + shipping[vid] - discount[vid]),
        )
        OrderItem.objects.filter(order=order, vendor_id=vid).update(vendor_order=vo)
        created.append(vo)

    log_action(
        actor,
        None,
        "order_split",
        "Order",
        order.pk,
        {"vendor_orders": [vo.pk for vo in created], "vendor_ids": vendor_ids},
        request_id=request_id,
    )
    logger.info("order %s split into %d vendor orders", order.pk, len(created))
    return created
