"""
Orders and their per-vendor slices.

`Order` and `OrderItem` belong to the storefront; this service only reads
their line items and totals and tags each item with the vendor order it was
split into. `VendorOrder` is one vendor's slice of an order and carries the
settlement columns stamped when its earnings are credited to the ledger.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from vendor_app.models import Vendor

from .money import ZERO, q2


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PROCESSING = "PROCESSING", "Processing"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"
    REFUNDED = "REFUNDED", "Refunded"


# Forward-only vendor order lifecycle.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.REFUNDED: frozenset(),
}

# A parent order in one of these states yields no vendor earnings.
VOID_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.REFUNDED})


def _money(**kwargs):
    return models.DecimalField(max_digits=12, decimal_places=2, **kwargs)


class Order(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="orders",
    )
    status = models.CharField(
        max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING, db_index=True
    )
    tax_amount = _money(default=0)
    shipping = _money(default=0)
    discount = _money(default=0)
    total_amount = _money(default=0)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"Order {self.pk}"

    def items_subtotal(self) -> Decimal:
        total = sum((it.line_total() for it in self.items.all()), ZERO)
        return q2(total)

    def compute_total(self) -> Decimal:
        return q2(self.items_subtotal() + self.tax_amount + self.shipping - self.discount)


class VendorOrder(models.Model):
    """One vendor's slice of an order.

    Invariant: subtotal + tax_amount + shipping - discount == total_amount.
    `settled_at` is stamped once, in the same transaction as the ledger credit.
    """

    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name="vendor_orders")
    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name="vendor_orders")
    status = models.CharField(
        max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING, db_index=True
    )
    subtotal = _money(default=0)
    tax_amount = _money(default=0)
    shipping = _money(default=0)
    discount = _money(default=0)
    total_amount = _money(default=0)

    # Settlement snapshot
    settled_at = models.DateTimeField(null=True, blank=True, db_index=True)
    commission_pct = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    commission_amount = _money(null=True, blank=True)
    vendor_amount = _money(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order_id", "vendor_id"]
        indexes = [
            models.Index(fields=["vendor", "status"], name="vendororder_vendor_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["order", "vendor"], name="uniq_vendororder_order_vendor"),
            models.CheckConstraint(
                condition=Q(subtotal__gte=0) & Q(tax_amount__gte=0) & Q(shipping__gte=0) & Q(discount__gte=0),
                name="vendororder_amounts_non_negative",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"VendorOrder {self.pk} (order={self.order_id}, vendor={self.vendor_id})"

    @property
    def is_settled(self) -> bool:
        return self.settled_at is not None

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in ALLOWED_TRANSITIONS.get(self.status, frozenset())


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    # The catalog owns vendor references; items may point at vendors that no
    # longer exist, which the splitter reports as UnknownVendor.
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        db_constraint=False,
        related_name="order_items",
    )
    vendor_order = models.ForeignKey(
        VendorOrder,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="items",
    )
    product_name = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, blank=True, default="")
    price = _money()
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order", "vendor"], name="orderitem_order_vendor_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.quantity} x {self.product_name}"

    def line_total(self) -> Decimal:
        return self.price * self.quantity
