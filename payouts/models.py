from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from vendor_app.models import Vendor

from .enums import PayoutStatus


class VendorPayout(models.Model):
    """A vendor's request to withdraw accrued balance.

    PENDING -> COMPLETED | REJECTED; a PENDING request may also be cancelled
    by its requester, which deletes it. `processed_at` is set exactly once,
    on completion.
    """

    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name="payouts")
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="requested_payouts",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=50)
    reference = models.TextField(blank=True, default="")
    rejection_reason = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=16, choices=PayoutStatus.choices, default=PayoutStatus.PENDING, db_index=True
    )
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="decided_payouts",
    )
    idempotency_key = models.CharField(max_length=64, unique=True, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["vendor", "status"], name="payout_vendor_status_idx"),
            models.Index(fields=["status", "created_at"], name="payout_status_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name="payout_amount_positive"),
            models.CheckConstraint(
                condition=(Q(status=PayoutStatus.COMPLETED) & Q(processed_at__isnull=False))
                | (~Q(status=PayoutStatus.COMPLETED) & Q(processed_at__isnull=True)),
                name="payout_processed_at_iff_completed",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"Payout {self.pk} {self.amount} ({self.status})"
