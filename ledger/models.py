from __future__ import annotations

from django.db import models
from django.db.models import Q

from vendor_app.models import Vendor


class VendorBalance(models.Model):
    """A vendor's settled, not yet paid out earnings.

    Written only through `ledger.services`; every change has a matching
    `LedgerEntry`.
    """

    vendor = models.OneToOneField(Vendor, on_delete=models.CASCADE, related_name="balance")
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(amount__gte=0), name="vendorbalance_non_negative"),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.vendor_id}: {self.amount}"


class LedgerEntry(models.Model):
    class EntryType(models.TextChoices):
        CREDIT = "CREDIT", "Credit"
        DEBIT = "DEBIT", "Debit"

    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name="ledger_entries")
    entry_type = models.CharField(max_length=8, choices=EntryType.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2)
    vendor_order = models.ForeignKey(
        "orders.VendorOrder",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )
    payout = models.ForeignKey(
        "payouts.VendorPayout",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )
    memo = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "Ledger entries"
        indexes = [
            models.Index(fields=["vendor", "created_at"], name="ledger_vendor_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gte=0), name="ledgerentry_amount_non_negative"),
            models.CheckConstraint(condition=Q(balance_after__gte=0), name="ledgerentry_balance_non_negative"),
            # a vendor order is credited at most once
            models.UniqueConstraint(
                fields=["vendor_order"],
                condition=Q(entry_type="CREDIT"),
                name="uniq_credit_per_vendor_order",
            ),
            models.UniqueConstraint(
                fields=["payout"],
                condition=Q(entry_type="DEBIT"),
                name="uniq_debit_per_payout",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.entry_type} {self.amount} vendor={self.vendor_id}"
