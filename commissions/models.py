from __future__ import annotations

from django.db import models
from django.db.models import Q
from django.utils import timezone


class CommissionSetting(models.Model):
    """One entry of the platform commission log.

    The effective commission is the most recently created row; resets append
    new rows so earlier values stay as an audit trail.
    """

    commission = models.DecimalField(max_digits=5, decimal_places=2)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        get_latest_by = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(commission__gte=0) & Q(commission__lte=100),
                name="commission_setting_range",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.commission}% @ {self.updated_at:%Y-%m-%d %H:%M}"
