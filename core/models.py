from __future__ import annotations

from django.conf import settings
from django.db import models, transaction


class AuditLog(models.Model):
    """Append-only trail of money-moving and policy-changing actions."""

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )
    vendor_id = models.BigIntegerField(null=True, blank=True, db_index=True)
    action = models.CharField(max_length=64)
    target_type = models.CharField(max_length=64)
    target_id = models.CharField(max_length=64)
    request_id = models.CharField(max_length=64, blank=True, default="")
    meta = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=["vendor_id", "created_at"], name="core_audit_vendor_idx"),
            models.Index(fields=["action", "created_at"], name="core_audit_action_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.action} {self.target_type}:{self.target_id}"


@transaction.atomic
def log_action(
    actor,
    vendor_id: int | None,
    action: str,
    target_type: str,
    target_id,
    meta: dict | None = None,
    request_id: str = "",
) -> AuditLog:
    return AuditLog.objects.create(
        actor=actor if getattr(actor, "pk", None) else None,
        vendor_id=vendor_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id),
        request_id=request_id or "",
        meta=meta or {},
    )
