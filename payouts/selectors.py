"""Read-side queries over payouts."""

from __future__ import annotations

from django.db.models import F, QuerySet

from users.utils import is_platform_admin
from vendor_app.models import VendorMember

from .enums import PayoutStatus, SortField, SortOrder
from .models import VendorPayout


def payout_ordering(sort_by=None, sort_order=None) -> list:
    """Order-by terms for the payout list; nulls sort last and id breaks ties.

    Unknown sort fields fall back to created_at, newest first unless asked otherwise.
    """
    field = sort_by if sort_by in SortField.values else SortField.CREATED_AT
    if sort_order == SortOrder.ASC:
        return [F(field).asc(nulls_last=True), "id"]
    return [F(field).desc(nulls_last=True), "-id"]


def payouts_visible_to(user) -> QuerySet:
    """Admins see everything; others see their vendors' payouts and their own requests."""
    qs = VendorPayout.objects.select_related("vendor", "requested_by", "decided_by")
    if is_platform_admin(user):
        return qs
    vendor_ids = VendorMember.objects.filter(user=user, is_active=True).values("vendor_id")
    return qs.filter(vendor_id__in=vendor_ids) | qs.filter(requested_by=user)


def pending_payouts(limit: int | None = None) -> QuerySet:
    """Oldest pending requests first, i.e. the admin review queue."""
    qs = VendorPayout.objects.select_related("vendor", "requested_by").filter(
        status=PayoutStatus.PENDING
    ).order_by("created_at", "id")
    return qs[:limit] if limit else qs
