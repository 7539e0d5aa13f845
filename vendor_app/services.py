"""Vendor access checks and administrative mutations."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils.text import slugify

from core.errors import (
    BusinessRuleViolation,
    InvalidCommission,
    Unauthorized,
    VendorInUse,
    VendorNotFound,
)
from core.models import log_action
from users.utils import is_platform_admin

from .models import Vendor, VendorMember, VendorStatus

logger = logging.getLogger(__name__)

# Role ranking for minimum checks
ROLE_RANK = {"STAFF": 1, "MANAGER": 2, "OWNER": 3}


def rank(role: str) -> int:
    return ROLE_RANK.get((role or "").upper(), 0)


def get_vendor(vendor_id, *, for_update: bool = False) -> Vendor:
    qs = Vendor.objects.all()
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=vendor_id)
    except (Vendor.DoesNotExist, ValueError, TypeError):
        raise VendorNotFound(f"Vendor {vendor_id} does not exist.", field="vendor")


def get_active_membership(user, vendor: Vendor) -> VendorMember | None:
    if not user or not getattr(user, "is_authenticated", False):
        return None
    return (
        VendorMember.objects.select_related("vendor", "user")
        .filter(vendor=vendor, user=user, is_active=True)
        .first()
    )


def has_min_role(user, vendor: Vendor, min_role: str) -> bool:
    if getattr(user, "pk", None) is not None and vendor.owner_id == user.pk:
        return True
    m = get_active_membership(user, vendor)
    return bool(m and rank(m.role) >= rank(min_role))


def can_act_for_vendor(user, vendor: Vendor, min_role: str = "MANAGER") -> bool:
    """Platform admins, the owner, or an active member holding `min_role`."""
    return is_platform_admin(user) or has_min_role(user, vendor, min_role)


def require_min_role(user, vendor: Vendor, min_role: str) -> None:
    if not can_act_for_vendor(user, vendor, min_role):
        raise Unauthorized(
            "You do not have sufficient privileges for this vendor.",
            extra={"vendor_id": vendor.pk},
        )


def vendors_for_user(user):
    if is_platform_admin(user):
        return Vendor.objects.all()
    return Vendor.objects.filter(members__user=user, members__is_active=True).distinct()


def _unique_slug(name: str, slug: str = "") -> str:
    base = slugify(slug or name)[:130] or "vendor"
    candidate, n = base, 1
    while Vendor.objects.filter(slug=candidate).exists():
        n += 1
        candidate = f"{base}-{n}"
    return candidate


@transaction.atomic
def create_vendor(owner, *, request_id: str = "", **fields) -> Vendor:
    fields["slug"] = _unique_slug(fields.get("name", ""), fields.get("slug", ""))
    vendor = Vendor.objects.create(owner=owner, **fields)
    vendor.add_member(owner, VendorMember.Role.OWNER)
    role = getattr(owner, "role", None)
    if role is not None and role != owner.Role.ADMIN and role != owner.Role.VENDOR:
        owner.role = owner.Role.VENDOR
        owner.save(update_fields=["role"])
    log_action(
        owner, vendor.pk, "vendor_created", "Vendor", vendor.pk, {"slug": vendor.slug}, request_id=request_id
    )
    logger.info("vendor created id=%s owner=%s", vendor.pk, owner.pk)
    return vendor


def _require_admin(actor) -> None:
    if not is_platform_admin(actor):
        raise Unauthorized("Only platform administrators may change this field.")


@transaction.atomic
def set_vendor_status(vendor_id, status: str, *, actor, request_id: str = "") -> Vendor:
    _require_admin(actor)
    vendor = get_vendor(vendor_id, for_update=True)
    if status not in VendorStatus.values:
        raise BusinessRuleViolation(f"Unknown vendor status {status!r}.", field="status")
    old = vendor.status
    vendor.status = status
    vendor.save(update_fields=["status", "updated_at"])
    log_action(
        actor, vendor.pk, "vendor_status", "Vendor", vendor.pk, {"from": old, "to": status}, request_id=request_id
    )
    return vendor


def _parse_pct(value) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        pct = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidCommission("Commission must be a number.", field="commission_pct")
    if pct < 0 or pct > 100:
        raise InvalidCommission(
            "Commission must be between 0 and 100.", field="commission_pct"
        )
    return pct


@transaction.atomic
def set_vendor_commission(vendor_id, commission_pct, *, actor, request_id: str = "") -> Vendor:
    """Set or clear (None) the vendor-specific commission override."""
    _require_admin(actor)
    pct = _parse_pct(commission_pct)
    vendor = get_vendor(vendor_id, for_update=True)
    old = vendor.commission_pct
    vendor.commission_pct = pct
    vendor.save(update_fields=["commission_pct", "updated_at"])
    log_action(
        actor,
        vendor.pk,
        "vendor_commission",
        "Vendor",
        vendor.pk,
        {"from": str(old) if old is not None else None, "to": str(pct) if pct is not None else None},
        request_id=request_id,
    )
    return vendor


@transaction.atomic
def delete_vendor(vendor_id, *, actor, request_id: str = "") -> None:
    vendor = get_vendor(vendor_id, for_update=True)
    if not (is_platform_admin(actor) or vendor.owner_id == getattr(actor, "pk", None)):
        raise Unauthorized("Only the owner or an administrator may delete a vendor.")
    counts = {
        "vendor_orders": vendor.vendor_orders.count(),
        "order_items": vendor.order_items.count(),
        "payouts": vendor.payouts.count(),
    }
    if any(counts.values()):
        raise VendorInUse(
            "Vendor still owns orders or payouts and cannot be deleted.",
            current_state=vendor.status,
            extra=counts,
        )
    vid = vendor.pk
    vendor.delete()
    log_action(actor, vid, "vendor_deleted", "Vendor", vid, request_id=request_id)
    logger.info("vendor deleted id=%s by=%s", vid, getattr(actor, "pk", None))
