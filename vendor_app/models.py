"""
Vendors and their delegates.

- Vendor: an independent seller owned by exactly one user. Carries an
  optional commission override and a lifecycle status that only platform
  administrators change.
- VendorMember: a user's membership within a vendor, with vendor-scoped RBAC
  via role choices (OWNER | MANAGER | STAFF) and an activation flag. The
  owner is enrolled as OWNER when the vendor is created; MANAGER or higher
  may file payout requests on the vendor's behalf.

Vendor rows are never cascade-deleted together with their money records:
vendor orders, order items and payouts reference the vendor with PROTECT and
deletion is guarded in `vendor_app.services.delete_vendor`.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.text import slugify

UserRef = settings.AUTH_USER_MODEL


class VendorStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"
    SUSPENDED = "SUSPENDED", "Suspended"


class Vendor(models.Model):
    """An independent seller.

    - `slug` is unique and derived from `name` when left blank.
    - `commission_pct` overrides the platform commission when set.
    """

    Status = VendorStatus

    name: str = models.CharField(max_length=120)
    slug: str = models.SlugField(max_length=140, unique=True, db_index=True)
    owner = models.ForeignKey(
        UserRef,
        on_delete=models.PROTECT,
        related_name="owned_vendors",
        db_index=True,
    )
    commission_pct = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True
    )
    status = models.CharField(
        max_length=16, choices=VendorStatus.choices, default=VendorStatus.PENDING, db_index=True
    )
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["owner"], name="vendor_owner_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["owner"], name="uniq_vendor_owner"),
            models.CheckConstraint(condition=~Q(slug=""), name="vendor_slug_not_empty"),
            models.CheckConstraint(
                condition=Q(commission_pct__isnull=True)
                | (Q(commission_pct__gte=0) & Q(commission_pct__lte=100)),
                name="vendor_commission_pct_range",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.name} ({self.slug})"

    # --------------------- helpers / RBAC ---------------------
    def add_member(self, user, role: str) -> VendorMember:
        """Add or update a member with a role in this vendor.

        Reactivates soft-deactivated memberships.
        """
        role = (role or "").upper()
        if role not in VendorMember.Role.values:
            raise ValueError(f"Invalid role: {role}")

        member, created = VendorMember.objects.get_or_create(
            vendor=self, user=user, defaults={"role": role, "is_active": True}
        )
        if not created and (member.role != role or not member.is_active):
            member.role = role
            member.is_active = True
            member.save(update_fields=["role", "is_active", "updated_at"])
        return member

    def save(self, *args, **kwargs):
        if self.slug:
            self.slug = slugify(self.slug)
        elif self.name:
            self.slug = slugify(self.name)
        return super().save(*args, **kwargs)


class VendorMember(models.Model):
    """Membership of a `user` in a `Vendor` with role-based access.

    Constraints:
    - unique (vendor, user)
    - a single OWNER per vendor via a partial unique constraint
    """

    class Role(models.TextChoices):
        OWNER = "OWNER", "Owner"
        MANAGER = "MANAGER", "Manager"
        STAFF = "STAFF", "Staff"

    vendor = models.ForeignKey(
        Vendor, related_name="members", on_delete=models.CASCADE, db_index=True
    )
    user = models.ForeignKey(
        UserRef,
        related_name="vendor_memberships",
        on_delete=models.CASCADE,
        db_index=True,
    )
    role = models.CharField(max_length=16, choices=Role.choices, db_index=True)
    is_active: bool = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["vendor", "user"], name="uniq_vendormember_vendor_user"
            ),
            models.UniqueConstraint(
                fields=["vendor"],
                condition=Q(role="OWNER"),
                name="uniq_owner_per_vendor",
            ),
        ]
        indexes = [
            models.Index(fields=["role"], name="vendormember_role_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.user_id}@{self.vendor_id}:{self.role}"
