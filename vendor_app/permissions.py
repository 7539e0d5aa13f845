from __future__ import annotations

from rest_framework.permissions import BasePermission
from rest_framework.request import Request

from users.utils import is_platform_admin

from .models import Vendor
from .services import has_min_role


class _BaseVendorPermission(BasePermission):
    """
    Object-level checks against a `Vendor` instance.

    Platform admins bypass every vendor check.
    """

    # 'STAFF' | 'MANAGER' | 'OWNER'
    required_min_role: str = "STAFF"

    def has_permission(self, request: Request, view) -> bool:  # type: ignore[override]
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request: Request, view, obj: Vendor) -> bool:  # type: ignore[override]
        if is_platform_admin(request.user):
            return True
        return has_min_role(request.user, obj, self.required_min_role)


class IsVendorStaff(_BaseVendorPermission):
    """STAFF or higher (includes MANAGER/OWNER)."""
    required_min_role = "STAFF"


class IsVendorOwner(_BaseVendorPermission):
    """OWNER only."""
    required_min_role = "OWNER"
