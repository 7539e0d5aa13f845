from rest_framework.permissions import BasePermission

from .utils import is_platform_admin


class IsPlatformAdmin(BasePermission):
    """Platform administrators only (staff, superuser or role=admin)."""

    message = "Only platform administrators may perform this action."

    def has_permission(self, request, view):
        return is_platform_admin(getattr(request, "user", None))
