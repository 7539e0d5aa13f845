from __future__ import annotations


def is_platform_admin(user) -> bool:
    """True for authenticated staff/superusers or users with the admin role."""
    if not user or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return getattr(user, "role", None) == "admin"
