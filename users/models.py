from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    class Role(models.TextChoices):
        CUSTOMER = "customer", "Customer"
        VENDOR = "vendor", "Vendor"
        ADMIN = "admin", "Admin"

    email = models.EmailField(unique=True, max_length=191)
    phone_number = models.CharField(max_length=15, blank=True, null=True)
    # Explicit role for RBAC; default to customer for new users
    role = models.CharField(
        max_length=32,
        choices=Role.choices,
        default=Role.CUSTOMER,
        blank=True,
    )

    def __str__(self):
        return self.username

    @property
    def effective_role(self) -> str:
        """
        Resolve the user's effective role:
        1) is_superuser or is_staff -> 'admin'
        2) explicit `role` if valid
        3) else -> 'customer'
        """
        if self.is_superuser or self.is_staff:
            return self.Role.ADMIN
        if self.role in {c for c, _ in self.Role.choices}:
            return self.role
        return self.Role.CUSTOMER

    @property
    def is_platform_admin(self) -> bool:
        return self.effective_role == self.Role.ADMIN
