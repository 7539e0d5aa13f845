from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views_v1 import VendorViewSet

router = SimpleRouter()
router.register(r"", VendorViewSet, basename="vendors")

urlpatterns = [
    path("", include(router.urls)),
]
