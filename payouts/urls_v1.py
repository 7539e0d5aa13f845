from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views_v1 import PayoutViewSet

router = SimpleRouter()
router.register(r"", PayoutViewSet, basename="payouts")

urlpatterns = [
    path("", include(router.urls)),
]
