from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views_v1 import OrderSplitV1, VendorOrderViewSet

router = SimpleRouter()
router.register(r"vendor-orders", VendorOrderViewSet, basename="vendor-orders")

urlpatterns = [
    path("<int:order_id>/split/", OrderSplitV1.as_view(), name="v1-order-split"),
    path("", include(router.urls)),
]
