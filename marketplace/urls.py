from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from core.views import healthz

urlpatterns = [
    path("admin/", admin.site.urls),

    # Versioned API (DRF-only), per-app mounts
    path("apis/v1/schema/", SpectacularAPIView.as_view(), name="v1-schema"),
    path("apis/v1/docs/", SpectacularSwaggerView.as_view(url_name="v1-schema"), name="v1-docs"),

    # JWT endpoints
    path("apis/v1/auth/jwt/create/", TokenObtainPairView.as_view(), name="v1-jwt-create"),
    path("apis/v1/auth/jwt/refresh/", TokenRefreshView.as_view(), name="v1-jwt-refresh"),

    path("apis/v1/vendors/", include("vendor_app.urls_v1")),
    path("apis/v1/commission/", include("commissions.urls_v1")),
    path("apis/v1/orders/", include("orders.urls_v1")),
    path("apis/v1/payouts/", include("payouts.urls_v1")),

    # Health
    path("healthz", healthz, name="healthz"),
]
