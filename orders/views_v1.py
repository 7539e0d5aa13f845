from __future__ import annotations

from django.db.models import QuerySet
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.middleware import get_request_id
from users.permissions import IsPlatformAdmin
from users.utils import is_platform_admin
from vendor_app.models import VendorMember

from .filters import VendorOrderFilter
from .models import VendorOrder
from .serializers_v1 import VendorOrderStatusV1Serializer, VendorOrderV1Serializer
from .services.settlement import settle_vendor_order, update_vendor_order_status
from .services.splitting import split_order


class DefaultPage(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


class OrderSplitV1(APIView):
    permission_classes = [IsPlatformAdmin]

    @extend_schema(
        request=None,
        responses=VendorOrderV1Serializer(many=True),
        summary="Split an order into per-vendor orders",
        tags=["Vendor Orders"],
    )
    def post(self, request, order_id: int):
        created = split_order(order_id, actor=request.user, request_id=get_request_id(request))
        return Response(
            VendorOrderV1Serializer(created, many=True).data, status=status.HTTP_201_CREATED
        )


@extend_schema_view(
    list=extend_schema(tags=["Vendor Orders"], summary="List vendor orders"),
    retrieve=extend_schema(tags=["Vendor Orders"], summary="Retrieve a vendor order"),
)
class VendorOrderViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = VendorOrderV1Serializer
    pagination_class = DefaultPage
    filterset_class = VendorOrderFilter
    permission_classes = [IsAuthenticated]

    def get_queryset(self) -> QuerySet:
        user = self.request.user
        qs = VendorOrder.objects.select_related("vendor", "order").prefetch_related("items")
        if is_platform_admin(user):
            return qs.order_by("-id")
        vendor_ids = VendorMember.objects.filter(user=user, is_active=True).values("vendor_id")
        return qs.filter(vendor_id__in=vendor_ids).order_by("-id")

    def get_permissions(self):  # type: ignore[override]
        if self.action == "settle":
            return [IsPlatformAdmin()]
        return super().get_permissions()

    @extend_schema(
        tags=["Vendor Orders"],
        summary="Advance a vendor order; DELIVERED settles it",
        request=VendorOrderStatusV1Serializer,
    )
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        vo = self.get_object()
        ser = VendorOrderStatusV1Serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vo = update_vendor_order_status(
            vo.pk,
            ser.validated_data["status"],
            actor=request.user,
            request_id=get_request_id(request),
        )
        return Response(self.get_serializer(vo).data)

    @extend_schema(tags=["Vendor Orders"], summary="Settle a delivered vendor order (admin)", request=None)
    @action(detail=True, methods=["post"], url_path="settle")
    def settle(self, request, pk=None):
        vo = self.get_object()
        entry = settle_vendor_order(vo.pk, actor=request.user, request_id=get_request_id(request))
        vo.refresh_from_db()
        data = self.get_serializer(vo).data
        data["credited"] = entry is not None
        return Response(data)
