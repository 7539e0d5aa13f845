from __future__ import annotations

from django.db.models import QuerySet
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.errors import BusinessRuleViolation
from core.middleware import get_request_id
from users.permissions import IsPlatformAdmin
from users.utils import is_platform_admin
from vendor_app.services import get_vendor, require_min_role

from . import selectors, services
from .filters import PayoutFilterSet
from .serializers_v1 import (
    BulkApproveResultV1Serializer,
    BulkApproveV1Serializer,
    PayoutCreateV1Serializer,
    PayoutRejectV1Serializer,
    PayoutStatsV1Serializer,
    PayoutV1Serializer,
)


class DefaultPage(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


@extend_schema_view(
    list=extend_schema(tags=["Payouts"], summary="List payouts"),
    retrieve=extend_schema(tags=["Payouts"], summary="Retrieve a payout"),
)
class PayoutViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = PayoutV1Serializer
    pagination_class = DefaultPage
    permission_classes = [IsAuthenticated]
    filterset_class = PayoutFilterSet

    def get_queryset(self) -> QuerySet:
        return selectors.payouts_visible_to(self.request.user).order_by("-created_at", "-id")

    def get_permissions(self):  # type: ignore[override]
        if self.action in {"approve", "reject", "bulk_approve", "pending"}:
            return [IsPlatformAdmin()]
        return super().get_permissions()

    @extend_schema(
        tags=["Payouts"],
        summary="Request a payout",
        request=PayoutCreateV1Serializer,
        responses={201: PayoutV1Serializer, 200: PayoutV1Serializer},
    )
    def create(self, request, *args, **kwargs):
        ser = PayoutCreateV1Serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        payout, created = services.create_payout(
            vendor_id=data["vendor_id"],
            requester=request.user,
            amount=data["amount"],
            method=data["method"],
            reference=data.get("reference", ""),
            idempotency_key=data.get("idempotency_key") or request.META.get("HTTP_IDEMPOTENCY_KEY"),
            request_id=get_request_id(request),
        )
        return Response(
            PayoutV1Serializer(payout).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(tags=["Payouts"], summary="Approve a pending payout (admin)", request=None)
    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        payout = services.approve_payout(pk, actor=request.user, request_id=get_request_id(request))
        return Response(PayoutV1Serializer(payout).data)

    @extend_schema(tags=["Payouts"], summary="Reject a pending payout (admin)", request=PayoutRejectV1Serializer)
    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        ser = PayoutRejectV1Serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payout = services.reject_payout(
            pk, actor=request.user, reason=ser.validated_data["reason"], request_id=get_request_id(request)
        )
        return Response(PayoutV1Serializer(payout).data)

    @extend_schema(tags=["Payouts"], summary="Cancel my pending payout", request=None, responses={204: None})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        services.cancel_payout(pk, requester=request.user, request_id=get_request_id(request))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Payouts"],
        summary="Approve many pending payouts in one transaction (admin)",
        request=BulkApproveV1Serializer,
        responses=BulkApproveResultV1Serializer,
    )
    @action(detail=False, methods=["post"], url_path="bulk-approve")
    def bulk_approve(self, request):
        ser = BulkApproveV1Serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = services.bulk_approve_payouts(
            ser.validated_data["ids"], actor=request.user, request_id=get_request_id(request)
        )
        return Response(BulkApproveResultV1Serializer(result).data)

    @extend_schema(tags=["Payouts"], summary="Review queue: pending payouts, oldest first (admin)")
    @action(detail=False, methods=["get"], url_path="pending")
    def pending(self, request):
        page = self.paginate_queryset(selectors.pending_payouts())
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @extend_schema(tags=["Payouts"], summary="Payouts I requested")
    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        qs = self.get_queryset().filter(requested_by=request.user)
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @extend_schema(
        tags=["Payouts"],
        summary="Payout statistics",
        parameters=[OpenApiParameter("vendor_id", int, required=False)],
        responses=PayoutStatsV1Serializer,
    )
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        raw = request.query_params.get("vendor_id")
        vendor_id = None
        if raw not in (None, ""):
            vendor = get_vendor(raw)
            require_min_role(request.user, vendor, "STAFF")
            vendor_id = vendor.pk
        elif not is_platform_admin(request.user):
            raise BusinessRuleViolation("vendor_id is required.", code="vendor_required", field="vendor_id")
        return Response(PayoutStatsV1Serializer(services.payout_stats(vendor_id)).data)
