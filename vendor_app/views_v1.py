from __future__ import annotations

from django.db.models import QuerySet
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.errors import Conflict
from core.middleware import get_request_id
from core.models import log_action
from ledger.models import LedgerEntry
from ledger.serializers import LedgerEntrySerializer
from ledger.services import get_balance
from users.permissions import IsPlatformAdmin

from . import services
from .filters import VendorFilter
from .models import Vendor, VendorMember
from .permissions import IsVendorOwner, IsVendorStaff
from .serializers_v1 import (
    InviteSerializer,
    MemberSerializer,
    VendorCommissionSerializer,
    VendorSerializer,
    VendorStatusSerializer,
)


class DefaultPage(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


@extend_schema_view(
    list=extend_schema(tags=["Vendors"], summary="List vendors visible to me"),
    retrieve=extend_schema(tags=["Vendors"], summary="Retrieve a vendor"),
    create=extend_schema(tags=["Vendors"], summary="Register a vendor"),
    partial_update=extend_schema(tags=["Vendors"], summary="Update vendor profile"),
    update=extend_schema(tags=["Vendors"], summary="Replace vendor profile"),
    destroy=extend_schema(tags=["Vendors"], summary="Delete a vendor with no orders or payouts"),
)
class VendorViewSet(viewsets.ModelViewSet):
    serializer_class = VendorSerializer
    pagination_class = DefaultPage
    filterset_class = VendorFilter

    def get_queryset(self) -> QuerySet:
        user = self.request.user
        if not user.is_authenticated:
            return Vendor.objects.none()
        return services.vendors_for_user(user).order_by("id")

    def get_permissions(self):  # type: ignore[override]
        if self.action in {"list", "create"}:
            return [IsAuthenticated()]
        if self.action in {"set_status", "set_commission"}:
            return [IsPlatformAdmin()]
        if self.action in {"update", "partial_update", "destroy", "invite"}:
            return [IsVendorOwner()]
        return [IsVendorStaff()]

    def perform_create(self, serializer):
        user = self.request.user
        if Vendor.objects.filter(owner=user).exists():
            raise Conflict("You already own a vendor.", code="vendor_exists")
        serializer.instance = services.create_vendor(
            user, request_id=get_request_id(self.request), **serializer.validated_data
        )

    def perform_update(self, serializer):
        vendor = serializer.save()
        changed = sorted(serializer.validated_data.keys())
        log_action(
            self.request.user,
            vendor.pk,
            "vendor_updated",
            "Vendor",
            vendor.pk,
            {"fields": changed},
            request_id=get_request_id(self.request),
        )

    def destroy(self, request, *args, **kwargs):
        vendor = self.get_object()
        services.delete_vendor(vendor.pk, actor=request.user, request_id=get_request_id(request))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Vendors"], summary="Change vendor status (admin)", request=VendorStatusSerializer)
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        ser = VendorStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vendor = services.set_vendor_status(
            pk, ser.validated_data["status"], actor=request.user, request_id=get_request_id(request)
        )
        return Response(VendorSerializer(vendor).data)

    @extend_schema(
        tags=["Vendors"],
        summary="Set or clear the vendor commission override (admin)",
        request=VendorCommissionSerializer,
    )
    @action(detail=True, methods=["post"], url_path="commission")
    def set_commission(self, request, pk=None):
        ser = VendorCommissionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        vendor = services.set_vendor_commission(
            pk,
            ser.validated_data["commission_pct"],
            actor=request.user,
            request_id=get_request_id(request),
        )
        return Response(VendorSerializer(vendor).data)

    @extend_schema(
        tags=["Vendor Ledger"],
        summary="Current payable balance",
        examples=[
            OpenApiExample(
                "Balance",
                value={"vendor_id": 1, "balance": "500.00"},
                response_only=True,
            )
        ],
    )
    @action(detail=True, methods=["get"], url_path="balance")
    def balance(self, request, pk=None):
        vendor = self.get_object()
        return Response({"vendor_id": vendor.pk, "balance": str(get_balance(vendor.pk))})

    @extend_schema(tags=["Vendor Ledger"], summary="Ledger entries, newest first")
    @action(detail=True, methods=["get"], url_path="ledger")
    def ledger(self, request, pk=None):
        vendor = self.get_object()
        qs = LedgerEntry.objects.filter(vendor=vendor).order_by("-created_at", "-id")
        page = self.paginate_queryset(qs)
        ser = LedgerEntrySerializer(page, many=True)
        return self.get_paginated_response(ser.data)

    @extend_schema(tags=["Vendor Members"], summary="List vendor members")
    @action(detail=True, methods=["get"], url_path="members")
    def members(self, request, pk=None):
        vendor = self.get_object()
        qs = VendorMember.objects.filter(vendor=vendor).select_related("user").order_by("id")
        page = self.paginate_queryset(qs)
        ser = MemberSerializer(page, many=True)
        return self.get_paginated_response(ser.data)

    @extend_schema(tags=["Vendor Members"], summary="Invite or upsert a member", request=InviteSerializer)
    @action(detail=True, methods=["post"], url_path="invite")
    def invite(self, request, pk=None):
        vendor = self.get_object()
        ser = InviteSerializer(data=request.data, context={"vendor": vendor, "request": request})
        ser.is_valid(raise_exception=True)
        member = ser.save()
        log_action(
            request.user,
            vendor.pk,
            "member_invited",
            "VendorMember",
            member.pk,
            {"role": member.role},
            request_id=get_request_id(request),
        )
        return Response(MemberSerializer(member).data, status=status.HTTP_201_CREATED)
