from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.middleware import get_request_id
from users.permissions import IsPlatformAdmin

from . import services
from .calculator import calculate_for_total
from .serializers import (
    CalculateQuerySerializer,
    CalculateResultSerializer,
    CommissionSettingSerializer,
    CommissionStatsSerializer,
    CurrentCommissionSerializer,
    HistoryQuerySerializer,
    SetCommissionSerializer,
)


def _current_payload(current: services.CurrentCommission) -> dict:
    return CurrentCommissionSerializer(
        {
            "percentage": current.percentage,
            "updated_at": current.updated_at,
            "setting_id": current.setting_id,
            "is_default": current.is_default,
        }
    ).data


class CurrentCommissionV1(APIView):
    def get_permissions(self):
        if self.request.method == "PUT":
            return [IsPlatformAdmin()]
        return [permissions.IsAuthenticated()]

    @extend_schema(responses=CurrentCommissionSerializer, summary="Current platform commission", tags=["Commission"])
    def get(self, request):
        return Response(_current_payload(services.get_current()))

    @extend_schema(
        request=SetCommissionSerializer,
        responses=CurrentCommissionSerializer,
        summary="Set the platform commission (admin)",
        tags=["Commission"],
    )
    def put(self, request):
        ser = SetCommissionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        current = services.set_current(
            ser.validated_data["percentage"], actor=request.user, request_id=get_request_id(request)
        )
        return Response(_current_payload(current), status=status.HTTP_200_OK)


class ResetCommissionV1(APIView):
    permission_classes = [IsPlatformAdmin]

    @extend_schema(request=None, responses=CurrentCommissionSerializer, summary="Reset commission to 0 (admin)", tags=["Commission"])
    def post(self, request):
        current = services.reset_to_default(actor=request.user, request_id=get_request_id(request))
        return Response(_current_payload(current), status=status.HTTP_201_CREATED)


class CommissionHistoryV1(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        parameters=[
            OpenApiParameter("from_date", str, description="Inclusive lower bound (date or datetime)"),
            OpenApiParameter("to_date", str, description="Inclusive upper bound (date or datetime)"),
        ],
        responses=CommissionSettingSerializer(many=True),
        summary="Commission history, oldest first",
        tags=["Commission"],
    )
    def get(self, request):
        ser = HistoryQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        rows = services.history(ser.validated_data.get("from_date"), ser.validated_data.get("to_date"))
        return Response(CommissionSettingSerializer(rows, many=True).data)


class CalculateCommissionV1(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        parameters=[CalculateQuerySerializer],
        responses=CalculateResultSerializer,
        summary="Split an order total into commission and vendor earnings",
        tags=["Commission"],
    )
    def get(self, request):
        ser = CalculateQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        result = calculate_for_total(
            ser.validated_data["order_total"], ser.validated_data.get("percentage")
        )
        return Response(CalculateResultSerializer(result).data)


class CommissionStatsV1(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(responses=CommissionStatsSerializer, summary="Commission statistics", tags=["Commission"])
    def get(self, request):
        return Response(CommissionStatsSerializer(services.stats()).data)
