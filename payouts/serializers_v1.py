from __future__ import annotations

from rest_framework import serializers

from .models import VendorPayout


class PayoutV1Serializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source="vendor.name", read_only=True)

    class Meta:
        model = VendorPayout
        fields = [
            "id",
            "vendor",
            "vendor_name",
            "requested_by",
            "amount",
            "method",
            "reference",
            "rejection_reason",
            "status",
            "decided_by",
            "idempotency_key",
            "created_at",
            "processed_at",
        ]
        read_only_fields = fields


class PayoutCreateV1Serializer(serializers.Serializer):
    vendor_id = serializers.IntegerField()
    # minimum and balance checks live in payouts.services
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    method = serializers.CharField(max_length=50)
    reference = serializers.CharField(required=False, allow_blank=True, default="")
    idempotency_key = serializers.CharField(max_length=64, required=False, allow_blank=True)


class PayoutRejectV1Serializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)


class BulkApproveV1Serializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False, max_length=500)


class BulkApproveResultV1Serializer(serializers.Serializer):
    approved = serializers.ListField(child=serializers.IntegerField())
    skipped = serializers.ListField(child=serializers.IntegerField())
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class PayoutStatsV1Serializer(serializers.Serializer):
    vendor_id = serializers.IntegerField(allow_null=True)
    total_count = serializers.IntegerField()
    pending_count = serializers.IntegerField()
    completed_count = serializers.IntegerField()
    rejected_count = serializers.IntegerField()
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    completed_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    average_completed = serializers.DecimalField(max_digits=14, decimal_places=2)
