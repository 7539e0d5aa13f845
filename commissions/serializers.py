from rest_framework import serializers

from core.fields import DateOrDateTimeField

from .models import CommissionSetting


class CommissionSettingSerializer(serializers.ModelSerializer):
    percentage = serializers.DecimalField(
        source="commission", max_digits=5, decimal_places=2, read_only=True
    )

    class Meta:
        model = CommissionSetting
        fields = ["id", "percentage", "created_at", "updated_at"]


class CurrentCommissionSerializer(serializers.Serializer):
    percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    updated_at = serializers.DateTimeField(allow_null=True)
    setting_id = serializers.IntegerField(allow_null=True)
    is_default = serializers.BooleanField()


class SetCommissionSerializer(serializers.Serializer):
    # bounds are enforced by the policy store so callers get InvalidCommission
    percentage = serializers.DecimalField(max_digits=6, decimal_places=2)


class HistoryQuerySerializer(serializers.Serializer):
    from_date = DateOrDateTimeField(required=False)
    to_date = DateOrDateTimeField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("from_date"), attrs.get("to_date")
        if start and end and type(start) is type(end) and start > end:
            raise serializers.ValidationError({"to_date": "to_date must not precede from_date."})
        return attrs


class CalculateQuerySerializer(serializers.Serializer):
    order_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=6, decimal_places=2, required=False)


class CalculateResultSerializer(serializers.Serializer):
    commission_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    commission_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    vendor_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    order_total = serializers.DecimalField(max_digits=12, decimal_places=2)


class CommissionStatsSerializer(serializers.Serializer):
    current_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    updated_at = serializers.DateTimeField(allow_null=True)
    is_default = serializers.BooleanField()
    total_changes = serializers.IntegerField()
    recent = CommissionSettingSerializer(many=True)
