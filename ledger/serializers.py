from rest_framework import serializers

from .models import LedgerEntry


class LedgerEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = LedgerEntry
        fields = [
            "id",
            "vendor",
            "entry_type",
            "amount",
            "balance_after",
            "vendor_order",
            "payout",
            "memo",
            "created_at",
        ]
        read_only_fields = fields
