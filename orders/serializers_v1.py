from rest_framework import serializers

from .models import OrderItem, OrderStatus, VendorOrder


class OrderItemV1Serializer(serializers.ModelSerializer):
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = ["id", "product_name", "sku", "price", "quantity", "line_total", "vendor", "vendor_order"]
        read_only_fields = fields

    def get_line_total(self, obj) -> str:
        return str(obj.line_total())


class VendorOrderV1Serializer(serializers.ModelSerializer):
    items = OrderItemV1Serializer(many=True, read_only=True)
    is_settled = serializers.BooleanField(read_only=True)

    class Meta:
        model = VendorOrder
        fields = [
            "id",
            "order",
            "vendor",
            "status",
            "subtotal",
            "tax_amount",
            "shipping",
            "discount",
            "total_amount",
            "is_settled",
            "settled_at",
            "commission_pct",
            "commission_amount",
            "vendor_amount",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class VendorOrderStatusV1Serializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
