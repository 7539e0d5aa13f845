# orders/admin.py
from django.contrib import admin

from .models import Order, OrderItem, VendorOrder


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("vendor_order",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "total_amount", "created_at")
    list_filter = ("status",)
    search_fields = ("id", "user__username", "user__email")
    inlines = [OrderItemInline]


@admin.register(VendorOrder)
class VendorOrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "order",
        "vendor",
        "status",
        "total_amount",
        "commission_amount",
        "vendor_amount",
        "settled_at",
    )
    list_filter = ("status",)
    search_fields = ("order__id", "vendor__name")
    # settlement columns are written only by orders.services.settlement
    readonly_fields = ("settled_at", "commission_pct", "commission_amount", "vendor_amount")
