from django.contrib import admin

from .models import LedgerEntry, VendorBalance


@admin.register(VendorBalance)
class VendorBalanceAdmin(admin.ModelAdmin):
    list_display = ("vendor", "amount", "updated_at")
    search_fields = ("vendor__name", "vendor__slug")
    readonly_fields = ("vendor", "amount", "updated_at")

    def has_add_permission(self, request):
        return False


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "vendor", "entry_type", "amount", "balance_after", "vendor_order", "payout", "created_at")
    list_filter = ("entry_type",)
    search_fields = ("vendor__name", "memo")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
