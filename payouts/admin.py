from django.contrib import admin

from .models import VendorPayout


@admin.register(VendorPayout)
class VendorPayoutAdmin(admin.ModelAdmin):
    list_display = ("id", "vendor", "amount", "method", "status", "requested_by", "created_at", "processed_at")
    list_filter = ("status", "method")
    search_fields = ("vendor__name", "reference", "requested_by__username", "idempotency_key")
    # state changes go through payouts.services so the ledger stays in step
    readonly_fields = ("status", "processed_at", "decided_by", "rejection_reason")
