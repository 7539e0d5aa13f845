from django.contrib import admin

from .models import CommissionSetting


@admin.register(CommissionSetting)
class CommissionSettingAdmin(admin.ModelAdmin):
    list_display = ("id", "commission", "created_at", "updated_at")
    ordering = ("-created_at", "-id")

    # the log is written through commissions.services only
    def has_delete_permission(self, request, obj=None):
        return False
