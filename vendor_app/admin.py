from django.contrib import admin

from .models import Vendor, VendorMember


class VendorMemberInline(admin.TabularInline):
    model = VendorMember
    extra = 0


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "owner", "status", "commission_pct", "created_at")
    list_filter = ("status",)
    search_fields = ("name", "slug", "owner__email", "owner__username")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [VendorMemberInline]


@admin.register(VendorMember)
class VendorMemberAdmin(admin.ModelAdmin):
    list_display = ("id", "vendor", "user", "role", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("vendor__name", "vendor__slug", "user__email", "user__username")
