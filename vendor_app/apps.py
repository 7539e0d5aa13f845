from django.apps import AppConfig


class VendorAppConfig(AppConfig):
    name = "vendor_app"
    verbose_name = "Vendors"
    default_auto_field = "django.db.models.BigAutoField"
