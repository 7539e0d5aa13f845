import django_filters

from .models import OrderStatus, VendorOrder


class VendorOrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    settled = django_filters.BooleanFilter(field_name="settled_at", lookup_expr="isnull", exclude=True)
    created_from = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_to = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = VendorOrder
        fields = ["vendor", "order", "status", "settled"]
