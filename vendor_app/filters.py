import django_filters

from .models import Vendor, VendorStatus


class VendorFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    status = django_filters.ChoiceFilter(choices=VendorStatus.choices)
    has_override = django_filters.BooleanFilter(
        field_name="commission_pct", lookup_expr="isnull", exclude=True
    )

    class Meta:
        model = Vendor
        fields = ["name", "status", "owner", "has_override"]
