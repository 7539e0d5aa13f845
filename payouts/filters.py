"""Query-string filters for the payout list."""

from __future__ import annotations

from datetime import datetime

import django_filters
from django import forms

from core.fields import DateOrDateTimeFormField

from .enums import PayoutStatus, SortField, SortOrder
from .models import VendorPayout
from .selectors import payout_ordering


class DateOrDateTimeFilter(django_filters.Filter):
    """A date bounds the whole day; a datetime bounds the exact instant."""

    field_class = DateOrDateTimeFormField

    def filter(self, qs, value):
        if value is None:
            return qs
        if isinstance(value, datetime):
            lookup = f"{self.field_name}__{self.lookup_expr}"
        else:
            lookup = f"{self.field_name}__date__{self.lookup_expr}"
        return self.get_method(qs)(**{lookup: value})


class PayoutFilterForm(forms.Form):
    def clean(self):
        cleaned = super().clean()
        lo, hi = cleaned.get("min_amount"), cleaned.get("max_amount")
        if lo is not None and hi is not None and lo > hi:
            self.add_error("max_amount", "max_amount must not be below min_amount.")
        return cleaned


class PayoutFilterSet(django_filters.FilterSet):
    """Every filter is optional and applied independently."""

    vendor_id = django_filters.NumberFilter(field_name="vendor_id")
    requested_by = django_filters.NumberFilter(field_name="requested_by_id")
    status = django_filters.ChoiceFilter(choices=PayoutStatus.choices)
    min_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="gte")
    max_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="lte")
    method = django_filters.CharFilter(lookup_expr="icontains")
    from_date = DateOrDateTimeFilter(field_name="created_at", lookup_expr="gte")
    to_date = DateOrDateTimeFilter(field_name="created_at", lookup_expr="lte")
    # applied together in filter_queryset
    sort_by = django_filters.ChoiceFilter(choices=SortField.choices, method="keep_queryset")
    sort_order = django_filters.ChoiceFilter(choices=SortOrder.choices, method="keep_queryset")

    class Meta:
        model = VendorPayout
        fields = []
        form = PayoutFilterForm

    def keep_queryset(self, queryset, name, value):
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        data = self.form.cleaned_data
        return queryset.order_by(*payout_ordering(data.get("sort_by"), data.get("sort_order")))
