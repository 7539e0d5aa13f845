from datetime import datetime

from django import forms
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import serializers

DATE_OR_DATETIME_HELP = "Use YYYY-MM-DD or an ISO-8601 datetime."


def parse_date_or_datetime(value):
    """`YYYY-MM-DD` gives a date (whole day), anything else an aware datetime.

    Returns None when the value parses as neither.
    """
    value = str(value or "").strip()
    try:
        parsed = parse_date(value) if len(value) == 10 else parse_datetime(value)
    except ValueError:
        return None
    if isinstance(parsed, datetime) and timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


class DateOrDateTimeField(serializers.Field):
    """Accepts `YYYY-MM-DD` (whole day) or an ISO-8601 datetime."""

    default_error_messages = {"invalid": DATE_OR_DATETIME_HELP}

    def to_internal_value(self, data):
        parsed = parse_date_or_datetime(data)
        if parsed is None:
            self.fail("invalid")
        return parsed

    def to_representation(self, value):
        return value.isoformat()


class DateOrDateTimeFormField(forms.Field):
    """Form counterpart of DateOrDateTimeField, used by query-string filters."""

    default_error_messages = {"invalid": DATE_OR_DATETIME_HELP}

    def to_python(self, value):
        if value in self.empty_values:
            return None
        parsed = parse_date_or_datetime(value)
        if parsed is None:
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")
        return parsed
