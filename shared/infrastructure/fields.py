"""
Serializer fields shared by the API layer.

FlexibleDateField accepts both ``YYYY-MM-DD`` and ``DD-MM-YYYY`` on input
and always renders ``YYYY-MM-DD``. Format awareness stops here: everything
behind the serializers works with ``datetime.date``.
"""

from datetime import date, datetime

from rest_framework import serializers  # type: ignore

from shared.domain.dates import parse_date, to_canonical
from shared.domain.exceptions import InvalidDateError


class FlexibleDateField(serializers.Field):
    default_error_messages = {
        "invalid": "Date must be in YYYY-MM-DD or DD-MM-YYYY format (e.g. 2024-01-31 or 31-01-2024).",
    }

    def to_internal_value(self, data):
        if isinstance(data, datetime):
            self.fail("invalid")
        if isinstance(data, date):
            return data
        if not isinstance(data, str):
            self.fail("invalid")
        try:
            return parse_date(data)
        except InvalidDateError as exc:
            raise serializers.ValidationError(exc.message, code="invalid")

    def to_representation(self, value):
        if value is None:
            return None
        if isinstance(value, datetime):
            value = value.date()
        return to_canonical(value)
