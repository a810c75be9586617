"""FilterSet definitions for property listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Property.Status.choices)
    price_min = django_filters.NumberFilter(field_name="price_per_night", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_per_night", lookup_expr="lte")
    title = django_filters.CharFilter(field_name="title", lookup_expr="icontains")
    # Properties whose window contains the given day
    available_on = django_filters.DateFilter(method="filter_available_on")

    class Meta:
        model = Property
        fields = ["status"]

    def filter_available_on(self, queryset, name, value):  # type: ignore
        return queryset.filter(available_from__lte=value, available_to__gte=value)
