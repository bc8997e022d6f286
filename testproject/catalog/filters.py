from resource_filters.filters import BooleanFilter, DateFilter, SelectFilter

from .models import Product


class ProductStatusFilter(SelectFilter):
    label = "Status"

    def options(self, request):
        return {label: value for value, label in Product.Status.choices}

    def apply(self, request, queryset, value):
        return queryset.filter(status=value)


class ProductFlagsFilter(BooleanFilter):
    def options(self, request):
        return {"Active": "is_active", "Featured": "is_featured"}

    def default(self):
        return ["is_active"]

    def apply(self, request, queryset, value):
        for flag in self.checked(request, value):
            queryset = queryset.filter(**{flag: True})
        return queryset


class ReleasedAfterFilter(DateFilter):
    label = "Released after"
    first_day_of_week = 1

    def apply(self, request, queryset, value):
        return queryset.filter(released_on__gte=value)


class StockLevelFilter(SelectFilter):
    """Integer option values; only staff may use it."""

    def options(self, request):
        return {"Out of stock": 0, "Low": 10}

    def apply(self, request, queryset, value):
        if value == 0:
            return queryset.filter(stock=0)
        return queryset.filter(stock__gt=0, stock__lt=value)
