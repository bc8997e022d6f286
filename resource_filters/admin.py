"""Expose resource filters in the Django admin changelist sidebar."""

from __future__ import annotations

import re

from django.contrib import admin

from resource_filters.dates import DATE_TOKEN_CHOICES
from resource_filters.filters import BooleanFilter, DateFilter, Filter


def parameter_name_for(flt: Filter) -> str:
    slug = re.sub(r"[^0-9a-zA-Z]+", "_", flt.key()).strip("_").lower()
    return f"rf_{slug}"


def list_filter_for(flt: Filter) -> type[admin.SimpleListFilter]:
    """Build a ``SimpleListFilter`` subclass backed by ``flt``.

    The admin sidebar offers one value at a time: boolean filters get one
    link per option (checking only that option) and date filters get the
    relative date tokens.
    """

    class ResourceListFilter(admin.SimpleListFilter):
        title = flt.name()
        parameter_name = parameter_name_for(flt)
        resource_filter = flt

        def lookups(self, request, model_admin):
            if isinstance(flt, DateFilter):
                return DATE_TOKEN_CHOICES
            return [(str(o["value"]), o["label"]) for o in flt.resolve_options(request)]

        def queryset(self, request, queryset):
            raw = self.value()
            if raw is None:
                return None
            if isinstance(flt, BooleanFilter):
                raw = [raw]
            queryset, _cleaned = flt.apply_value(request, queryset, raw)
            return queryset

    ResourceListFilter.__name__ = f"{type(flt).__name__}ListFilter"
    ResourceListFilter.__qualname__ = ResourceListFilter.__name__
    return ResourceListFilter


class ResourceAdminMixin:
    """ModelAdmin mixin appending a resource's filters to ``list_filter``."""

    resource_class = None

    def get_list_filter(self, request):
        list_filter = list(super().get_list_filter(request))
        if self.resource_class is None:
            return list_filter
        resource = self.resource_class()
        return list_filter + [list_filter_for(f) for f in resource.available_filters(request)]
