"""Filters parameterized by a model field path.

The same class can be attached to a resource several times, once per field,
so each instance folds its field path (and lookup) into :meth:`key`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .boolean import BooleanFilter
from .date import DateFilter
from .select import SelectFilter

logger = logging.getLogger(__name__)

DATE_LOOKUPS = {"gt", "gte", "lt", "lte", "exact"}


def default_label(field_path: str, fallback: str = "") -> str:
    tail = (field_path or "").split("__")[-1]
    return (tail or fallback or "").replace("_", " ").title()


class FieldFilterMixin:
    """Shared construction, naming and option lookup for field-bound filters."""

    def __init__(
        self,
        field_path: str,
        *,
        label: Optional[str] = None,
        choices: Any = None,
    ):
        super().__init__()
        self.field_path = field_path
        self.label = label
        self.choices = choices

    def name(self) -> str:
        return self.label or default_label(self.field_path, "Value")

    def key(self) -> str:
        return f"{super().key()}:{self.field_path}"

    def options(self, request):
        choices = self.choices
        if callable(choices):
            return choices(request)
        if choices is not None:
            return choices
        return self._distinct_values()

    def _distinct_values(self):
        if self.resource is None:
            logger.warning(
                "Filter '%s' has no choices and is not bound to a resource", self.key()
            )
            return []
        path = self.field_path
        values = (
            self.resource.model._default_manager.exclude(**{f"{path}__isnull": True})
            .order_by(path)
            .values_list(path, flat=True)
            .distinct()
        )
        return [(value, str(value)) for value in values]


class FieldSelectFilter(FieldFilterMixin, SelectFilter):
    def __init__(
        self,
        field_path: str,
        *,
        label: Optional[str] = None,
        choices: Any = None,
        lookup: str = "exact",
    ):
        super().__init__(field_path, label=label, choices=choices)
        self.lookup = lookup

    def apply(self, request, queryset, value):
        return queryset.filter(**{f"{self.field_path}__{self.lookup}": value})


class FieldBooleanFilter(FieldFilterMixin, BooleanFilter):
    def apply(self, request, queryset, value):
        return queryset.filter(**{f"{self.field_path}__in": self.checked(request, value)})


class FieldDateFilter(FieldFilterMixin, DateFilter):
    def __init__(
        self,
        field_path: str,
        *,
        lookup: str = "gte",
        label: Optional[str] = None,
        first_day_of_week: Optional[int] = None,
    ):
        if lookup not in DATE_LOOKUPS:
            raise ValueError(f"Unsupported date lookup '{lookup}' for {field_path}")
        super().__init__(field_path, label=label)
        self.lookup = lookup
        if first_day_of_week is not None:
            self.first_day_of_week = first_day_of_week

    def key(self) -> str:
        return f"{super().key()}__{self.lookup}"

    def options(self, request):
        return {}

    def apply(self, request, queryset, value):
        return queryset.filter(**{f"{self.field_path}__{self.lookup}": value})
