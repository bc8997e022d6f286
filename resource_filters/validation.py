"""Contract checks for filters: key uniqueness and safe ``apply`` calls."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Iterable

from django.core.exceptions import EmptyResultSet
from django.db.models import QuerySet

from resource_filters.filters import BooleanFilter, DateFilter, Filter

logger = logging.getLogger(__name__)


def duplicate_keys(filters: Iterable[Filter]) -> list[str]:
    """Return the keys reported by more than one filter, in first-seen order."""
    counts = Counter(f.key() for f in filters)
    return [key for key, count in counts.items() if count > 1]


def _compile(queryset: QuerySet) -> None:
    # Bad lookups only surface once SQL is generated.
    try:
        str(queryset.query)
    except EmptyResultSet:
        pass


def _sample_values(filter_obj: Filter, request) -> list:
    if isinstance(filter_obj, DateFilter):
        return [date.today()]
    options = filter_obj.resolve_options(request)
    if isinstance(filter_obj, BooleanFilter):
        return [{str(o["value"]): True} for o in options]
    return [o["value"] for o in options]


def verify_filter(filter_obj: Filter, request, queryset: QuerySet) -> list[str]:
    """Apply ``filter_obj`` with every value it offers and report failures.

    Each problem is returned as a human readable string; an empty list means
    every option value produced a queryset.
    """
    problems: list[str] = []
    key = filter_obj.key()
    try:
        samples = _sample_values(filter_obj, request)
    except Exception as exc:
        return [f"{key}: options() raised {exc.__class__.__name__}: {exc}"]

    for sample in samples:
        try:
            result, _cleaned = filter_obj.apply_value(request, queryset, sample)
            if not isinstance(result, QuerySet):
                problems.append(
                    f"{key}: apply() returned {type(result).__name__} for {sample!r}"
                )
                continue
            _compile(result)
        except Exception as exc:
            logger.debug("Filter '%s' failed for %r", key, sample, exc_info=True)
            problems.append(
                f"{key}: apply() raised {exc.__class__.__name__} for {sample!r}: {exc}"
            )
    return problems
