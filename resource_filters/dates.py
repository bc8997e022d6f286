"""Relative date tokens accepted by date filters.

Tokens such as ``"__today__"`` can be stored in links or admin lookups and
are expanded to concrete ISO dates when a request is filtered.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta

from resource_filters.conf import settings

DATE_TOKEN_CHOICES = [
    ("__today__", "Today"),
    ("__start_of_month__", "Start of month"),
    ("__end_of_month__", "End of month"),
    ("__start_of_quarter__", "Start of quarter"),
    ("__end_of_quarter__", "End of quarter"),
    ("__start_of_year__", "Start of year"),
    ("__end_of_year__", "End of year"),
    ("__current_fiscal_year_start__", "Start of fiscal year"),
    ("__current_fiscal_year_end__", "End of fiscal year"),
]


def _fiscal_year_start(today: date) -> date:
    fy_month = settings.RESOURCE_FILTERS_FISCAL_YEAR_START_MONTH or 1
    fy_day = settings.RESOURCE_FILTERS_FISCAL_YEAR_START_DAY or 1
    start_candidate = date(today.year, fy_month, fy_day)
    if today < start_candidate:
        start_candidate = date(today.year - 1, fy_month, fy_day)
    return start_candidate


def resolve_date_token(value, today: date | None = None):
    """Expand a relative date token to an ISO date string.

    Values that are not strings, or strings that are not tokens, are
    returned unchanged.
    """
    if not isinstance(value, str):
        return value
    token = value.strip().lower()
    today = today or date.today()
    if token in {"__today__", "today"}:
        return today.isoformat()
    if token in {"__start_of_month__", "start_of_month"}:
        return today.replace(day=1).isoformat()
    if token in {"__end_of_month__", "end_of_month"}:
        last_day = monthrange(today.year, today.month)[1]
        return today.replace(day=last_day).isoformat()
    if token in {"__start_of_year__", "start_of_year"}:
        return today.replace(month=1, day=1).isoformat()
    if token in {"__end_of_year__", "end_of_year"}:
        return today.replace(month=12, day=31).isoformat()
    if token in {"__start_of_quarter__", "start_of_quarter"}:
        q = (today.month - 1) // 3
        start_month = q * 3 + 1
        return today.replace(month=start_month, day=1).isoformat()
    if token in {"__end_of_quarter__", "end_of_quarter"}:
        q = (today.month - 1) // 3
        end_month = q * 3 + 3
        last_day = monthrange(today.year, end_month)[1]
        return today.replace(month=end_month, day=last_day).isoformat()
    if token in {
        "__current_fiscal_year_start__",
        "current_fiscal_year_start",
        "fiscal_year_start",
    }:
        return _fiscal_year_start(today).isoformat()
    if token in {
        "__current_fiscal_year_end__",
        "current_fiscal_year_end",
        "fiscal_year_end",
    }:
        start = _fiscal_year_start(today)
        next_start = date(start.year + 1, start.month, start.day)
        return (next_start - timedelta(days=1)).isoformat()
    return value
