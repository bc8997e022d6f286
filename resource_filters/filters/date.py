import logging
from datetime import date, datetime

from django.utils.dateparse import parse_date, parse_datetime

from resource_filters.dates import resolve_date_token

from .base import Filter

logger = logging.getLogger(__name__)


class DateFilter(Filter):
    """Filter whose value is a single date.

    ``apply`` receives a :class:`datetime.date`. Relative tokens such as
    ``"__start_of_month__"`` are expanded before parsing.
    """

    component = "date"
    # 0 = Sunday, 1 = Monday
    first_day_of_week = 0

    def clean(self, request, raw):
        if isinstance(raw, (list, tuple)):
            raw = raw[-1] if raw else None
        if raw is None or raw == "":
            return None
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        value = resolve_date_token(str(raw).strip())
        try:
            parsed = parse_datetime(value)
            parsed = parsed.date() if parsed is not None else parse_date(value)
        except ValueError:
            parsed = None
        if parsed is None:
            logger.warning("Ignoring invalid date %r for filter '%s'", raw, self.key())
        return parsed

    def current_value(self, request, value=None):
        value = super().current_value(request, value)
        if isinstance(value, date):
            return value.isoformat()
        return value

    def serialize(self, request, value=None, *, cleared=False):
        data = super().serialize(request, value, cleared=cleared)
        data["first_day_of_week"] = self.first_day_of_week
        return data
