from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, Optional

from django.db.models import QuerySet

logger = logging.getLogger(__name__)

COMPONENTS = {"select", "boolean", "date"}


def humanize_class_name(name: str) -> str:
    """``ProductStatusFilter`` -> ``"Product Status"``."""
    words = re.findall(r"[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]?[a-z]+|\d+", name)
    if len(words) > 1 and words[-1] == "Filter":
        words = words[:-1]
    return " ".join(words) or name


def normalize_options(options) -> list[dict[str, Any]]:
    """Normalize filter options to a list of ``{"label", "value"}`` dicts.

    Mappings are read as ``label -> value``; any other iterable is read as
    Django-style ``(value, label)`` choices.
    """
    if not options:
        return []
    if isinstance(options, Mapping):
        return [{"label": str(label), "value": value} for label, value in options.items()]
    return [{"label": str(label), "value": value} for value, label in options]


class Filter(ABC):
    """Base class for filters attached to a resource listing.

    Subclasses implement :meth:`apply` and usually :meth:`options`. The
    value handed to :meth:`apply` has already gone through :meth:`clean`, and
    empty values never reach it.
    """

    label: Optional[str] = None
    component = "select"
    resource = None
    _see_callback: Optional[Callable[[Any], bool]] = None

    def __repr__(self):
        return f"<{type(self).__name__} key={self.key()!r}>"

    def bind(self, resource) -> "Filter":
        self.resource = resource
        return self

    def name(self) -> str:
        if self.label:
            return str(self.label)
        return humanize_class_name(type(self).__name__)

    def key(self) -> str:
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    def options(self, request):
        return {}

    def default(self):
        return None

    @abstractmethod
    def apply(self, request, queryset: QuerySet, value) -> QuerySet:
        """Return ``queryset`` scoped by ``value``."""

    def resolve_options(self, request) -> list[dict[str, Any]]:
        return normalize_options(self.options(request))

    def clean(self, request, raw):
        return raw

    def is_empty(self, value) -> bool:
        if value is None:
            return True
        if isinstance(value, (str, list, tuple, dict, set)):
            return len(value) == 0
        return False

    # Authorization
    def see_if(self, callback: Callable[[Any], bool]) -> "Filter":
        self._see_callback = callback
        return self

    def can_see(self, request) -> bool:
        if self._see_callback is None:
            return True
        return bool(self._see_callback(request))

    def current_value(self, request, value=None):
        """Value reported to clients: ``value`` when given, else the default."""
        if value is None:
            value = self.default()
        return value

    def empty_value(self, request):
        """Value reported for a filter that is explicitly not set."""
        return None

    def serialize(self, request, value=None, *, cleared: bool = False) -> dict[str, Any]:
        if value is None and cleared:
            current = self.empty_value(request)
        else:
            current = self.current_value(request, value)
        return {
            "key": self.key(),
            "name": self.name(),
            "component": self.component,
            "options": self.resolve_options(request),
            "default": self.current_value(request),
            "current_value": current,
        }

    def apply_value(self, request, queryset: QuerySet, raw):
        """Clean ``raw`` and apply it.

        Returns ``(queryset, cleaned)``; ``cleaned`` is ``None`` when the
        value was empty and the queryset was left untouched.
        """
        cleaned = self.clean(request, raw)
        if self.is_empty(cleaned):
            return queryset, None
        logger.debug("Applying filter '%s' with value %r", self.key(), cleaned)
        result = self.apply(request, queryset, cleaned)
        if result is None:
            raise TypeError(f"{type(self).__name__}.apply() must return a queryset, got None")
        return result, cleaned
