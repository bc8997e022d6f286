"""Runtime access to resource filter configuration defaults."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.conf import settings as django_settings

__all__ = ["settings", "ResourceFiltersSettings"]


@dataclass
class ResourceFiltersSettings:
    """Proxy object exposing Django settings with sensible fallbacks."""

    defaults: dict[str, Any]

    def __getattr__(self, attr: str) -> Any:  # pragma: no cover - simple delegation
        if attr in self.defaults:
            return getattr(django_settings, attr, self.defaults[attr])
        return getattr(django_settings, attr)


settings = ResourceFiltersSettings(
    defaults={
        "RESOURCE_FILTERS_QUERY_PARAM": "filters",
        "RESOURCE_FILTERS_NAMESPACE": "filters.",
        "RESOURCE_FILTERS_PER_PAGE": 25,
        "RESOURCE_FILTERS_STAFF_BYPASS": True,
        "RESOURCE_FILTERS_FISCAL_YEAR_START_MONTH": 1,
        "RESOURCE_FILTERS_FISCAL_YEAR_START_DAY": 1,
        "RESOURCE_FILTERS_RESOURCES": [],
    }
)
