import logging
from collections.abc import Mapping

from .base import Filter

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "on", "yes", "y", "t"}


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY


class BooleanFilter(Filter):
    """Multi-select filter where every option is an independent checkbox.

    ``apply`` receives a dict mapping ``str(option value)`` to a bool for
    every option. Use :meth:`checked` to get the selected option values.
    """

    component = "boolean"

    def _expand(self, request, selected) -> dict[str, bool]:
        if isinstance(selected, Mapping):
            flags = {str(k): _as_bool(v) for k, v in selected.items()}
        else:
            if selected is not None and not isinstance(selected, (list, tuple, set)):
                selected = [selected]
            flags = {str(v): True for v in selected or ()}
        known = [str(option["value"]) for option in self.resolve_options(request)]
        unknown = set(flags) - set(known)
        if unknown:
            logger.warning(
                "Ignoring unknown values %s for filter '%s'", sorted(unknown), self.key()
            )
        return {value: flags.get(value, False) for value in known}

    def clean(self, request, raw):
        if raw is None or raw == "":
            return None
        return self._expand(request, raw)

    def is_empty(self, value) -> bool:
        if isinstance(value, Mapping):
            return not any(_as_bool(v) for v in value.values())
        return not value

    def checked(self, request, value) -> list:
        """Return the option values, in their original types, switched on in ``value``."""
        if not value:
            return []
        selected = {k for k, v in value.items() if v}
        return [
            option["value"]
            for option in self.resolve_options(request)
            if str(option["value"]) in selected
        ]

    def empty_value(self, request):
        return self._expand(request, ())

    def current_value(self, request, value=None):
        if value is None:
            value = self.default()
        return self._expand(request, value)
