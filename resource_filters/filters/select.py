import logging

from .base import Filter

logger = logging.getLogger(__name__)


class SelectFilter(Filter):
    """Single-choice filter over the values returned by ``options()``."""

    component = "select"

    def clean(self, request, raw):
        if isinstance(raw, (list, tuple)):
            raw = raw[-1] if raw else None
        if raw is None or raw == "":
            return None
        for option in self.resolve_options(request):
            if option["value"] == raw or str(option["value"]) == str(raw):
                return option["value"]
        logger.warning("Ignoring unknown value %r for filter '%s'", raw, self.key())
        return None
