"""Query-scoping filters for admin resource listings."""

from .conf import settings

__all__ = ["settings"]
