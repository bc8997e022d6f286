from django.core.exceptions import ImproperlyConfigured


class FilterDecodeError(ValueError):
    """Raised when an encoded filter payload cannot be decoded."""


class DuplicateFilterKey(ImproperlyConfigured):
    """Raised when two filters on one resource report the same key."""

    def __init__(self, resource, keys):
        self.resource = resource
        self.keys = list(keys)
        super().__init__(
            f"Resource '{resource}' has filters sharing a key: {', '.join(self.keys)}. "
            "Override key() on parameterized filters."
        )


class InvalidFilterValues(ValueError):
    """Raised when query-string filter values fail form validation."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__("Invalid filter values.")
