from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from django.contrib.auth import get_permission_codename
from django.db.models import QuerySet
from django.utils.text import capfirst, slugify

from resource_filters.conf import settings
from resource_filters.encoding import decode_filters
from resource_filters.exceptions import DuplicateFilterKey, InvalidFilterValues
from resource_filters.filters import Filter
from resource_filters.forms import FilterForm
from resource_filters.validation import duplicate_keys

logger = logging.getLogger(__name__)


class Resource:
    """A model listing exposed to the admin UI together with its filters.

    Subclasses set :attr:`model` and override :meth:`filters`::

        class ProductResource(Resource):
            model = Product

            def filters(self, request):
                return [ProductStatusFilter(), FieldDateFilter("created_on")]
    """

    model: Optional[type] = None
    uri_key: Optional[str] = None
    label: Optional[str] = None
    # Columns returned by serialize_row(); defaults to every concrete field.
    fields: Optional[Sequence[str]] = None
    ordering: Sequence[str] = ("pk",)
    per_page: Optional[int] = None

    def __repr__(self):
        return f"<{type(self).__name__} uri_key={self.get_uri_key()!r}>"

    @classmethod
    def get_uri_key(cls) -> str:
        if cls.uri_key:
            return cls.uri_key
        return slugify(str(cls.model._meta.verbose_name_plural))

    @classmethod
    def get_label(cls) -> str:
        return cls.label or capfirst(str(cls.model._meta.verbose_name_plural))

    def get_per_page(self) -> int:
        return self.per_page or settings.RESOURCE_FILTERS_PER_PAGE

    # ------------------------------
    # Filters
    # ------------------------------

    def filters(self, request) -> list[Filter]:
        return []

    def available_filters(self, request) -> list[Filter]:
        """Declared filters bound to this resource and visible to ``request``."""
        declared = [f.bind(self) for f in (self.filters(request) or [])]
        dupes = duplicate_keys(declared)
        if dupes:
            raise DuplicateFilterKey(self.get_uri_key(), dupes)
        return [f for f in declared if f.can_see(request)]

    def get_filter(self, request, key: str) -> Optional[Filter]:
        for flt in self.available_filters(request):
            if flt.key() == key:
                return flt
        return None

    def get_filter_form(self, request, data=None) -> FilterForm:
        return FilterForm(self.available_filters(request), request, data=data)

    def default_filter_values(self, request) -> dict[str, Any]:
        values = {}
        for flt in self.available_filters(request):
            default = flt.default()
            if default is not None:
                values[flt.key()] = default
        return values

    def resolve_filter_values(self, request) -> dict[str, Any]:
        """Read the requested filter values.

        The encoded payload parameter wins; otherwise namespaced query-string
        fields are validated through :class:`FilterForm`; otherwise each
        filter's default applies.
        """
        param = settings.RESOURCE_FILTERS_QUERY_PARAM
        if param in request.GET:
            values = decode_filters(request.GET.get(param))
            logger.debug("Decoded filter payload for %s: %s", self.get_uri_key(), values)
            return values

        form = self.get_filter_form(request, data=request.GET)
        if form.has_filter_data():
            if not form.is_valid():
                raise InvalidFilterValues(form.errors.get_json_data())
            return form.filter_values()
        return self.default_filter_values(request)

    def apply_filters(
        self, request, queryset: QuerySet, values: Mapping[str, Any]
    ) -> tuple[QuerySet, dict[str, Any]]:
        """Apply every visible filter that has a non-empty value.

        Returns the scoped queryset and the cleaned values that were applied,
        keyed by filter key.
        """
        filters = {f.key(): f for f in self.available_filters(request)}
        for key in values:
            if key not in filters:
                logger.debug("Ignoring unknown filter key '%s' on %s", key, self.get_uri_key())

        applied: dict[str, Any] = {}
        for key, flt in filters.items():
            if key not in values:
                continue
            queryset, cleaned = flt.apply_value(request, queryset, values[key])
            if cleaned is not None:
                applied[key] = cleaned
        return queryset, applied

    def filtered_queryset(self, request) -> tuple[QuerySet, dict[str, Any]]:
        values = self.resolve_filter_values(request)
        return self.apply_filters(request, self.get_queryset(request), values)

    def serialize_filters(
        self,
        request,
        values: Optional[Mapping[str, Any]] = None,
        *,
        fill_defaults: bool = True,
    ):
        """Serialize the visible filters with their current values.

        With ``fill_defaults=False`` a filter missing from ``values`` reports
        an empty current value instead of its default, matching what
        :meth:`apply_filters` did with the same values.
        """
        values = values or {}
        return [
            f.serialize(request, values.get(f.key()), cleared=not fill_defaults)
            for f in self.available_filters(request)
        ]

    # ------------------------------
    # Listing
    # ------------------------------

    def get_queryset(self, request) -> QuerySet:
        qs = self.model._default_manager.all()
        if self.ordering:
            qs = qs.order_by(*self.ordering)
        return qs

    def authorized_to_view(self, request) -> bool:
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return False
        if settings.RESOURCE_FILTERS_STAFF_BYPASS and (user.is_superuser or user.is_staff):
            return True
        opts = self.model._meta
        return user.has_perm(f"{opts.app_label}.{get_permission_codename('view', opts)}")

    def serialize_row(self, obj) -> dict[str, Any]:
        opts = self.model._meta
        names = self.fields or [f.name for f in opts.concrete_fields]
        return {name: opts.get_field(name).value_from_object(obj) for name in names}
