import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.core.paginator import Paginator
from django.http import Http404, JsonResponse
from django.views import View

from resource_filters.encoding import encode_filters
from resource_filters.exceptions import FilterDecodeError, InvalidFilterValues
from resource_filters.registry import get_resource

logger = logging.getLogger(__name__)


class ResourceViewMixin(LoginRequiredMixin):
    """Resolve ``uri_key`` to a registered resource the user may view."""

    def get_resource(self, request, uri_key):
        resource = get_resource(uri_key)
        if resource is None:
            raise Http404(f"Resource '{uri_key}' not found in registry.")
        if not resource.authorized_to_view(request):
            raise PermissionDenied
        return resource


class ResourceFiltersView(ResourceViewMixin, View):
    """Return the filters available on a resource, with their current values."""

    def get(self, request, uri_key):
        resource = self.get_resource(request, uri_key)
        try:
            values = resource.resolve_filter_values(request)
        except (FilterDecodeError, InvalidFilterValues) as exc:
            logger.warning("Reporting defaults for %s, filter values rejected: %s", uri_key, exc)
            values = resource.default_filter_values(request)
        _qs, applied = resource.apply_filters(request, resource.get_queryset(request), values)
        return JsonResponse(
            {
                "resource": uri_key,
                "filters": resource.serialize_filters(request, applied, fill_defaults=False),
            }
        )


class FilterOptionsView(ResourceViewMixin, View):
    """Return options for a single filter, optionally searched with ``q``."""

    def get(self, request, uri_key, key):
        resource = self.get_resource(request, uri_key)
        flt = resource.get_filter(request, key)
        if flt is None:
            raise Http404(f"Filter '{key}' not found on resource '{uri_key}'.")

        query = request.GET.get("q", "")
        q_lower = query.lower()
        results = [
            option
            for option in flt.resolve_options(request)
            if not query or q_lower in option["label"].lower()
        ]
        return JsonResponse(results, safe=False)


class ResourceIndexView(ResourceViewMixin, View):
    """Return one page of the filtered resource listing."""

    def get(self, request, uri_key):
        resource = self.get_resource(request, uri_key)
        try:
            queryset, applied = resource.filtered_queryset(request)
        except FilterDecodeError as exc:
            logger.warning("Rejected filter payload for %s: %s", uri_key, exc)
            return JsonResponse({"error": str(exc)}, status=400)
        except InvalidFilterValues as exc:
            return JsonResponse({"error": str(exc), "errors": exc.errors}, status=400)

        paginator = Paginator(queryset, resource.get_per_page())
        page = paginator.get_page(request.GET.get("page"))
        return JsonResponse(
            {
                "resource": uri_key,
                "count": paginator.count,
                "page": page.number,
                "num_pages": paginator.num_pages,
                "filters": encode_filters(applied),
                "applied": list(applied),
                "results": [resource.serialize_row(obj) for obj in page.object_list],
            }
        )
