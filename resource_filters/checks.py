from django.contrib.auth.models import AnonymousUser
from django.core.checks import Error, Warning, register
from django.http import HttpRequest

from resource_filters.filters import COMPONENTS
from resource_filters.registry import get_registry
from resource_filters.validation import duplicate_keys


def _anonymous_request() -> HttpRequest:
    request = HttpRequest()
    request.user = AnonymousUser()
    return request


@register("resource_filters")
def check_resource_filters(app_configs=None, **kwargs):
    errors = []
    request = _anonymous_request()
    for uri_key, resource in get_registry().items():
        try:
            declared = list(resource.filters(request) or [])
        except Exception as exc:
            errors.append(
                Error(
                    f"filters() of resource '{uri_key}' raised {exc.__class__.__name__}: {exc}",
                    obj=type(resource),
                    id="resource_filters.E002",
                )
            )
            continue

        for key in duplicate_keys(declared):
            errors.append(
                Error(
                    f"Resource '{uri_key}' registers more than one filter with key '{key}'.",
                    hint="Override key() on filters that are parameterized at construction time.",
                    obj=type(resource),
                    id="resource_filters.E001",
                )
            )

        for flt in declared:
            if flt.component not in COMPONENTS:
                errors.append(
                    Warning(
                        f"Filter '{flt.key()}' uses unknown component '{flt.component}'.",
                        hint=f"Use one of: {', '.join(sorted(COMPONENTS))}.",
                        obj=type(flt),
                        id="resource_filters.W001",
                    )
                )
    return errors
