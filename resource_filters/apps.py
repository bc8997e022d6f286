from django.apps import AppConfig

from resource_filters.conf import settings


class ResourceFiltersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "resource_filters"
    verbose_name = "Resource filters"

    def ready(self):
        from .registry import load_resources

        load_resources(getattr(settings, "RESOURCE_FILTERS_RESOURCES", []))

        # Register system checks.
        from . import checks  # noqa: F401
