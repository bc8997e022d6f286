from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.test import RequestFactory

from resource_filters.registry import get_registry
from resource_filters.validation import verify_filter


class Command(BaseCommand):
    help = "List the filters of registered resources and optionally verify their apply() contract."

    def add_arguments(self, parser):
        parser.add_argument("uri_keys", nargs="*", help="Resources to inspect (default: all).")
        parser.add_argument(
            "--verify",
            action="store_true",
            help="Apply every filter with each of its option values against the base queryset.",
        )

    def _request(self):
        # Filters see a superuser so visibility rules do not hide anything.
        request = RequestFactory().get("/")
        request.user = get_user_model()(is_superuser=True, is_staff=True)
        return request

    def handle(self, *args, **options):
        registry = get_registry()
        uri_keys = options["uri_keys"] or sorted(registry)
        missing = [key for key in uri_keys if key not in registry]
        if missing:
            raise CommandError(f"Unknown resources: {', '.join(missing)}")

        request = self._request()
        problems: list[str] = []

        for uri_key in uri_keys:
            resource = registry[uri_key]
            filters = resource.available_filters(request)
            self.stdout.write(self.style.MIGRATE_HEADING(f"{uri_key} ({len(filters)} filters)"))
            for flt in filters:
                self.stdout.write(f"  {flt.key()}  [{flt.component}]  {flt.name()}")
                if options["verify"]:
                    found = verify_filter(flt, request, resource.get_queryset(request))
                    for problem in found:
                        self.stdout.write(self.style.ERROR(f"    {problem}"))
                    problems.extend(found)

        if problems:
            raise CommandError(f"{len(problems)} filter problem(s) found.")
        if options["verify"]:
            self.stdout.write(self.style.SUCCESS("All filters applied cleanly."))
