from io import StringIO

from django.core.management import CommandError, call_command
from django.test import RequestFactory, SimpleTestCase, TestCase

from resource_filters import registry
from resource_filters.checks import check_resource_filters
from resource_filters.filters import FieldSelectFilter, SelectFilter
from resource_filters.resources import Resource
from resource_filters.validation import duplicate_keys, verify_filter
from testproject.catalog.filters import ProductStatusFilter
from testproject.catalog.models import Category, Product


class ColumnFilter(SelectFilter):
    """Parameterized by column but missing a key() override."""

    def __init__(self, column):
        super().__init__()
        self.column = column

    def options(self, request):
        return {"Yes": True, "No": False}

    def apply(self, request, queryset, value):
        return queryset.filter(**{self.column: value})


class SliderFilter(ProductStatusFilter):
    component = "slider"


class BadLookupFilter(SelectFilter):
    def options(self, request):
        return {"A": "a"}

    def apply(self, request, queryset, value):
        return queryset.filter(does_not_exist=value)


class ListReturningFilter(SelectFilter):
    def options(self, request):
        return {"A": "a"}

    def apply(self, request, queryset, value):
        return list(queryset)


class ValidationTests(SimpleTestCase):
    def test_duplicate_keys(self):
        filters = [ColumnFilter("is_active"), ColumnFilter("is_featured"), ProductStatusFilter()]
        self.assertEqual(duplicate_keys(filters), [ColumnFilter("x").key()])
        self.assertEqual(
            duplicate_keys([FieldSelectFilter("is_active"), FieldSelectFilter("is_featured")]), []
        )


class VerifyFilterTests(TestCase):
    def setUp(self):
        self.request = RequestFactory().get("/")
        Product.objects.create(name="Widget")

    def test_well_behaved_filter_has_no_problems(self):
        self.assertEqual(
            verify_filter(ProductStatusFilter(), self.request, Product.objects.all()), []
        )

    def test_bad_lookup_reported(self):
        problems = verify_filter(BadLookupFilter(), self.request, Product.objects.all())
        self.assertEqual(len(problems), 1)
        self.assertIn("FieldError", problems[0])

    def test_non_queryset_result_reported(self):
        problems = verify_filter(ListReturningFilter(), self.request, Product.objects.all())
        self.assertEqual(len(problems), 1)
        self.assertIn("returned list", problems[0])


class SystemCheckTests(SimpleTestCase):
    def tearDown(self):
        registry.unregister("checked-products")

    def _register(self, filters):
        class CheckedResource(Resource):
            model = Product
            uri_key = "checked-products"

            def filters(self, request):
                if isinstance(filters, Exception):
                    raise filters
                return list(filters)

        registry.register(CheckedResource)

    def test_catalog_passes(self):
        self.assertEqual(check_resource_filters(), [])

    def test_duplicate_keys_are_errors(self):
        self._register([ColumnFilter("is_active"), ColumnFilter("is_featured")])
        ids = [message.id for message in check_resource_filters()]
        self.assertEqual(ids, ["resource_filters.E001"])

    def test_raising_filters_are_errors(self):
        self._register(RuntimeError("boom"))
        messages = check_resource_filters()
        self.assertEqual([m.id for m in messages], ["resource_filters.E002"])
        self.assertIn("boom", messages[0].msg)

    def test_unknown_component_is_warning(self):
        self._register([SliderFilter()])
        ids = [message.id for message in check_resource_filters()]
        self.assertEqual(ids, ["resource_filters.W001"])


class InspectCommandTests(TestCase):
    def tearDown(self):
        registry.unregister("broken-categories")

    def test_lists_filters(self):
        out = StringIO()
        call_command("inspect_resource_filters", "products", stdout=out)
        output = out.getvalue()
        self.assertIn("products (6 filters)", output)
        self.assertIn("testproject.catalog.filters.ProductStatusFilter  [select]  Status", output)

    def test_verify_succeeds_for_catalog(self):
        Product.objects.create(name="Widget", stock=3)
        out = StringIO()
        call_command("inspect_resource_filters", "--verify", stdout=out)
        self.assertIn("All filters applied cleanly.", out.getvalue())

    def test_verify_fails_on_broken_filter(self):
        class BrokenCategories(Resource):
            model = Category
            uri_key = "broken-categories"

            def filters(self, request):
                return [BadLookupFilter()]

        registry.register(BrokenCategories)
        out = StringIO()
        with self.assertRaises(CommandError):
            call_command("inspect_resource_filters", "broken-categories", "--verify", stdout=out)
        self.assertIn("FieldError", out.getvalue())

    def test_unknown_resource(self):
        with self.assertRaises(CommandError):
            call_command("inspect_resource_filters", "nope")
