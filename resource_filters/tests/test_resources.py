from datetime import date

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser, Permission
from django.test import RequestFactory, TestCase

from resource_filters.encoding import encode_filters
from resource_filters.exceptions import DuplicateFilterKey, FilterDecodeError, InvalidFilterValues
from resource_filters.filters import FieldSelectFilter
from resource_filters.resources import Resource
from testproject.catalog.filters import ProductFlagsFilter, ProductStatusFilter, StockLevelFilter
from testproject.catalog.models import Category, Product
from testproject.catalog.resources import ProductResource

STATUS_KEY = ProductStatusFilter().key()
FLAGS_KEY = ProductFlagsFilter().key()
STOCK_KEY = StockLevelFilter().key()
CATEGORY_KEY = FieldSelectFilter("category__name").key()


class ResourceFilterTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.resource = ProductResource()
        self.staff = get_user_model().objects.create_user(username="staff", is_staff=True)
        self.user = get_user_model().objects.create_user(username="plain")
        tools = Category.objects.create(name="Tools")
        Product.objects.create(
            name="Hammer", category=tools, status="published", stock=4,
            released_on=date(2024, 1, 10),
        )
        Product.objects.create(
            name="Saw", category=tools, status="draft", stock=0, is_active=False,
            released_on=date(2024, 3, 1),
        )
        Product.objects.create(
            name="Kite", status="published", stock=50, is_featured=True,
            released_on=date(2024, 6, 1),
        )

    def _request(self, user=None, **params):
        request = self.factory.get("/", params)
        request.user = user or self.staff
        return request

    def _names(self, qs):
        return list(qs.values_list("name", flat=True))

    def test_uri_key_and_label_derive_from_model(self):
        self.assertEqual(ProductResource.get_uri_key(), "products")
        self.assertEqual(ProductResource.get_label(), "Products")

    def test_available_filters_are_bound_and_respect_visibility(self):
        staff_keys = [f.key() for f in self.resource.available_filters(self._request())]
        plain_keys = [f.key() for f in self.resource.available_filters(self._request(self.user))]
        self.assertIn(STOCK_KEY, staff_keys)
        self.assertNotIn(STOCK_KEY, plain_keys)
        self.assertEqual(len(staff_keys), 6)
        for flt in self.resource.available_filters(self._request()):
            self.assertIs(flt.resource, self.resource)

    def test_duplicate_keys_raise(self):
        class DuplicatedResource(Resource):
            model = Product

            def filters(self, request):
                return [FieldSelectFilter("status"), FieldSelectFilter("status", label="Again")]

        with self.assertRaises(DuplicateFilterKey) as ctx:
            DuplicatedResource().available_filters(self._request())
        self.assertEqual(ctx.exception.keys, [FieldSelectFilter("status").key()])

    def test_apply_filters_scopes_queryset(self):
        request = self._request()
        qs, applied = self.resource.apply_filters(
            request,
            self.resource.get_queryset(request),
            {STATUS_KEY: "published", FLAGS_KEY: {"is_featured": True}},
        )
        self.assertEqual(self._names(qs), ["Kite"])
        self.assertEqual(applied[STATUS_KEY], "published")
        self.assertEqual(applied[FLAGS_KEY], {"is_active": False, "is_featured": True})

    def test_empty_and_unknown_values_are_skipped(self):
        request = self._request()
        with self.assertLogs("resource_filters.resources", level="DEBUG") as logs:
            qs, applied = self.resource.apply_filters(
                request,
                self.resource.get_queryset(request),
                {STATUS_KEY: "", FLAGS_KEY: {"is_active": False}, "nope": "x"},
            )
        self.assertEqual(applied, {})
        self.assertEqual(self._names(qs), ["Hammer", "Kite", "Saw"])
        self.assertTrue(any("nope" in line for line in logs.output))

    def test_hidden_filter_is_not_applied(self):
        request = self._request(self.user)
        qs, applied = self.resource.apply_filters(
            request, self.resource.get_queryset(request), {STOCK_KEY: "0"}
        )
        self.assertEqual(applied, {})
        self.assertEqual(qs.count(), 3)

    def test_defaults_apply_without_filter_params(self):
        request = self._request()
        self.assertEqual(self.resource.resolve_filter_values(request), {FLAGS_KEY: ["is_active"]})
        qs, applied = self.resource.filtered_queryset(request)
        self.assertEqual(self._names(qs), ["Hammer", "Kite"])
        self.assertEqual(list(applied), [FLAGS_KEY])

    def test_encoded_payload_replaces_defaults(self):
        payload = encode_filters({CATEGORY_KEY: "Tools"})
        qs, applied = self.resource.filtered_queryset(self._request(filters=payload))
        self.assertEqual(self._names(qs), ["Hammer", "Saw"])
        self.assertEqual(applied, {CATEGORY_KEY: "Tools"})

    def test_empty_payload_clears_defaults(self):
        qs, applied = self.resource.filtered_queryset(self._request(filters=""))
        self.assertEqual(applied, {})
        self.assertEqual(qs.count(), 3)

    def test_bad_payload_raises(self):
        with self.assertRaises(FilterDecodeError):
            self.resource.resolve_filter_values(self._request(filters="%%%"))

    def test_namespaced_params_are_read_through_form(self):
        request = self._request(
            **{f"filters.{STATUS_KEY}": "published", f"filters.{STOCK_KEY}": "10"}
        )
        qs, applied = self.resource.filtered_queryset(request)
        self.assertEqual(self._names(qs), ["Hammer"])
        self.assertEqual(applied, {STATUS_KEY: "published", STOCK_KEY: 10})

    def test_invalid_namespaced_params_raise(self):
        request = self._request(**{f"filters.{STATUS_KEY}": "deleted"})
        with self.assertRaises(InvalidFilterValues) as ctx:
            self.resource.resolve_filter_values(request)
        self.assertIn(STATUS_KEY, ctx.exception.errors)

    def test_serialize_filters_reports_current_values(self):
        request = self._request()
        data = self.resource.serialize_filters(request, {STATUS_KEY: "draft"})
        by_key = {item["key"]: item for item in data}
        self.assertEqual(by_key[STATUS_KEY]["current_value"], "draft")
        self.assertEqual(
            by_key[FLAGS_KEY]["current_value"], {"is_active": True, "is_featured": False}
        )

    def test_serialize_filters_without_defaults_reports_cleared_filters(self):
        request = self._request()
        data = self.resource.serialize_filters(request, {STATUS_KEY: "draft"}, fill_defaults=False)
        by_key = {item["key"]: item for item in data}
        self.assertEqual(by_key[STATUS_KEY]["current_value"], "draft")
        self.assertEqual(
            by_key[FLAGS_KEY]["current_value"], {"is_active": False, "is_featured": False}
        )
        self.assertEqual(
            by_key[FLAGS_KEY]["default"], {"is_active": True, "is_featured": False}
        )

    def test_serialize_row_uses_declared_fields(self):
        product = Product.objects.get(name="Hammer")
        row = self.resource.serialize_row(product)
        self.assertEqual(
            row,
            {
                "id": product.pk,
                "name": "Hammer",
                "category": product.category_id,
                "status": "published",
                "stock": 4,
                "released_on": date(2024, 1, 10),
            },
        )


class ResourceAuthorizationTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.resource = ProductResource()

    def _request(self, user):
        request = self.factory.get("/")
        request.user = user
        return request

    def test_anonymous_users_are_denied(self):
        self.assertFalse(self.resource.authorized_to_view(self._request(AnonymousUser())))

    def test_staff_bypass(self):
        staff = get_user_model().objects.create_user(username="s", is_staff=True)
        self.assertTrue(self.resource.authorized_to_view(self._request(staff)))
        with self.settings(RESOURCE_FILTERS_STAFF_BYPASS=False):
            self.assertFalse(self.resource.authorized_to_view(self._request(staff)))

    def test_view_permission_grants_access(self):
        user = get_user_model().objects.create_user(username="viewer")
        self.assertFalse(self.resource.authorized_to_view(self._request(user)))
        user.user_permissions.add(Permission.objects.get(codename="view_product"))
        user = get_user_model().objects.get(pk=user.pk)
        self.assertTrue(self.resource.authorized_to_view(self._request(user)))
