from resource_filters.filters import FieldDateFilter, FieldSelectFilter
from resource_filters.registry import register
from resource_filters.resources import Resource

from .filters import (
    ProductFlagsFilter,
    ProductStatusFilter,
    ReleasedAfterFilter,
    StockLevelFilter,
)
from .models import Category, Product


@register
class ProductResource(Resource):
    model = Product
    fields = ["id", "name", "category", "status", "stock", "released_on"]
    ordering = ("name",)

    def filters(self, request):
        return [
            ProductStatusFilter(),
            ProductFlagsFilter(),
            ReleasedAfterFilter(),
            FieldSelectFilter("category__name", label="Category"),
            FieldDateFilter("released_on", lookup="lte", label="Released before"),
            StockLevelFilter().see_if(lambda request: request.user.is_staff),
        ]


@register
class CategoryResource(Resource):
    model = Category
    ordering = ("name",)
