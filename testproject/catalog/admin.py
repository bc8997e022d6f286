from django.contrib import admin

from resource_filters.admin import ResourceAdminMixin

from .models import Category, Product
from .resources import ProductResource


@admin.register(Product)
class ProductAdmin(ResourceAdminMixin, admin.ModelAdmin):
    resource_class = ProductResource
    list_display = ("name", "category", "status", "stock", "released_on")
    search_fields = ("name",)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name",)
