from django.urls import path

from resource_filters.views import FilterOptionsView, ResourceFiltersView, ResourceIndexView

app_name = "resource_filters"

urlpatterns = [
    path("<slug:uri_key>/", ResourceIndexView.as_view(), name="resource_index"),
    path("<slug:uri_key>/filters/", ResourceFiltersView.as_view(), name="resource_filters"),
    path(
        "<slug:uri_key>/filters/<str:key>/options/",
        FilterOptionsView.as_view(),
        name="filter_options",
    ),
]
