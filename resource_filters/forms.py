"""Form rendering and validation for a resource's filters."""

from __future__ import annotations

from typing import Any, Sequence

from crispy_forms.bootstrap import FormActions
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Field, Layout, Submit
from django import forms

from resource_filters.conf import settings
from resource_filters.filters import BooleanFilter, DateFilter, Filter


class FilterForm(forms.Form):
    """One field per filter, named ``<namespace><filter key>``.

    The form is submitted with GET, so the same query-string names are
    read back when the listing is requested.
    """

    def __init__(
        self,
        filters: Sequence[Filter],
        request,
        *args: Any,
        namespace: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.filter_objects = {f.key(): f for f in filters}
        self.request = request
        self.namespace = (
            settings.RESOURCE_FILTERS_NAMESPACE if namespace is None else namespace
        )
        super().__init__(*args, **kwargs)

        for key, flt in self.filter_objects.items():
            self.fields[key] = self._build_field(flt)

        # === Crispy setup ===
        self.helper = FormHelper()
        self.helper.form_method = "get"
        self.helper.disable_csrf = True
        self.helper.layout = Layout(
            *[Field(key) for key in self.fields],
            FormActions(
                Submit("apply_filters", "Apply filters", css_class="btn btn-primary"),
            ),
        )

    def add_prefix(self, field_name: str) -> str:
        return f"{self.namespace}{field_name}"

    def _build_field(self, flt: Filter) -> forms.Field:
        label = flt.name()
        if isinstance(flt, BooleanFilter):
            current = flt.current_value(self.request)
            return forms.MultipleChoiceField(
                label=label,
                required=False,
                widget=forms.CheckboxSelectMultiple,
                choices=[(str(o["value"]), o["label"]) for o in flt.resolve_options(self.request)],
                initial=[value for value, on in current.items() if on],
            )
        if isinstance(flt, DateFilter):
            return forms.CharField(
                label=label,
                required=False,
                widget=forms.DateInput(attrs={"type": "date"}),
                initial=flt.current_value(self.request),
            )
        default = flt.default()
        return forms.ChoiceField(
            label=label,
            required=False,
            choices=[("", "---------")]
            + [(str(o["value"]), o["label"]) for o in flt.resolve_options(self.request)],
            initial=None if default is None else str(default),
        )

    def has_filter_data(self) -> bool:
        if not self.is_bound:
            return False
        return any(self.add_prefix(key) in self.data for key in self.fields)

    def clean(self):
        cleaned = super().clean()
        for key, flt in self.filter_objects.items():
            raw = cleaned.get(key)
            if not isinstance(flt, DateFilter) or flt.is_empty(raw):
                continue
            if flt.clean(self.request, raw) is None:
                self.add_error(key, "Enter a valid date or date token.")
        return cleaned

    def filter_values(self) -> dict[str, Any]:
        """Return ``{filter key: value}`` for every field the user filled in."""
        if not self.is_valid():
            raise ValueError("Cannot read filter values from an invalid FilterForm")
        return {
            key: value
            for key, value in self.cleaned_data.items()
            if key in self.filter_objects and value not in (None, "", [])
        }
