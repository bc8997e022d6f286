from .base import COMPONENTS, Filter, humanize_class_name, normalize_options
from .boolean import BooleanFilter
from .date import DateFilter
from .fields import FieldBooleanFilter, FieldDateFilter, FieldSelectFilter
from .select import SelectFilter

__all__ = [
    "COMPONENTS",
    "Filter",
    "SelectFilter",
    "BooleanFilter",
    "DateFilter",
    "FieldSelectFilter",
    "FieldBooleanFilter",
    "FieldDateFilter",
    "humanize_class_name",
    "normalize_options",
]
