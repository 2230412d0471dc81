"""Утилиты для генератора"""

from .naming import (
    identifier,
    property_key,
    python_identifier,
    singularize,
    split_words,
    to_camel_case,
    to_kebab_case,
    to_label,
    to_pascal_case,
    type_name,
)

__all__ = [
    "identifier",
    "property_key",
    "python_identifier",
    "singularize",
    "split_words",
    "to_camel_case",
    "to_kebab_case",
    "to_label",
    "to_pascal_case",
    "type_name",
]
