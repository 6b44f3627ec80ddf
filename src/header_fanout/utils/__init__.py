"""Utility modules for header fan-out."""

from .casing import alpha_count, binary_case, iter_variants, variant, variant_capacity
from .headers import (
    HeaderCollection,
    count_values,
    flatten,
    from_pairs,
    get_header_values,
    to_pairs,
)

__all__ = [
    "HeaderCollection",
    "alpha_count",
    "binary_case",
    "count_values",
    "flatten",
    "from_pairs",
    "get_header_values",
    "iter_variants",
    "to_pairs",
    "variant",
    "variant_capacity",
]
