"""
Header fan-out for HTTP responses crossing single-value header maps.

This package spreads repeated response headers such as ``Set-Cookie`` across
distinct case spellings of the header name, so that gateways and serverless
runtimes which store headers as ``{name: value}`` keep every value.
"""

from header_fanout.core.normalizer import HeaderNormalizer, fix_multiple_set_cookie
from header_fanout.utils.casing import binary_case, variant

__version__ = "0.1.0"

__all__ = [
    "HeaderNormalizer",
    "__version__",
    "binary_case",
    "fix_multiple_set_cookie",
    "variant",
]
