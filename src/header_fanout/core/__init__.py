"""Core header fan-out logic.

This package contains the framework-agnostic normalizer that spreads a
multi-valued header across distinct case spellings of its name. Adapters in
``header_fanout.adapters`` wrap it for ASGI apps and serverless proxies.
"""

from header_fanout.core.normalizer import HeaderNormalizer, fix_multiple_set_cookie

__all__ = ["HeaderNormalizer", "fix_multiple_set_cookie"]
