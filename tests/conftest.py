"""
Pytest configuration and shared fixtures for header_fanout tests.
"""

import pytest

from header_fanout.core.normalizer import HeaderNormalizer
from header_fanout.utils.headers import HeaderCollection


@pytest.fixture
def cookie_values() -> list[str]:
    """Provide three cookies in the order they were set."""
    return ["first=tj", "last=holowaychuk", "pet=tobi"]


@pytest.fixture
def cookie_headers(cookie_values: list[str]) -> HeaderCollection:
    """Provide a collection with one multi-valued Set-Cookie entry."""
    return {
        "Content-Type": ["text/html"],
        "Set-Cookie": list(cookie_values),
        "Cache-Control": ["no-cache"],
    }


@pytest.fixture
def normalizer() -> HeaderNormalizer:
    """Provide a default Set-Cookie normalizer."""
    return HeaderNormalizer()
