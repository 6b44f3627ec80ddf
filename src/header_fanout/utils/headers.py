"""Helpers for working with multi-valued header collections.

A header collection is a plain ``dict`` mapping a header name, with its case
preserved exactly, to the ordered list of values stored under that name.
Keys that differ only in case are distinct entries.

This module provides functions for:
- Building collections from raw ``(name, value)`` pairs and back
- Case-insensitive lookups across differently cased keys
- Flattening to the single-value map a collapsing layer would produce
"""

from collections.abc import Iterable

HeaderCollection = dict[str, list[str]]


def _to_str(value: str | bytes) -> str:
    # HTTP header bytes are latin-1 on the wire, which is what ASGI hands us
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return value


def from_pairs(pairs: Iterable[tuple[str | bytes, str | bytes]]) -> HeaderCollection:
    """Group raw header pairs into a collection.

    Pairs sharing an exact name land under one key, in the order seen.
    Names that differ only in case stay separate.

    Args:
        pairs: ``(name, value)`` pairs, as ``str`` or latin-1 ``bytes``

    Returns:
        Header collection in first-seen key order

    Example:
        >>> from_pairs([("Set-Cookie", "a=1"), ("Vary", "Accept"), ("Set-Cookie", "b=2")])
        {'Set-Cookie': ['a=1', 'b=2'], 'Vary': ['Accept']}
    """
    headers: HeaderCollection = {}
    for name, value in pairs:
        headers.setdefault(_to_str(name), []).append(_to_str(value))
    return headers


def to_pairs(headers: HeaderCollection) -> list[tuple[str, str]]:
    """Expand a collection into one ``(name, value)`` pair per value.

    Example:
        >>> to_pairs({"set-cookie": ["a=1"], "Set-cookie": ["b=2"]})
        [('set-cookie', 'a=1'), ('Set-cookie', 'b=2')]
    """
    return [(name, value) for name, values in headers.items() for value in values]


def flatten(headers: HeaderCollection) -> dict[str, str]:
    """Collapse a collection to one value per exact key.

    Keeps the first value of each key and drops the rest, which is what a
    single-value header map (gateway, serverless runtime) ends up holding.
    Empty entries are dropped.

    Example:
        >>> flatten({"Set-Cookie": ["a=1", "b=2"], "Vary": ["Accept"]})
        {'Set-Cookie': 'a=1', 'Vary': 'Accept'}
    """
    return {name: values[0] for name, values in headers.items() if values}


def get_header_values(headers: HeaderCollection, header_name: str) -> list[str]:
    """Get every value stored under any spelling of ``header_name``.

    Values are returned in key insertion order, then stored order.

    Example:
        >>> get_header_values({"Set-Cookie": ["a=1"], "set-cookie": ["b=2"]}, "SET-COOKIE")
        ['a=1', 'b=2']
    """
    header_name_lower = header_name.lower()

    values: list[str] = []
    for key, stored in headers.items():
        if key.lower() == header_name_lower:
            values.extend(stored)

    return values


def count_values(headers: HeaderCollection, header_name: str) -> int:
    """Count the values stored under any spelling of ``header_name``."""
    return len(get_header_values(headers, header_name))
