"""Case-variant generation for HTTP header names.

Header field names compare case-insensitively, so every case spelling of a
name is the same header to a conforming reader. This module enumerates those
spellings deterministically: the bits of an integer index select the case of
each letter in turn.

Only ASCII letters take part. Header names are RFC 7230 tokens, and ASCII
letters are the only token characters with a case. Digits and punctuation
are copied as-is and do not consume a bit.

Examples:
    >>> binary_case("set-cookie", 0)
    'set-cookie'
    >>> binary_case("set-cookie", 1)
    'Set-cookie'
    >>> binary_case("set-cookie", 2)
    'sEt-cookie'
    >>> variant_capacity("set-cookie")
    512
"""

from collections.abc import Iterator

_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


def alpha_count(name: str) -> int:
    """Return the number of case-bearing letters in ``name``."""
    return sum(1 for char in name if char in _ASCII_LETTERS)


def variant_capacity(name: str) -> int:
    """Return how many distinct case variants ``name`` has.

    A name with ``k`` letters has ``2 ** k`` variants. A name without letters
    has exactly one (itself).

    Examples:
        >>> variant_capacity("x-id")
        8
        >>> variant_capacity("1-2")
        1
    """
    return 1 << alpha_count(name)


def binary_case(name: str, index: int) -> str:
    """Return the case variant of ``name`` selected by ``index``.

    Letters are visited left to right. The n-th letter is uppercased when
    bit n of ``index`` is set (bit 0 is the least significant) and lowercased
    otherwise. Indices past the capacity wrap around, so the function never
    fails.

    Args:
        name: Header name to respell.
        index: Variant index. Only the low ``alpha_count(name)`` bits are used.

    Returns:
        A string equal to ``name`` when compared case-insensitively. Index 0
        is always the fully lowercase spelling.

    Examples:
        >>> binary_case("Set-Cookie", 0)
        'set-cookie'
        >>> binary_case("set-cookie", 3)
        'SEt-cookie'
        >>> binary_case("set-cookie", 512)
        'set-cookie'
    """
    index &= variant_capacity(name) - 1

    chars: list[str] = []
    bit = 0
    for char in name:
        if char not in _ASCII_LETTERS:
            chars.append(char)
            continue

        if index >> bit & 1:
            chars.append(char.upper())
        else:
            chars.append(char.lower())
        bit += 1

    return "".join(chars)


# Shorter alias
variant = binary_case


def iter_variants(name: str, count: int) -> Iterator[str]:
    """Yield the first ``count`` variants of ``name`` in index order.

    Past ``variant_capacity(name)`` the sequence repeats.
    """
    for index in range(count):
        yield binary_case(name, index)
