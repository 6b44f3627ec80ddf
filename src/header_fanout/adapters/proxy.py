"""Serverless proxy integration responses.

API gateways that front serverless functions take the response as a JSON
document whose ``headers`` field is a single-value map. That map is exactly
the kind of collapsing layer that loses repeated ``Set-Cookie`` lines, so
the builder fans the target header out before flattening.

Examples:
    Building a proxy response::

        from header_fanout.adapters.proxy import build_proxy_response

        payload = build_proxy_response(
            status=200,
            headers={
                "Content-Type": ["application/json"],
                "Set-Cookie": ["session=abc", "theme=dark"],
            },
            body=b'{"ok": true}',
        )
        # payload["headers"] == {
        #     "Content-Type": "application/json",
        #     "set-cookie": "session=abc",
        #     "Set-cookie": "theme=dark",
        # }
"""

import base64
from typing import Any

from header_fanout.core.normalizer import DEFAULT_TARGET_HEADER, HeaderNormalizer
from header_fanout.utils.headers import HeaderCollection


def build_proxy_response(
    status: int,
    headers: HeaderCollection,
    body: bytes | str = b"",
    normalizer: HeaderNormalizer | None = None,
) -> dict[str, Any]:
    """Build a proxy integration response with single-value headers.

    The caller's ``headers`` are copied, not modified. ``Set-Cookie`` is
    always fanned out, even when ``normalizer`` targets another header,
    because cookie values cannot be comma-joined. After fan-out, any other
    header still holding several values is comma-joined, which is valid for
    list-based headers such as ``Vary`` or ``Cache-Control``.

    Args:
        status: HTTP status code
        headers: Response header collection
        body: Response body; bytes that are not valid UTF-8 are base64-encoded
        normalizer: Normalizer to apply (a default Set-Cookie one if omitted)

    Returns:
        Dict with ``statusCode``, ``headers``, ``body`` and ``isBase64Encoded``

    Raises:
        CapacityExceededError: If the normalizer uses the "raise" policy and
            the target header (or Set-Cookie) has too many values
    """
    normalizer = normalizer or HeaderNormalizer()

    collection = {name: list(values) for name, values in headers.items()}
    normalizer.fix(collection)
    if normalizer.target != DEFAULT_TARGET_HEADER:
        HeaderNormalizer(overflow_policy=normalizer.overflow_policy).fix(collection)

    single_valued = {name: ", ".join(values) for name, values in collection.items() if values}

    encoded_body, is_base64 = _encode_body(body)

    return {
        "statusCode": status,
        "headers": single_valued,
        "body": encoded_body,
        "isBase64Encoded": is_base64,
    }


def _encode_body(body: bytes | str) -> tuple[str, bool]:
    if isinstance(body, str):
        return body, False

    try:
        return body.decode("utf-8"), False
    except UnicodeDecodeError:
        return base64.b64encode(body).decode("ascii"), True
