"""ASGI middleware adapter for FastAPI and Starlette applications.

The middleware runs the header normalizer over every response before it
leaves the application. Put it outermost so that the fanned-out headers are
what the server (or the runtime wrapping it) receives.

The middleware:
1. Groups the response's raw header pairs into a header collection
2. Fans out the target header through HeaderNormalizer
3. Writes the collection back as raw pairs, one per value

Examples:
    FastAPI integration::

        from fastapi import FastAPI
        from header_fanout.adapters.asgi import ASGIHeaderFanoutMiddleware
        from header_fanout.config import FanoutConfig

        app = FastAPI()
        app.add_middleware(ASGIHeaderFanoutMiddleware, config=FanoutConfig())

    Starlette integration::

        from starlette.applications import Starlette
        from starlette.middleware import Middleware

        middleware = [Middleware(ASGIHeaderFanoutMiddleware)]
        app = Starlette(middleware=middleware)
"""

from collections.abc import Awaitable, Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from header_fanout.config import FanoutConfig
from header_fanout.core.normalizer import HeaderNormalizer
from header_fanout.exceptions import HeaderFanoutError
from header_fanout.observability.logging import get_logger
from header_fanout.utils.headers import from_pairs, to_pairs

logger = get_logger(__name__)


class ASGIHeaderFanoutMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that fans out a multi-valued response header.

    Attributes:
        config: Configuration object
        normalizer: Normalizer applied to each response
    """

    def __init__(
        self,
        app: Any,
        config: FanoutConfig | None = None,
        normalizer: HeaderNormalizer | None = None,
    ) -> None:
        """Initialize the ASGI middleware.

        Args:
            app: The ASGI application
            config: Configuration object (uses defaults if not provided)
            normalizer: Normalizer to use (built from config if not provided)
        """
        super().__init__(app)
        self.config = config or FanoutConfig()
        self.normalizer = normalizer or HeaderNormalizer.from_config(self.config)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Call the application and rewrite its response headers.

        Args:
            request: The Starlette request object
            call_next: Function to call the next middleware/handler

        Returns:
            The application's response with the target header fanned out,
            or a 500 response if the normalizer rejects it
        """
        response = await call_next(request)

        if not self.config.enabled:
            return response

        try:
            response.raw_headers = self._fix_raw_headers(response.raw_headers)
        except HeaderFanoutError as e:
            logger.error(
                "headers.fanout.response_rejected",
                path=request.url.path,
                error=e.message,
            )
            return PlainTextResponse(f"Header fan-out error: {e.message}", status_code=500)

        return response

    def _fix_raw_headers(self, raw_headers: list[tuple[bytes, bytes]]) -> list[tuple[bytes, bytes]]:
        """Run the normalizer over raw ASGI header pairs.

        Args:
            raw_headers: Latin-1 encoded ``(name, value)`` pairs

        Returns:
            New list of latin-1 encoded pairs, one per header value
        """
        headers = from_pairs(raw_headers)
        self.normalizer.fix(headers)
        return [
            (name.encode("latin-1"), value.encode("latin-1")) for name, value in to_pairs(headers)
        ]
