"""Framework adapters for header fan-out.

- asgi.py: ASGI middleware for FastAPI, Starlette, etc.
- proxy.py: response payloads for serverless proxy integrations
"""

from header_fanout.adapters.asgi import ASGIHeaderFanoutMiddleware
from header_fanout.adapters.proxy import build_proxy_response

__all__ = ["ASGIHeaderFanoutMiddleware", "build_proxy_response"]
