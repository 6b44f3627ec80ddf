"""Demo FastAPI application with header fan-out middleware.

This application sets several cookies per response and shows how they leave
the app under distinct spellings of Set-Cookie.
Run with: python demo_app.py
Then try: curl -i http://localhost:8000/api/login
"""

from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI, Response
from pydantic import BaseModel

from header_fanout.adapters.asgi import ASGIHeaderFanoutMiddleware
from header_fanout.adapters.proxy import build_proxy_response
from header_fanout.config import FanoutConfig
from header_fanout.observability.logging import configure_from_config
from header_fanout.utils.headers import HeaderCollection

config = FanoutConfig.from_env()
configure_from_config(config)

app = FastAPI(
    title="Header Fan-out Demo",
    description="Demo API emitting multiple Set-Cookie headers",
    version="0.1.0",
)

app.add_middleware(ASGIHeaderFanoutMiddleware, config=config)


class LoginRequest(BaseModel):
    username: str
    theme: str = "light"


@app.get("/")
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "Header Fan-out Demo",
        "version": "0.1.0",
        "endpoints": {
            "GET /api/login": "Sets three cookies",
            "POST /api/login": "Sets session cookies for a user",
            "GET /api/proxy-preview": "Shows the serverless proxy payload for three cookies",
        },
    }


@app.get("/api/login")
async def login_defaults(response: Response):
    """Set the three classic cookies."""
    response.set_cookie("first", "tj")
    response.set_cookie("last", "holowaychuk")
    response.set_cookie("pet", "tobi")
    return {"status": "ok", "cookies": 3}


@app.post("/api/login")
async def login(payload: LoginRequest, response: Response):
    """Set session, user and theme cookies."""
    response.set_cookie("session", f"sess_{int(datetime.now(UTC).timestamp())}", httponly=True)
    response.set_cookie("user", payload.username)
    response.set_cookie("theme", payload.theme)
    return {"status": "logged_in", "username": payload.username}


@app.get("/api/proxy-preview")
async def proxy_preview():
    """Show what a serverless proxy integration would receive."""
    headers: HeaderCollection = {
        "Content-Type": ["application/json"],
        "Set-Cookie": ["first=tj", "last=holowaychuk", "pet=tobi"],
    }
    return build_proxy_response(200, headers, body=b'{"status": "ok"}')


if __name__ == "__main__":
    print("=" * 60)
    print("Header Fan-out Demo Server")
    print("=" * 60)
    print("\nStarting server at http://localhost:8000")
    print("\nTry these commands:")
    print("  curl -i http://localhost:8000/api/login")
    print("  curl http://localhost:8000/api/proxy-preview")
    print("\nPress Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
