"""HTTP middleware: CORS, trusted hosts in production, response timing."""

import time
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette.datastructures import MutableHeaders

from listing_api.core.config import settings
from listing_api.core.logging import get_logger

logger = get_logger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


class ProcessTimeMiddleware:
    """ASGI middleware stamping each HTTP response with its handling time."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()

        async def send_with_timing(message):
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers[PROCESS_TIME_HEADER] = f"{time.perf_counter() - started:.4f}"
            await send(message)

        await self.app(scope, receive, send_with_timing)


def trusted_hosts() -> List[str]:
    """Host patterns accepted in production, plus the frontend domain if set."""
    hosts = list(settings.ALLOWED_HOST_PATTERNS)
    if settings.FRONTEND_DOMAIN:
        domain = settings.FRONTEND_DOMAIN.rstrip("/")
        hosts.extend([domain, f"*.{domain}"])
    return hosts


def setup_all_middleware(app: FastAPI) -> None:
    """Register middleware on the app.

    Starlette runs the last-added middleware first, so CORS is added last
    and wraps everything, including preflight requests.
    """
    app.add_middleware(ProcessTimeMiddleware)

    if settings.is_production:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts())

    origins = settings.resolved_cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
        expose_headers=[PROCESS_TIME_HEADER],
    )

    logger.info(
        "Middleware configured",
        environment=settings.ENVIRONMENT,
        cors_origins=origins,
        trusted_hosts=trusted_hosts() if settings.is_production else None,
    )
