import asyncio
import logging
import logging.config

import structlog

from listing_api.core.config import settings

HEALTH_ENDPOINTS = ("/health", "/ready", "/live")


def configure_logging() -> None:
    """Configure structlog and stdlib logging from settings."""

    json_output = settings.LOG_FORMAT == "json"

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if json_output
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if json_output:
        formatter_class = "pythonjsonlogger.jsonlogger.JsonFormatter"
        format_string = "%(asctime)s %(name)s %(levelname)s %(message)s"
    else:
        formatter_class = "logging.Formatter"
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {
                "()": "listing_api.core.logging.HealthCheckFilter",
            },
        },
        "formatters": {
            "default": {
                "class": formatter_class,
                "format": format_string,
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": {
            "": {
                "level": settings.LOG_LEVEL,
                "handlers": ["default"],
                "propagate": False,
            },
            "uvicorn.error": {
                "level": "INFO",
                "handlers": ["default"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["access"],
                "propagate": False,
            },
            # SQL echo goes through this logger when DB_ECHO is on
            "sqlalchemy.engine": {
                "level": "INFO" if settings.DB_ECHO else "WARNING",
                "handlers": ["default"],
                "propagate": False,
            },
            "aiosqlite": {
                "level": "WARNING",
                "handlers": ["default"],
                "propagate": False,
            },
            "httpx": {
                "level": "WARNING",
                "handlers": ["default"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    if not settings.DEBUG:
        logging.getLogger("asyncio").setLevel(logging.WARNING)


class RequestLoggingMiddleware:
    """ASGI middleware that logs requests and responses."""

    def __init__(self, app):
        self.app = app
        self.logger = structlog.get_logger("request")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        is_health_check = scope["path"] in HEALTH_ENDPOINTS

        request_info = {
            "method": scope["method"],
            "path": scope["path"],
            "query_string": scope.get("query_string", b"").decode(),
            "headers": {
                key.decode(): value.decode()
                for key, value in scope.get("headers", [])
                if key.lower()
                in [b"user-agent", b"content-type", b"authorization", b"content-length"]
            },
        }

        # Never log bearer tokens
        if "authorization" in request_info["headers"]:
            request_info["headers"]["authorization"] = "***"

        if not is_health_check:
            self.logger.info("Request started", **request_info)

        start_time = asyncio.get_running_loop().time()

        async def send_wrapper(message):
            if message["type"] == "http.response.start" and not is_health_check:
                self.logger.info(
                    "Response started",
                    method=request_info["method"],
                    path=request_info["path"],
                    status_code=message["status"],
                )

            elif message["type"] == "http.response.body" and not message.get(
                "more_body", False
            ):
                duration = asyncio.get_running_loop().time() - start_time
                if not is_health_check:
                    self.logger.info(
                        "Request completed",
                        method=request_info["method"],
                        path=request_info["path"],
                        duration=round(duration, 4),
                    )

            await send(message)

        await self.app(scope, receive, send_wrapper)


class HealthCheckFilter(logging.Filter):
    """Filter out health check requests from uvicorn access logs."""

    def filter(self, record):
        message = record.getMessage()
        return not any(endpoint in message for endpoint in HEALTH_ENDPOINTS)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def setup_request_logging(app):
    """Setup request logging middleware."""
    if settings.DEBUG:
        app.add_middleware(RequestLoggingMiddleware)


# Application-specific loggers
def get_db_logger() -> structlog.stdlib.BoundLogger:
    """Get database logger."""
    return get_logger("database")


def get_auth_logger() -> structlog.stdlib.BoundLogger:
    """Get authentication logger."""
    return get_logger("auth")


def get_service_logger(service_name: str) -> structlog.stdlib.BoundLogger:
    """Get service-specific logger."""
    return get_logger(f"service.{service_name}")
