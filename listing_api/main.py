"""FastAPI Application Entry Point.

Tenant-scoped, paginated list endpoints for the SaaS product family:
- One declarative search spec per entity
- Bearer-token callers, rows scoped to the caller's tenant
- Filtering, free-text search, whitelisted sorting
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from listing_api.core.config import settings
from listing_api.core.db_client import db
from listing_api.core.exceptions import setup_exception_handlers
from listing_api.core.logging import configure_logging, get_logger, setup_request_logging
from listing_api.core.middleware import setup_all_middleware

# Configure logging first
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info(
        "Starting application",
        project_name=settings.PROJECT_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
    )

    startup_tasks = []

    if settings.DATABASE_ENABLED:
        try:
            engine = await db.get_engine_async()
            if engine:
                # Create tables in development mode
                if settings.is_development:
                    await db.create_tables()
                    startup_tasks.append("Database tables created/verified")

                if await db.test_connection():
                    startup_tasks.append("Database connected")
                else:
                    logger.warning("Database connection test failed")
            else:
                logger.warning("Database engine not initialized")
        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))
            if settings.is_production:
                raise

    logger.info("Application startup completed", tasks=startup_tasks)

    yield

    logger.info("Shutting down application")
    try:
        await db.close_all()
    except Exception as e:
        logger.error("Error closing database", error=str(e))
    logger.info("Application shutdown completed")


API_DESCRIPTION = """# Tenant Listing API

Paginated, filtered and sorted list endpoints over tenant-scoped data.

## Authentication
`Authorization: Bearer <access token>` issued by the identity service.
Rows are always restricted to the caller's organization.

## Listing requests
`PATCH /api/v1/<listing>` with an optional JSON body:

```json
{"page": 1, "limit": 20, "filters": {"status": "active", "price": {"from": 1, "to": 5}},
 "sort_field": "created_at", "sort_direction": "desc", "search": "flu"}
```

Responses are `{"pagination": {current, limit, records, pages}, "data": [...]}`.
"""

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=API_DESCRIPTION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json" if settings.DEBUG else None,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Setup middleware (CORS outermost, then trusted hosts, then timing)
setup_all_middleware(app)

# Setup exception handlers AFTER CORS middleware
setup_exception_handlers(app)

# Setup request logging
setup_request_logging(app)

# Include health router (root level endpoints)
from listing_api.api.health import router as health_router  # noqa: E402
from listing_api.api.v1.listings import router as listings_router  # noqa: E402

app.include_router(health_router, tags=["Health"])
app.include_router(listings_router, prefix=settings.API_V1_STR, tags=["Listings"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "listing_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )
