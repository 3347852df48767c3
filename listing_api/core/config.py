import json
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # FastAPI Configuration
    PROJECT_NAME: str = "Tenant Listing API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # JWT Configuration (verification only, tokens are issued elsewhere)
    JWT_SECRET_KEY: str = Field(
        ...,
        description="Secret key used to verify JWT access tokens (min 32 chars)",
    )
    JWT_ALGORITHM: str = "HS256"

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate JWT secret key has minimum length for security."""
        if len(v) < 32:
            raise ValueError(
                "JWT_SECRET_KEY must be at least 32 characters long for security. "
                'Generate a secure key with: python -c "import secrets; print(secrets.token_hex(32))"'
            )
        return v

    ENABLE_AUTH_AUDIT_LOGGING: bool = Field(
        default=True, description="Log every bearer token verification"
    )

    # PostgreSQL Configuration
    DATABASE_ENABLED: bool = True
    DATABASE_URL: Optional[str] = None  # Full connection URL (for local dev)
    DATABASE_NAME: str = "tenant_listing"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432

    # Connection Pool Settings
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_ECHO: bool = False  # SQL query logging

    # List query engine
    SEARCH_DEFAULT_LIMIT: int = Field(
        default=20, ge=1, description="Page size used when an entity declares none"
    )
    SEARCH_MAX_LIMIT: int = Field(
        default=100, ge=1, description="Upper bound for page size when an entity declares none"
    )
    SEARCH_CONCURRENT_READS: bool = Field(
        default=True, description="Issue the count and page reads concurrently"
    )
    SEARCH_MAX_TERM_LENGTH: int = Field(
        default=200, ge=1, description="Maximum length of the free-text search term"
    )
    SEARCH_READ_TIMEOUT: float = Field(
        default=30.0, gt=0, description="Seconds allowed for each backing-store read"
    )

    # CORS Settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Additional CORS Origins (JSON array or comma-separated string)
    ADDITIONAL_CORS_ORIGINS: Optional[str] = None

    # Production CORS Origins (JSON array or comma-separated string)
    PRODUCTION_CORS_ORIGINS: Optional[str] = None

    # Frontend domain (for automatic CORS origin and trusted host detection)
    FRONTEND_DOMAIN: Optional[str] = None

    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]
    CORS_HEADERS: List[str] = [
        "Authorization",
        "Content-Type",
        "X-Requested-With",
        "Accept",
        "Origin",
        "Cache-Control",
    ]

    ALLOWED_HOST_PATTERNS: List[str] = ["localhost", "127.0.0.1"]

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @staticmethod
    def _parse_origin_list(raw: str) -> List[str]:
        """Parse a JSON array or a comma/semicolon separated list of origins."""
        try:
            if raw.startswith("["):
                return list(json.loads(raw))
            separator = ";" if ";" in raw else ","
            return [origin.strip() for origin in raw.split(separator)]
        except (json.JSONDecodeError, ValueError):
            return [raw]

    @property
    def resolved_cors_origins(self) -> List[str]:
        """Get CORS origins based on environment and configuration."""
        # In production, do NOT start with localhost defaults
        origins = [] if self.is_production else list(self.CORS_ORIGINS)

        if self.ADDITIONAL_CORS_ORIGINS:
            origins.extend(self._parse_origin_list(self.ADDITIONAL_CORS_ORIGINS))

        if self.is_production:
            if self.PRODUCTION_CORS_ORIGINS:
                origins.extend(self._parse_origin_list(self.PRODUCTION_CORS_ORIGINS))

            if self.FRONTEND_DOMAIN:
                domain = self.FRONTEND_DOMAIN.rstrip("/")
                origins.extend(
                    [
                        f"https://{domain}",
                        f"https://www.{domain}",
                        f"https://app.{domain}",
                    ]
                )

        # Remove duplicates while preserving order
        seen = set()
        unique_origins = []
        for origin in origins:
            if origin and origin not in seen:
                seen.add(origin)
                unique_origins.append(origin)

        return unique_origins

    @property
    def is_development(self) -> bool:
        """Check if the application is running in development mode."""
        return self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production mode."""
        return self.ENVIRONMENT.lower() in ["production", "prod"]

    @property
    def database_url(self) -> str:
        """Resolve the SQLAlchemy async URL from DATABASE_URL or its parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )


# Global settings instance
settings = Settings()
