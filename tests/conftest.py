"""
Pytest configuration and fixtures for the test suite.

This module provides shared fixtures for unit and integration tests.
"""

import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, Dict, List
from unittest.mock import AsyncMock, Mock

import jwt
import pytest
import pytest_asyncio
from faker import Faker
from httpx import ASGITransport, AsyncClient

# Set test environment before importing app modules
_test_db_dir = tempfile.mkdtemp(prefix="listing-api-tests-")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")
os.environ.setdefault(
    "DATABASE_URL", f"sqlite+aiosqlite:///{Path(_test_db_dir) / 'listing_test.db'}"
)
os.environ.setdefault("ENABLE_AUTH_AUDIT_LOGGING", "false")

fake = Faker()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (API)")
    config.addinivalue_line("markers", "auth: Authentication tests")
    config.addinivalue_line("markers", "db: Database tests")
    config.addinivalue_line("markers", "api: API endpoint tests")


# =============================================================================
# Test Data Generators
# =============================================================================

@pytest.fixture
def tenant_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def other_tenant_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def user_data(tenant_id: str) -> Dict[str, Any]:
    """Generate random caller data for testing."""
    return {
        "id": str(uuid.uuid4()),
        "email": fake.email(),
        "role": "organization_admin",
        "org_id": tenant_id,
    }


@pytest.fixture
def caller(user_data: Dict[str, Any]):
    """Caller context for the generated user."""
    from listing_api.search.context import CallerContext

    return CallerContext(
        user_id=user_data["id"],
        tenant_id=user_data["org_id"],
        role=user_data["role"],
        attributes={"email": user_data["email"]},
    )


@pytest.fixture
def recipe_rows() -> List[Dict[str, Any]]:
    """Twelve recipe rows for tenant T1, three of them soups."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    names = [
        "Tomato soup", "Caesar salad", "Beef stew", "Miso soup", "Pad thai",
        "Fish tacos", "Lentil soup", "Greek salad", "Ramen bowl", "Pancakes",
        "Burrito", "Risotto",
    ]
    return [
        {
            "id": f"recipe-{i:02d}",
            "tenant_id": "T1",
            "name": name,
            "difficulty": "easy" if i % 2 else "hard",
            "prep_minutes": 10 + i * 5,
            "created_at": base + timedelta(days=i),
            "deleted_at": None,
        }
        for i, name in enumerate(names)
    ]


@pytest.fixture
def recipe_spec():
    """Tenant-scoped recipe listing used by engine tests."""
    from listing_api.search.spec import EntitySearchSpec, FilterField, MatchType, ScopeRule

    return EntitySearchSpec(
        name="recipes",
        scope=[
            ScopeRule("tenant_id", context_key="tenant_id"),
            ScopeRule("deleted_at", is_null=True),
        ],
        filterable_fields=[
            FilterField("name", MatchType.CONTAINS),
            FilterField("difficulty"),
            FilterField("tenant_id"),
            FilterField("prep_minutes", MatchType.RANGE, value_type=int),
            FilterField("created", MatchType.RANGE, column="created_at", value_type=datetime),
        ],
        sortable_fields=["created_at", "name", "prep_minutes", "difficulty"],
        default_sort_field="created_at",
        searchable_fields=["name", "difficulty"],
        default_limit=10,
        max_limit=50,
        to_summary=dict,
    )


@pytest.fixture
def tenant_caller():
    """Caller acting for tenant T1."""
    from listing_api.search.context import CallerContext

    return CallerContext(user_id="user-1", tenant_id="T1", role="organization_admin")


# =============================================================================
# Authentication Fixtures
# =============================================================================

@pytest.fixture
def mock_jwt_secret():
    """Provide a consistent JWT secret for testing."""
    return os.environ["JWT_SECRET_KEY"]


@pytest.fixture
def valid_token_payload(user_data: Dict[str, Any]) -> Dict[str, Any]:
    """Generate a valid JWT token payload."""
    now = datetime.now(timezone.utc)
    return {
        "sub": user_data["id"],
        "org_id": user_data["org_id"],
        "email": user_data["email"],
        "role": user_data["role"],
        "token_type": "access",
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + timedelta(hours=2),
    }


@pytest.fixture
def expired_token_payload(valid_token_payload: Dict[str, Any]) -> Dict[str, Any]:
    """Generate an expired JWT token payload."""
    payload = valid_token_payload.copy()
    payload["iat"] = datetime.now(timezone.utc) - timedelta(hours=3)
    payload["exp"] = datetime.now(timezone.utc) - timedelta(hours=1)
    return payload


@pytest.fixture
def make_token(mock_jwt_secret: str) -> Callable[..., str]:
    """Factory signing a payload with the test secret."""

    def _make(payload: Dict[str, Any], secret: str = None) -> str:
        return jwt.encode(payload, secret or mock_jwt_secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token, valid_token_payload) -> Dict[str, str]:
    """Authorization header for the generated user."""
    return create_auth_header(make_token(valid_token_payload))


# =============================================================================
# Mock Objects
# =============================================================================

@pytest.fixture
def mock_backend():
    """Create a mock search backend."""
    backend = Mock()
    backend.count = AsyncMock(return_value=0)
    backend.fetch = AsyncMock(return_value=[])
    return backend


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Create a test FastAPI application instance."""
    # Import here to ensure test environment is set
    from listing_api.main import app as fastapi_app
    return fastapi_app


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


# =============================================================================
# Database Fixtures (for integration tests)
# =============================================================================

@pytest_asyncio.fixture
async def database():
    """Fresh tables in the temporary SQLite database for one test."""
    from listing_api.core.db_client import db

    await db.drop_tables()
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.close()


# =============================================================================
# Helper Functions
# =============================================================================

def create_auth_header(token: str) -> Dict[str, str]:
    """Create an authorization header with a bearer token."""
    return {"Authorization": f"Bearer {token}"}
