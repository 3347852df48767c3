"""
Integration tests for the listing endpoints.

Requests go through the full app (auth dependency, service, engine, SQL
backend) against the temporary SQLite database.
"""

import os
import uuid
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")
os.environ.setdefault("ENVIRONMENT", "test")

URL = "/api/v1/insurance-policies"
BASE_TIME = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def _policy(i: int, organization_id: str, **overrides):
    from listing_api.models import InsurancePolicyModel

    values = dict(
        id=f"policy-{i:02d}",
        organization_id=organization_id,
        patient_id=f"patient-{i % 3}",
        policy_number=f"POL-{1000 + i}",
        payer_name="Blue Shield" if i % 2 else "Aetna",
        group_number=None,
        coverage_start_date=date(2024, 1, i),
        coverage_end_date=None,
        plan_type="ppo" if i < 4 else "hmo",
        policy_status="active",
        created_at=BASE_TIME + timedelta(days=i),
        updated_at=BASE_TIME + timedelta(days=i),
    )
    values.update(overrides)
    return InsurancePolicyModel(**values)


@pytest_asyncio.fixture
async def seeded(database, tenant_id, other_tenant_id):
    """Six live policies for the caller's tenant plus noise rows."""
    rows = [_policy(i, tenant_id) for i in range(1, 7)]
    rows.append(_policy(7, tenant_id, deleted_at=BASE_TIME + timedelta(days=30)))
    rows.extend(_policy(i, other_tenant_id) for i in range(8, 11))

    async with database.session() as session:
        session.add_all(rows)

    return rows


class TestListInsurancePolicies:

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_empty_body_returns_defaults(self, async_client, auth_headers, seeded):
        response = await async_client.patch(URL, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"current": 1, "limit": 20, "records": 6, "pages": 1}
        # Newest first, soft-deleted and foreign rows excluded
        assert [p["id"] for p in body["data"]] == [f"policy-{i:02d}" for i in range(6, 0, -1)]

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_pagination_and_sorting(self, async_client, auth_headers, seeded):
        response = await async_client.patch(
            URL,
            headers=auth_headers,
            json={"page": 2, "pageSize": 4, "sortBy": "policy_number", "order": "asc"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"current": 2, "limit": 4, "records": 6, "pages": 2}
        assert [p["policy_number"] for p in body["data"]] == ["POL-1005", "POL-1006"]

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_filters(self, async_client, auth_headers, seeded):
        response = await async_client.patch(
            URL,
            headers=auth_headers,
            json={
                "filters": {
                    "payer_name": "shield",
                    "coverage_start": {"from": "2024-01-02", "to": "2024-01-05"},
                    "plan_type": None,
                    "unknown_field": "ignored",
                },
                "sort_field": "coverage_start_date",
                "sort_direction": "asc",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["records"] == 2
        assert [p["id"] for p in body["data"]] == ["policy-03", "policy-05"]

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, async_client, auth_headers, seeded):
        response = await async_client.patch(URL, headers=auth_headers, json={"page": 9})

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"] == {"current": 9, "limit": 20, "records": 6, "pages": 1}

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_huge_page_is_empty(self, async_client, auth_headers, seeded):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"page": 10**19, "limit": 20}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"] == {"current": 10**19, "limit": 20, "records": 6, "pages": 1}

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_exact_filter(self, async_client, auth_headers, seeded):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"filters": {"patient_id": "patient-1"}}
        )

        assert response.status_code == 200
        # i % 3 == 1 among 1..6
        assert [p["id"] for p in response.json()["data"]] == ["policy-04", "policy-01"]

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_lenient_paging_values(self, async_client, auth_headers, seeded):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"page": "abc", "limit": -5}
        )

        assert response.status_code == 200
        assert response.json()["pagination"]["current"] == 1
        assert response.json()["pagination"]["limit"] == 20

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_unknown_sort_field_falls_back(self, async_client, auth_headers, seeded):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"sort_field": "group_number; drop table"}
        )

        assert response.status_code == 200
        assert response.json()["data"][0]["id"] == "policy-06"

    @pytest.mark.integration
    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_tenant_without_rows(
        self, async_client, make_token, valid_token_payload, seeded
    ):
        valid_token_payload["org_id"] = str(uuid.uuid4())
        headers = {"Authorization": f"Bearer {make_token(valid_token_payload)}"}

        response = await async_client.patch(URL, headers=headers, json={})

        assert response.status_code == 200
        assert response.json() == {
            "pagination": {"current": 1, "limit": 20, "records": 0, "pages": 0},
            "data": [],
        }


class TestListingErrors:

    @pytest.mark.integration
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_missing_token(self, async_client):
        response = await async_client.patch(URL)

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    @pytest.mark.integration
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_expired_token(self, async_client, make_token, expired_token_payload):
        headers = {"Authorization": f"Bearer {make_token(expired_token_payload)}"}

        response = await async_client.patch(URL, headers=headers)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    @pytest.mark.integration
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_missing_tenant_claim(self, async_client, make_token, valid_token_payload):
        del valid_token_payload["org_id"]
        headers = {"Authorization": f"Bearer {make_token(valid_token_payload)}"}

        response = await async_client.patch(URL, headers=headers)

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["code"] == "AUTHORIZATION_ERROR"
        assert error["details"]["missing"] == "tenant_id"

    @pytest.mark.integration
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_role_not_allowed(self, async_client, auth_headers):
        # organization_admin is healthcare staff, not a task-management role
        response = await async_client.patch("/api/v1/tasks", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_malformed_range_filter(self, async_client, auth_headers):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"filters": {"coverage_start": "2024-01-01"}}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["field"] == "coverage_start"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_uncoercible_range_bound(self, async_client, auth_headers):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"filters": {"coverage_end": {"to": "next week"}}}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [5, True, 2.5])
    async def test_non_string_value_for_string_filter(self, async_client, auth_headers, value):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"filters": {"patient_id": value}}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["field"] == "patient_id"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_overlong_search_term(self, async_client, auth_headers):
        response = await async_client.patch(
            URL, headers=auth_headers, json={"search": "x" * 500}
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_backing_store_failure(self, async_client, auth_headers):
        from listing_api.core.exceptions import BackingStoreError

        with patch("listing_api.api.v1.listings.listing_service") as mock_service:
            mock_service.list_entities = AsyncMock(
                side_effect=BackingStoreError(
                    "Backing store unavailable", details={"listing": "insurance-policies"}
                )
            )

            response = await async_client.patch(URL, headers=auth_headers)

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "BACKING_STORE_ERROR"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_not_allowed(self, async_client, auth_headers):
        response = await async_client.get(URL, headers=auth_headers)

        assert response.status_code == 405
