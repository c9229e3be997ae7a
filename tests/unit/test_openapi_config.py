"""
Tests for OpenAPI configuration on the FastAPI app.

Validates that the generated OpenAPI spec includes:
- Correct title and version
- Tag descriptions for both route groups
- The derive operation with its error envelope
"""

import pytest
from httpx import AsyncClient, ASGITransport


EXPECTED_TAGS = ["derive", "health"]


@pytest.fixture
async def openapi_spec():
    """Fetch the OpenAPI spec from the running app."""
    from main import app

    app.openapi_schema = None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/openapi.json")
    assert response.status_code == 200, f"Failed to fetch OpenAPI spec: {response.status_code}"
    return response.json()


class TestOpenAPIMetadata:
    """Tests for top-level OpenAPI metadata fields."""

    @pytest.mark.asyncio
    async def test_title_and_version(self, openapi_spec):
        assert openapi_spec["info"]["title"] == "Argon2 Sizer API"
        assert openapi_spec["info"]["version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_tags_described(self, openapi_spec):
        tags = {tag["name"]: tag["description"] for tag in openapi_spec["tags"]}
        for name in EXPECTED_TAGS:
            assert tags.get(name), f"Tag {name} missing or has empty description"


class TestDeriveOperation:
    @pytest.mark.asyncio
    async def test_derive_path_is_post_only(self, openapi_spec):
        assert set(openapi_spec["paths"]["/api"]) == {"post"}

    @pytest.mark.asyncio
    async def test_error_responses_use_error_envelope(self, openapi_spec):
        responses = openapi_spec["paths"]["/api"]["post"]["responses"]
        for status in ("400", "500"):
            ref = responses[status]["content"]["application/json"]["schema"]["$ref"]
            assert ref.endswith("/ErrorResponse")

    @pytest.mark.asyncio
    async def test_request_schema_fields(self, openapi_spec):
        schema = openapi_spec["components"]["schemas"]["DeriveRequest"]
        assert set(schema["required"]) == {"password", "salt", "size"}
        assert schema["properties"]["size"]["minimum"] == 0
