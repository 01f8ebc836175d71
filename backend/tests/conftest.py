"""
Pytest configuration for the narrative graph service tests.
"""
import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from models.domain.tenant import TenantContext
from services.character_service import CharacterService
from services.moment_service import MomentService

from .fake_executor import FakeGraphExecutor

pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring Neo4j"
    )


def pytest_collection_modifyitems(config, items):
    if os.getenv("TEST_NEO4J_URI"):
        return
    skip = pytest.mark.skip(reason="TEST_NEO4J_URI not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def tenant_a():
    return TenantContext(tenant_id="tenant-a", email="a@example.com", name="Author A")


@pytest.fixture
def tenant_b():
    return TenantContext(tenant_id="tenant-b", email="b@example.com", name="Author B")


@pytest.fixture
def graph():
    return FakeGraphExecutor()


@pytest.fixture
def moment_service(graph):
    return MomentService(graph)


@pytest.fixture
def character_service(graph):
    return CharacterService(graph)


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a tenant id"""
    from middleware.jwt_session import create_access_token

    def _headers(tenant_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(tenant_id)}"}

    return _headers


@pytest_asyncio.fixture
async def client(graph):
    """HTTP client bound to the app with the in-memory graph (no lifespan, no Neo4j)"""
    from api.dependencies import get_executor
    from main import app

    app.dependency_overrides[get_executor] = lambda: graph
    app.state.executor = graph
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
            yield http
    finally:
        app.dependency_overrides.clear()
        app.state.executor = None
