"""
Tenant isolation against a real Neo4j.

Run with:
    TEST_NEO4J_URI=bolt://localhost:7688 TEST_NEO4J_PASSWORD=... pytest -m integration
"""
import os
import uuid

import pytest
import pytest_asyncio

from config.database import Neo4jConfig
from models.domain.moment import Projection
from models.domain.tenant import TenantContext
from services.character_service import CharacterService
from services.errors import InvalidInput, NotFound
from services.graph_executor import IsolatedQueryExecutor
from services.moment_service import MomentService
from services.tenant_service import TenantService

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def executor():
    config = Neo4jConfig(
        uri=os.getenv("TEST_NEO4J_URI", "bolt://localhost:7688"),
        user=os.getenv("TEST_NEO4J_USER", "neo4j"),
        password=os.getenv("TEST_NEO4J_PASSWORD", "test_password"),
        database=os.getenv("TEST_NEO4J_DATABASE", "neo4j"),
    )
    executor = IsolatedQueryExecutor(config)
    await executor.connect()
    await executor.initialize_constraints()
    try:
        yield executor
    finally:
        await executor.close()


@pytest_asyncio.fixture
async def tenants(executor):
    """Two throwaway tenants, purged after the test"""
    pair = (
        TenantContext(tenant_id=f"it-{uuid.uuid4().hex}"),
        TenantContext(tenant_id=f"it-{uuid.uuid4().hex}"),
    )
    yield pair
    service = TenantService(executor)
    for tenant in pair:
        await service.purge(tenant)


@pytest.mark.asyncio
async def test_round_trip_and_isolation(executor, tenants):
    owner, intruder = tenants
    service = MomentService(executor)

    created = await service.create(owner, title="T", content="A" * 500)
    assert created.preview == "A" * 300

    updated = await service.update(owner, created.id, {"title": "T2"})
    assert updated.content == "A" * 500
    assert updated.created_at == created.created_at

    light = await service.get(owner, created.id, Projection.LIGHTWEIGHT)
    assert light.content is None

    with pytest.raises(NotFound):
        await service.get(intruder, created.id)
    with pytest.raises(NotFound):
        await service.update(intruder, created.id, {"title": "x"})
    with pytest.raises(NotFound):
        await service.delete(intruder, created.id)

    assert await service.list(intruder) == []
    assert await service.delete(owner, created.id) is True
    with pytest.raises(NotFound):
        await service.get(owner, created.id)


@pytest.mark.asyncio
async def test_links_timeline_and_cascade(executor, tenants):
    owner, intruder = tenants
    moments = MomentService(executor)
    characters = CharacterService(executor)

    a = await moments.create(owner, title="a")
    b = await moments.create(owner, title="b")
    c = await moments.create(owner, title="c")
    mira = await characters.create_character(owner, "Mira")
    spy = await characters.create_character(intruder, "Spy")

    await moments.link_character(owner, b.id, mira.id)
    with pytest.raises(NotFound):
        await moments.link_character(owner, b.id, spy.id)

    await moments.link_next(owner, a.id, b.id)
    await moments.link_next(owner, b.id, c.id)
    with pytest.raises(InvalidInput):
        await moments.link_next(owner, c.id, a.id)

    assert [m.id for m in await moments.get_timeline(owner)] == [a.id, b.id, c.id]

    full = await moments.get(owner, b.id)
    assert [ch.id for ch in full.characters] == [mira.id]

    await moments.delete(owner, b.id)
    assert (await characters.get_character(owner, mira.id)).name == "Mira"
    assert [m.id for m in await moments.get_timeline(owner)] == [a.id, c.id]
