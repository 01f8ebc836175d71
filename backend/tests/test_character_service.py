"""
Characters, Locations, KNOWS edges and tenant purge.
"""
import pytest

from services.errors import InvalidInput, NotFound
from services.tenant_service import TenantService


class TestCharacters:

    @pytest.mark.asyncio
    async def test_create_and_get(self, character_service, tenant_a):
        created = await character_service.create_character(tenant_a, "  Mira  ")

        fetched = await character_service.get_character(tenant_a, created.id)

        assert created.id.startswith("ch_")
        assert fetched.name == "Mira"
        assert fetched.relationships == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_name_required(self, graph, character_service, tenant_a, name):
        with pytest.raises(InvalidInput):
            await character_service.create_character(tenant_a, name)
        with pytest.raises(InvalidInput):
            await character_service.create_location(tenant_a, name)
        assert graph.calls == []

    @pytest.mark.asyncio
    async def test_list_is_tenant_scoped_and_sorted(self, character_service, tenant_a, tenant_b):
        await character_service.create_character(tenant_a, "Zed")
        await character_service.create_character(tenant_a, "Ana")
        await character_service.create_character(tenant_b, "Other")

        names = [c.name for c in await character_service.list_characters(tenant_a)]

        assert names == ["Ana", "Zed"]

    @pytest.mark.asyncio
    async def test_foreign_character_not_found(self, character_service, tenant_a, tenant_b):
        created = await character_service.create_character(tenant_a, "Mira")

        with pytest.raises(NotFound):
            await character_service.get_character(tenant_b, created.id)


class TestLocations:

    @pytest.mark.asyncio
    async def test_create_get_list(self, character_service, tenant_a, tenant_b):
        harbor = await character_service.create_location(tenant_a, "Harbor")
        await character_service.create_location(tenant_a, "Attic")

        assert harbor.id.startswith("lo_")
        assert (await character_service.get_location(tenant_a, harbor.id)).name == "Harbor"
        assert [l.name for l in await character_service.list_locations(tenant_a)] == ["Attic", "Harbor"]
        assert await character_service.list_locations(tenant_b) == []

        with pytest.raises(NotFound):
            await character_service.get_location(tenant_b, harbor.id)


class TestKnows:

    @pytest.mark.asyncio
    async def test_create_knows_shows_on_source(self, character_service, tenant_a):
        mira = await character_service.create_character(tenant_a, "Mira")
        jon = await character_service.create_character(tenant_a, "Jon")

        relationship = await character_service.create_knows(tenant_a, mira.id, jon.id, " rival ", "met at sea")
        fetched = await character_service.get_character(tenant_a, mira.id)

        assert relationship.relationship_type == "rival"
        assert relationship.since is not None
        assert [r.to_dict()["target_name"] for r in fetched.relationships] == ["Jon"]
        assert fetched.relationships[0].context == "met at sea"
        assert (await character_service.get_character(tenant_a, jon.id)).relationships == []

    @pytest.mark.asyncio
    async def test_cannot_know_self(self, character_service, tenant_a):
        mira = await character_service.create_character(tenant_a, "Mira")

        with pytest.raises(InvalidInput):
            await character_service.create_knows(tenant_a, mira.id, mira.id, "self")

    @pytest.mark.asyncio
    async def test_relationship_type_required(self, character_service, tenant_a):
        mira = await character_service.create_character(tenant_a, "Mira")
        jon = await character_service.create_character(tenant_a, "Jon")

        with pytest.raises(InvalidInput):
            await character_service.create_knows(tenant_a, mira.id, jon.id, "  ")

    @pytest.mark.asyncio
    async def test_cross_tenant_knows_refused(self, graph, character_service, tenant_a, tenant_b):
        mira = await character_service.create_character(tenant_a, "Mira")
        spy = await character_service.create_character(tenant_b, "Spy")

        with pytest.raises(NotFound):
            await character_service.create_knows(tenant_a, mira.id, spy.id, "ally")

        assert graph.edges == []


class TestPurge:

    @pytest.mark.asyncio
    async def test_purge_only_touches_own_tenant(self, graph, moment_service, character_service, tenant_a, tenant_b):
        moment = await moment_service.create(tenant_a, title="mine")
        mira = await character_service.create_character(tenant_a, "Mira")
        await moment_service.link_character(tenant_a, moment.id, mira.id)
        kept = await moment_service.create(tenant_b, title="theirs")

        deleted = await TenantService(graph).purge(tenant_a)

        assert deleted == 2
        assert graph.edges == []
        assert await moment_service.list(tenant_a) == []
        assert (await moment_service.get(tenant_b, kept.id)).title == "theirs"
