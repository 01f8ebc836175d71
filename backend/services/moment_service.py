"""
Moment Service - create, read, update, delete and timeline for Moments

Request flow:
1. Validate input locally (InvalidInput before any store call)
2. For update/delete, verify ownership (NotFound when not owned)
3. Derive preview where content changes without an explicit preview
4. Execute through the repository, which runs on the isolated executor

Store calls inside one operation are awaited strictly in order, so the
ownership check always completes before the dependent write is issued.
Concurrent updates to one Moment are last-write-wins.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from models.domain.moment import Moment, Projection
from models.domain.tenant import TenantContext
from repositories.moment_repository import MomentRepository
from repositories.relationship_repository import RelationshipRepository
from services.errors import InvalidInput, NotFound, StorageFailure
from services.graph_executor import IsolatedQueryExecutor, require_tenant
from services.ownership import OwnershipVerifier
from services.timeline import order_timeline
from utils.datetime_utils import utc_now
from utils.id_generator import generate_moment_id
from utils.preview import derive_preview, PREVIEW_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20
DEFAULT_LIST_SKIP = 0

UPDATABLE_FIELDS = ("title", "content", "summary", "preview", "timestamp")
NON_NULLABLE_FIELDS = ("title", "content", "preview")

MOMENT_NOT_FOUND = "Moment not found"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class MomentService:
    """Orchestrates Moment lifecycle on top of the isolated executor"""

    def __init__(
        self,
        executor: IsolatedQueryExecutor,
        repository: Optional[MomentRepository] = None,
        verifier: Optional[OwnershipVerifier] = None,
        relationships: Optional[RelationshipRepository] = None
    ):
        self.executor = executor
        self.repository = repository or MomentRepository(executor)
        self.relationships = relationships or RelationshipRepository(executor)
        self.verifier = verifier or OwnershipVerifier(executor)

    # =========================================================================
    # CREATE
    # =========================================================================

    async def create(
        self,
        tenant: TenantContext,
        title: Optional[str] = None,
        content: Optional[str] = None,
        summary: Optional[str] = None,
        preview: Optional[str] = None,
        timestamp: Optional[str] = None
    ) -> Moment:
        """
        Create a Moment.

        Title or content must be non-blank. Title is stored trimmed, content
        as given. An empty preview counts as not supplied and is derived from
        content; a supplied preview is capped at 300 characters.
        """
        require_tenant(tenant)
        if _is_blank(title) and _is_blank(content):
            raise InvalidInput("Either title or content is required")

        final_content = content or ""
        final_preview = preview[:PREVIEW_LENGTH] if preview else derive_preview(final_content)
        now = utc_now()

        moment = Moment(
            id=generate_moment_id(),
            tenant_id=tenant.tenant_id,
            title=(title or "").strip(),
            content=final_content,
            summary=summary,
            preview=final_preview,
            timestamp=timestamp,
            created_at=now,
            updated_at=now,
        )

        created = await self.repository.create(moment, tenant)
        if created is None:
            logger.error(f"Create returned no row for moment {moment.id}")
            raise StorageFailure("Failed to create moment")

        logger.info(f"✨ Created Moment {created.id} for tenant {tenant.tenant_id}")
        return created

    # =========================================================================
    # READ
    # =========================================================================

    async def get(
        self,
        tenant: TenantContext,
        moment_id: str,
        mode: Union[Projection, str] = Projection.FULL
    ) -> Moment:
        """
        Fetch one Moment in full or lightweight projection.

        Raises:
            NotFound: missing, or owned by another tenant (indistinguishable)
        """
        require_tenant(tenant)
        try:
            projection = Projection(mode)
        except ValueError:
            raise InvalidInput(f"Unknown fields mode: {mode}")

        if projection == Projection.LIGHTWEIGHT:
            moment = await self.repository.get_lightweight(moment_id, tenant)
        else:
            moment = await self.repository.get_full(moment_id, tenant)

        if moment is None:
            raise NotFound(MOMENT_NOT_FOUND)
        return moment

    async def list(
        self,
        tenant: TenantContext,
        limit: int = DEFAULT_LIST_LIMIT,
        skip: int = DEFAULT_LIST_SKIP
    ) -> List[Moment]:
        """Lightweight Moments, newest first, `skip` applied before `limit`"""
        require_tenant(tenant)
        if limit is None:
            limit = DEFAULT_LIST_LIMIT
        if skip is None:
            skip = DEFAULT_LIST_SKIP
        for name, value in (("limit", limit), ("skip", skip)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidInput(f"{name} must be a non-negative integer")

        return await self.repository.list(limit, skip, tenant)

    async def get_timeline(self, tenant: TenantContext) -> List[Moment]:
        """Lightweight Moments in AFTER-chain order (see services.timeline)"""
        require_tenant(tenant)
        moments, links = await self.repository.get_chain(tenant)
        return order_timeline(moments, links)

    # =========================================================================
    # UPDATE / DELETE
    # =========================================================================

    def _build_changes(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")

        for name in NON_NULLABLE_FIELDS:
            if name in fields and fields[name] is None:
                raise InvalidInput(f"{name} cannot be null")

        changes = {name: fields[name] for name in UPDATABLE_FIELDS if name in fields}
        if "preview" in changes:
            changes["preview"] = changes["preview"][:PREVIEW_LENGTH]
        elif "content" in changes:
            changes["preview"] = derive_preview(changes["content"])
        return changes

    async def update(
        self,
        tenant: TenantContext,
        moment_id: str,
        fields: Dict[str, Any]
    ) -> Moment:
        """
        Sparse update: only keys present in `fields` change.

        Content without preview re-derives preview. updated_at is always
        refreshed; created_at is never written.

        Raises:
            InvalidInput: nothing to change, or bad field values
            NotFound: ownership check failed
        """
        require_tenant(tenant)
        changes = self._build_changes(fields or {})

        # Ownership first: a foreign id is NotFound even for an empty body
        if not await self.verifier.verify("Moment", moment_id, tenant):
            raise NotFound(MOMENT_NOT_FOUND)
        if not changes:
            raise InvalidInput("No fields to update")

        updated = await self.repository.update(moment_id, changes, utc_now(), tenant)
        if updated is None:
            # Deleted between the ownership check and the write
            raise NotFound(MOMENT_NOT_FOUND)

        logger.info(f"📝 Updated Moment {moment_id} ({', '.join(sorted(changes))})")
        return updated

    async def delete(self, tenant: TenantContext, moment_id: str) -> bool:
        """
        Delete a Moment and every edge attached to it.

        Linked Characters, Locations and neighbouring Moments stay; they only
        lose the edge. A chain running through the Moment splits in two.
        """
        require_tenant(tenant)
        if not await self.verifier.verify("Moment", moment_id, tenant):
            raise NotFound(MOMENT_NOT_FOUND)

        deleted = await self.repository.delete(moment_id, tenant)
        if not deleted:
            raise NotFound(MOMENT_NOT_FOUND)

        logger.info(f"🗑️  Deleted Moment {moment_id} for tenant {tenant.tenant_id}")
        return True

    # =========================================================================
    # EDGES
    # =========================================================================

    async def _require_owned(self, tenant: TenantContext, label: str, entity_id: str):
        if not await self.verifier.verify(label, entity_id, tenant):
            raise NotFound(f"{label} not found")

    async def link_character(self, tenant: TenantContext, moment_id: str, character_id: str) -> bool:
        """Attach a Character to a Moment (PARTICIPATED_IN); idempotent"""
        require_tenant(tenant)
        await self._require_owned(tenant, "Moment", moment_id)
        await self._require_owned(tenant, "Character", character_id)

        linked = await self.relationships.link_character(moment_id, character_id, utc_now(), tenant)
        if not linked:
            raise NotFound(MOMENT_NOT_FOUND)
        logger.info(f"🔗 Linked Character {character_id} -> Moment {moment_id}")
        return True

    async def unlink_character(self, tenant: TenantContext, moment_id: str, character_id: str) -> int:
        require_tenant(tenant)
        await self._require_owned(tenant, "Moment", moment_id)
        await self._require_owned(tenant, "Character", character_id)
        return await self.relationships.unlink_character(moment_id, character_id, tenant)

    async def set_location(self, tenant: TenantContext, moment_id: str, location_id: str) -> bool:
        """Attach a Location to a Moment (OCCURRED_AT); idempotent"""
        require_tenant(tenant)
        await self._require_owned(tenant, "Moment", moment_id)
        await self._require_owned(tenant, "Location", location_id)

        linked = await self.relationships.link_location(moment_id, location_id, utc_now(), tenant)
        if not linked:
            raise NotFound(MOMENT_NOT_FOUND)
        logger.info(f"📍 Moment {moment_id} occurred at Location {location_id}")
        return True

    async def unlink_location(self, tenant: TenantContext, moment_id: str, location_id: str) -> int:
        require_tenant(tenant)
        await self._require_owned(tenant, "Moment", moment_id)
        await self._require_owned(tenant, "Location", location_id)
        return await self.relationships.unlink_location(moment_id, location_id, tenant)

    async def link_next(self, tenant: TenantContext, moment_id: str, next_id: str) -> bool:
        """
        Chain `next_id` directly after `moment_id`.

        The write only happens when the chain stays singly linked and acyclic;
        the condition is evaluated inside the same write statement.
        """
        require_tenant(tenant)
        if moment_id == next_id:
            raise InvalidInput("Link would break the timeline chain")
        await self._require_owned(tenant, "Moment", moment_id)
        await self._require_owned(tenant, "Moment", next_id)

        if not await self.relationships.link_next(moment_id, next_id, utc_now(), tenant):
            logger.warning(f"Rejected AFTER {moment_id} -> {next_id} for tenant {tenant.tenant_id}")
            raise InvalidInput("Link would break the timeline chain")

        logger.info(f"⛓️  Chained Moment {moment_id} -> {next_id}")
        return True

    async def unlink_next(self, tenant: TenantContext, moment_id: str) -> int:
        require_tenant(tenant)
        await self._require_owned(tenant, "Moment", moment_id)
        return await self.relationships.unlink_next(moment_id, tenant)
