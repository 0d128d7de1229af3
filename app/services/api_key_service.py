"""
API Key Service

Only the SHA-256 digest and a display prefix of a key are stored. The
plaintext secret is returned once by create and regenerate (as full_key);
every other read goes through _to_response, which shows the masked prefix.
"""
import logging
from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.api_key import ApiKey
from app.models.user import User
from app.schemas.api_key import ApiKeyCreate, ApiKeyIssued, ApiKeyQuery, ApiKeyResponse, ApiKeyUpdate
from app.schemas.common import ActionResult, IdPayload, Page
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

API_KEY_PATHS = ("/admin/api-keys",)


def _to_response(api_key: ApiKey) -> ApiKeyResponse:
    return ApiKeyResponse(
        id=api_key.id,
        key_name=api_key.key_name,
        api_key=auth_service.mask_api_key(api_key.key_prefix),
        user_id=api_key.user_id,
        permissions=api_key.permissions or {},
        last_used=api_key.last_used,
        expires_at=api_key.expires_at,
        enabled=api_key.enabled,
        created_at=api_key.created_at,
        updated_at=api_key.updated_at,
    )


class ApiKeyService:
    """Service for API key management"""

    async def _get_key(self, db: AsyncSession, key_id: int) -> ApiKey:
        result = await db.execute(select(ApiKey).where(ApiKey.id == key_id))
        api_key = result.scalar_one_or_none()
        if not api_key:
            raise NotFoundError("API key not found")
        return api_key

    async def _list(self, ctx: ActionContext, query: ApiKeyQuery) -> Page:
        filters = []
        if query.user_id:
            filters.append(ApiKey.user_id == query.user_id)
        if query.enabled is not None:
            filters.append(ApiKey.enabled.is_(query.enabled))

        total = (await ctx.db.execute(select(func.count(ApiKey.id)).where(*filters))).scalar() or 0
        result = await ctx.db.execute(
            select(ApiKey)
            .where(*filters)
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        items = [_to_response(api_key) for api_key in result.scalars().all()]
        return Page.build(items, total, query.page, query.limit)

    async def _get(self, ctx: ActionContext, data: IdPayload) -> ApiKeyResponse:
        return _to_response(await self._get_key(ctx.db, data.id))

    async def _create(self, ctx: ActionContext, data: ApiKeyCreate) -> ApiKeyIssued:
        db = ctx.db
        owner = (await db.execute(select(User.id).where(User.id == data.user_id))).scalar_one_or_none()
        if owner is None:
            raise NotFoundError("User not found")

        full_key = auth_service.generate_api_key()
        api_key = ApiKey(
            key_name=data.key_name,
            key_hash=auth_service.hash_api_key(full_key),
            key_prefix=auth_service.api_key_prefix(full_key),
            user_id=data.user_id,
            permissions=data.permissions,
            expires_at=data.expires_at,
            enabled=data.enabled,
        )
        db.add(api_key)
        await db.flush()
        await db.refresh(api_key)

        ctx.audit("api_key_created", "api_key", api_key.id, {"key_name": api_key.key_name, "user_id": api_key.user_id})
        ctx.invalidate(*API_KEY_PATHS)
        return ApiKeyIssued(api_key=_to_response(api_key), full_key=full_key)

    async def _update(self, ctx: ActionContext, data: ApiKeyUpdate) -> ApiKeyResponse:
        api_key = await self._get_key(ctx.db, data.id)
        changes = data.model_dump(exclude_unset=True, exclude={"id"})
        for field in ("key_name", "permissions", "enabled"):
            if field in changes and changes[field] is None:
                del changes[field]

        for field, value in changes.items():
            setattr(api_key, field, value)
        await ctx.db.flush()
        await ctx.db.refresh(api_key)

        ctx.audit("api_key_updated", "api_key", api_key.id, {"fields": sorted(changes)})
        ctx.invalidate(*API_KEY_PATHS)
        return _to_response(api_key)

    async def _regenerate(self, ctx: ActionContext, data: IdPayload) -> ApiKeyIssued:
        api_key = await self._get_key(ctx.db, data.id)

        full_key = auth_service.generate_api_key()
        api_key.key_hash = auth_service.hash_api_key(full_key)
        api_key.key_prefix = auth_service.api_key_prefix(full_key)
        api_key.last_used = None
        await ctx.db.flush()
        await ctx.db.refresh(api_key)

        ctx.audit("api_key_regenerated", "api_key", api_key.id, {"key_name": api_key.key_name})
        ctx.invalidate(*API_KEY_PATHS)
        return ApiKeyIssued(api_key=_to_response(api_key), full_key=full_key)

    async def _delete(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        api_key = await self._get_key(ctx.db, data.id)
        key_name = api_key.key_name
        await ctx.db.delete(api_key)
        await ctx.db.flush()

        ctx.audit("api_key_deleted", "api_key", data.id, {"key_name": key_name})
        ctx.invalidate(*API_KEY_PATHS)
        return {"id": data.id}

    async def list_api_keys(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_api_keys", db, credentials, self._list, query or {}, ApiKeyQuery)

    async def get_api_key(self, db: AsyncSession, credentials: CredentialsLike, key_id: Any) -> ActionResult:
        return await run_action("get_api_key", db, credentials, self._get, {"id": key_id}, IdPayload)

    async def create_api_key(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_api_key", db, credentials, self._create, payload, ApiKeyCreate)

    async def update_api_key(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_api_key", db, credentials, self._update, payload, ApiKeyUpdate)

    async def regenerate_api_key(self, db: AsyncSession, credentials: CredentialsLike, key_id: Any) -> ActionResult:
        return await run_action("regenerate_api_key", db, credentials, self._regenerate, {"id": key_id}, IdPayload)

    async def delete_api_key(self, db: AsyncSession, credentials: CredentialsLike, key_id: Any) -> ActionResult:
        return await run_action("delete_api_key", db, credentials, self._delete, {"id": key_id}, IdPayload)


# Global API key service instance
api_key_service = ApiKeyService()
