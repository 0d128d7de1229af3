"""
User Service
User administration and role assignments.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.models.journal import Journal
from app.models.user import RoleAssignment, Tenant, User
from app.schemas.common import ActionResult, IdPayload, Page
from app.schemas.user import (
    PasswordReset,
    RoleAssignmentPayload,
    RoleAssignmentResponse,
    UserCreate,
    UserQuery,
    UserResponse,
    UserUpdate,
)
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

USER_PATHS = ("/admin/users", "/admin/dashboard")


class UserService:
    """Service for user administration"""

    async def _get_user(self, db: AsyncSession, user_id: int) -> User:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User not found")
        return user

    async def _to_response(self, db: AsyncSession, user: User) -> UserResponse:
        result = await db.execute(
            select(RoleAssignment)
            .where(RoleAssignment.user_id == user.id, RoleAssignment.is_active.is_(True))
            .order_by(RoleAssignment.id)
        )
        roles = [RoleAssignmentResponse.model_validate(a) for a in result.scalars().all()]
        return UserResponse(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            is_active=user.is_active,
            last_login=user.last_login,
            roles=roles,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    async def _check_scope_exists(self, db: AsyncSession, tenant_id: Optional[int], journal_id: Optional[int]) -> None:
        if tenant_id is not None:
            found = (await db.execute(select(Tenant.id).where(Tenant.id == tenant_id))).scalar_one_or_none()
            if found is None:
                raise NotFoundError("Tenant not found")
        if journal_id is not None:
            found = (await db.execute(select(Journal.id).where(Journal.id == journal_id))).scalar_one_or_none()
            if found is None:
                raise NotFoundError("Journal not found")

    async def _check_email_available(self, db: AsyncSession, email: str) -> None:
        result = await db.execute(select(User.id).where(func.lower(User.email) == email.lower()))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("User with this email already exists")

    # ==================== OPERATIONS ====================

    async def _list(self, ctx: ActionContext, query: UserQuery) -> Page:
        filters = []
        if query.search:
            pattern = f"%{query.search}%"
            filters.append(or_(User.email.ilike(pattern), User.full_name.ilike(pattern)))
        if query.is_active is not None:
            filters.append(User.is_active.is_(query.is_active))
        if query.role is not None:
            filters.append(
                User.id.in_(
                    select(RoleAssignment.user_id).where(
                        RoleAssignment.role == query.role,
                        RoleAssignment.is_active.is_(True),
                    )
                )
            )

        total = (await ctx.db.execute(select(func.count(User.id)).where(*filters))).scalar() or 0
        result = await ctx.db.execute(
            select(User)
            .where(*filters)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        items = [await self._to_response(ctx.db, user) for user in result.scalars().all()]
        return Page.build(items, total, query.page, query.limit)

    async def _get(self, ctx: ActionContext, data: IdPayload) -> UserResponse:
        return await self._to_response(ctx.db, await self._get_user(ctx.db, data.id))

    async def _create(self, ctx: ActionContext, data: UserCreate) -> UserResponse:
        db = ctx.db
        await self._check_email_available(db, data.email)
        await self._check_scope_exists(db, data.tenant_id, data.journal_id)

        user = User(
            email=data.email,
            password_hash=auth_service.hash_password(data.password),
            full_name=data.full_name,
            is_active=data.is_active,
        )
        db.add(user)
        await db.flush()

        db.add(
            RoleAssignment(
                user_id=user.id,
                role=data.role,
                tenant_id=data.tenant_id,
                journal_id=data.journal_id,
                is_active=True,
            )
        )
        await db.flush()
        await db.refresh(user)

        ctx.audit("create_user", "user", user.id, {"email": user.email, "role": data.role.value})
        ctx.invalidate(*USER_PATHS)
        return await self._to_response(db, user)

    async def _update(self, ctx: ActionContext, data: UserUpdate) -> UserResponse:
        db = ctx.db
        user = await self._get_user(db, data.id)
        changes = data.model_dump(exclude_unset=True, exclude={"id", "password"})
        for field in ("email", "full_name", "is_active"):
            if field in changes and changes[field] is None:
                del changes[field]

        if "email" in changes and changes["email"].lower() != user.email.lower():
            await self._check_email_available(db, changes["email"])

        for field, value in changes.items():
            setattr(user, field, value)
        if data.password:
            user.password_hash = auth_service.hash_password(data.password)

        await db.flush()
        await db.refresh(user)

        fields = sorted(data.model_fields_set - {"id", "password"})
        ctx.audit("update_user", "user", user.id, {"fields": fields, "password_changed": bool(data.password)})
        ctx.invalidate(*USER_PATHS)
        return await self._to_response(db, user)

    async def _reset_password(self, ctx: ActionContext, data: PasswordReset) -> Dict[str, Any]:
        user = await self._get_user(ctx.db, data.user_id)
        user.password_hash = auth_service.hash_password(data.new_password)
        await ctx.db.flush()

        ctx.audit("reset_user_password", "user", user.id, {"email": user.email})
        return {"id": user.id}

    async def _deactivate(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        db = ctx.db
        if data.id == ctx.actor_id:
            raise ConflictError("You cannot delete your own account")
        user = await self._get_user(db, data.id)

        user.is_active = False
        await db.execute(
            update(RoleAssignment).where(RoleAssignment.user_id == user.id).values(is_active=False)
        )
        await db.flush()

        ctx.audit("delete_user", "user", user.id, {"email": user.email})
        ctx.invalidate(*USER_PATHS)
        return {"id": user.id}

    async def _hard_delete(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        db = ctx.db
        if data.id == ctx.actor_id:
            raise ConflictError("You cannot delete your own account")
        user = await self._get_user(db, data.id)
        email = user.email

        await db.delete(user)
        await db.flush()

        ctx.audit("hard_delete_user", "user", data.id, {"email": email})
        ctx.invalidate(*USER_PATHS)
        return {"id": data.id}

    async def _find_assignment(self, db: AsyncSession, data: RoleAssignmentPayload) -> Optional[RoleAssignment]:
        result = await db.execute(
            select(RoleAssignment).where(
                RoleAssignment.user_id == data.user_id,
                RoleAssignment.role == data.role,
                RoleAssignment.tenant_id == data.tenant_id,
                RoleAssignment.journal_id == data.journal_id,
            )
        )
        return result.scalar_one_or_none()

    async def _assign_role(self, ctx: ActionContext, data: RoleAssignmentPayload) -> RoleAssignmentResponse:
        db = ctx.db
        await self._get_user(db, data.user_id)
        await self._check_scope_exists(db, data.tenant_id, data.journal_id)

        assignment = await self._find_assignment(db, data)
        if assignment is None:
            assignment = RoleAssignment(
                user_id=data.user_id,
                role=data.role,
                tenant_id=data.tenant_id,
                journal_id=data.journal_id,
                is_active=True,
            )
            db.add(assignment)
        else:
            assignment.is_active = True
        await db.flush()
        await db.refresh(assignment)

        ctx.audit(
            "assign_user_role",
            "user",
            data.user_id,
            {"role": data.role.value, "tenant_id": data.tenant_id, "journal_id": data.journal_id},
        )
        ctx.invalidate(*USER_PATHS)
        return RoleAssignmentResponse.model_validate(assignment)

    async def _revoke_role(self, ctx: ActionContext, data: RoleAssignmentPayload) -> RoleAssignmentResponse:
        db = ctx.db
        assignment = await self._find_assignment(db, data)
        if assignment is None or not assignment.is_active:
            raise NotFoundError("Role assignment not found")

        assignment.is_active = False
        await db.flush()
        await db.refresh(assignment)

        ctx.audit(
            "revoke_user_role",
            "user",
            data.user_id,
            {"role": data.role.value, "tenant_id": data.tenant_id, "journal_id": data.journal_id},
        )
        ctx.invalidate(*USER_PATHS)
        return RoleAssignmentResponse.model_validate(assignment)

    # ==================== PUBLIC API ====================

    async def list_users(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_users", db, credentials, self._list, query or {}, UserQuery)

    async def get_user(self, db: AsyncSession, credentials: CredentialsLike, user_id: Any) -> ActionResult:
        return await run_action("get_user", db, credentials, self._get, {"id": user_id}, IdPayload)

    async def create_user(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_user", db, credentials, self._create, payload, UserCreate)

    async def update_user(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_user", db, credentials, self._update, payload, UserUpdate)

    async def reset_user_password(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("reset_user_password", db, credentials, self._reset_password, payload, PasswordReset)

    async def delete_user(self, db: AsyncSession, credentials: CredentialsLike, user_id: Any) -> ActionResult:
        """Soft delete: deactivates the user and every role assignment"""
        return await run_action("delete_user", db, credentials, self._deactivate, {"id": user_id}, IdPayload)

    async def hard_delete_user(self, db: AsyncSession, credentials: CredentialsLike, user_id: Any) -> ActionResult:
        return await run_action("hard_delete_user", db, credentials, self._hard_delete, {"id": user_id}, IdPayload)

    async def assign_role(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("assign_user_role", db, credentials, self._assign_role, payload, RoleAssignmentPayload)

    async def revoke_role(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("revoke_user_role", db, credentials, self._revoke_role, payload, RoleAssignmentPayload)


# Global user service instance
user_service = UserService()
