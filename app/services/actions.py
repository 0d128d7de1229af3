"""
Action envelope.

Every admin/editorial operation runs through run_action:

    validate -> authorize -> operation (one unit of work, committed)
             -> audit records -> cache invalidation -> ActionResult

Expected failures (ActionError) and database errors roll the unit of work
back and come out as failed results; nothing is raised to the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Type, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ActionError, ErrorCode
from app.models.user import RoleKey
from app.schemas.common import ActionResult, format_validation_errors
from app.services.audit_service import AuditEntry, audit_service
from app.services.authorization import Actor, AuthStatus, GLOBAL_SCOPE, Scope, authorize
from app.services.cache_service import cache_invalidator

logger = logging.getLogger(__name__)

SUPER_ADMIN_ONLY = (RoleKey.SUPER_ADMIN,)


@dataclass
class Credentials:
    """Explicit caller credential plus request metadata for the audit trail"""
    token: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


CredentialsLike = Union[Credentials, str, None]


@dataclass
class ActionContext:
    """Handed to the operation; collects side effects to run after commit"""
    db: AsyncSession
    actor: Optional[Actor]
    credentials: Credentials
    audit_entries: List[AuditEntry] = field(default_factory=list)
    stale_paths: List[str] = field(default_factory=list)

    @property
    def actor_id(self) -> Optional[int]:
        return self.actor.id if self.actor else None

    def audit(
        self,
        action: str,
        entity_type: Optional[str] = None,
        entity_id: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.audit_entries.append(
            AuditEntry(
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details or {},
                actor_id=self.actor_id,
                ip_address=self.credentials.ip_address,
                user_agent=self.credentials.user_agent,
            )
        )

    def invalidate(self, *paths: str) -> None:
        self.stale_paths.extend(paths)


Operation = Callable[[ActionContext, Any], Awaitable[Any]]
ScopeResolver = Callable[[AsyncSession, Any], Awaitable[Scope]]


def as_credentials(credentials: CredentialsLike) -> Credentials:
    if isinstance(credentials, Credentials):
        return credentials
    return Credentials(token=credentials)


def validate_payload(schema: Type[BaseModel], payload: Any) -> BaseModel:
    """Build a fresh validated model; the raw payload is left untouched"""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    return schema.model_validate(payload)


def _database_message(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


async def run_action(
    name: str,
    db: AsyncSession,
    credentials: CredentialsLike,
    operation: Operation,
    payload: Any = None,
    schema: Optional[Type[BaseModel]] = None,
    roles: Optional[Sequence[RoleKey]] = SUPER_ADMIN_ONLY,
    scope: Union[Scope, ScopeResolver, None] = None,
) -> ActionResult:
    """
    Run one operation inside the envelope.

    Args:
        name: Action name, used in log lines.
        db: Database session for the unit of work.
        credentials: Bearer token (or Credentials) of the caller.
        operation: Coroutine taking (ActionContext, validated payload).
        payload: Raw input.
        schema: Pydantic model validating the payload; None passes it through.
        roles: Roles allowed to run the action; None means any authenticated actor.
        scope: Fixed Scope, or a coroutine resolving it from the validated payload.
    """
    credentials = as_credentials(credentials)

    # 1. Validate
    data = payload
    if schema is not None:
        try:
            data = validate_payload(schema, payload)
        except ValidationError as e:
            return ActionResult.fail("Validation failed", ErrorCode.VALIDATION, format_validation_errors(e))

    # 2. Authorize
    try:
        if callable(scope):
            resolved_scope = await scope(db, data)
        else:
            resolved_scope = scope or GLOBAL_SCOPE
    except SQLAlchemyError as e:
        logger.error(f"[{name}] Scope lookup failed: {e}")
        return ActionResult.fail("Unauthorized", ErrorCode.UNAUTHORIZED)

    auth = await authorize(db, credentials.token, roles, resolved_scope)
    if not auth.authorized:
        code = ErrorCode.FORBIDDEN if auth.status == AuthStatus.FORBIDDEN else ErrorCode.UNAUTHORIZED
        return ActionResult.fail("Unauthorized", code)

    # 3/4. Execute the unit of work
    ctx = ActionContext(db=db, actor=auth.actor, credentials=credentials)
    try:
        result = await operation(ctx, data)
        await db.commit()
    except ActionError as e:
        await db.rollback()
        return ActionResult.fail(e.message, e.code, e.details)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[{name}] Database error: {e}")
        return ActionResult.fail(_database_message(e), ErrorCode.DATABASE)
    except Exception:
        await db.rollback()
        logger.exception(f"[{name}] Unexpected error")
        return ActionResult.fail("An unexpected error occurred", ErrorCode.UNEXPECTED)

    # 5. Audit (best-effort)
    for entry in ctx.audit_entries:
        await audit_service.record(db, entry)

    # 6. Invalidate cached views (fire-and-forget)
    if ctx.stale_paths:
        await cache_invalidator.invalidate(*ctx.stale_paths)

    return ActionResult.ok(result)
