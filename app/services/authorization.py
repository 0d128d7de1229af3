"""
Authorization guard.

Resolves the caller from an explicit bearer credential, loads their active
role assignments and decides allow/deny for a role set and scope. Read-only;
any lookup failure denies.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.journal import Journal
from app.models.user import User, RoleAssignment, RoleKey
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)


class AuthStatus(str, enum.Enum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"  # no / invalid credential
    FORBIDDEN = "forbidden"  # valid actor, insufficient role


@dataclass(frozen=True)
class Scope:
    """Where an operation applies. Both ids empty means global."""
    tenant_id: Optional[int] = None
    journal_id: Optional[int] = None

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None and self.journal_id is None


GLOBAL_SCOPE = Scope()


@dataclass(frozen=True)
class RoleGrant:
    role: RoleKey
    tenant_id: Optional[int] = None
    journal_id: Optional[int] = None

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None and self.journal_id is None

    def covers(self, scope: Scope) -> bool:
        if self.is_global:
            return True
        if self.journal_id is not None:
            return scope.journal_id is not None and self.journal_id == scope.journal_id
        return scope.tenant_id is not None and self.tenant_id == scope.tenant_id


@dataclass
class Actor:
    """Resolved caller identity with its active role grants"""
    id: int
    email: str
    grants: List[RoleGrant] = field(default_factory=list)

    @property
    def is_super_admin(self) -> bool:
        """Only a global super_admin grant counts"""
        return any(grant.role == RoleKey.SUPER_ADMIN and grant.is_global for grant in self.grants)

    def has_any_role(self, roles: Iterable[RoleKey], scope: Scope = GLOBAL_SCOPE) -> bool:
        """super_admin satisfies every role in every scope"""
        if self.is_super_admin:
            return True
        wanted = set(roles)
        return any(grant.role in wanted and grant.covers(scope) for grant in self.grants)


@dataclass
class AuthResult:
    status: AuthStatus
    actor: Optional[Actor] = None

    @property
    def authorized(self) -> bool:
        return self.status == AuthStatus.AUTHORIZED


async def resolve_actor(db: AsyncSession, credentials: Optional[str]) -> Optional[Actor]:
    """
    Resolve the current actor from a bearer credential.

    Returns None when the credential is missing, invalid, points to an
    unknown or inactive user, or when the lookup itself fails.
    """
    user_id = auth_service.resolve_user_id(credentials)
    if user_id is None:
        return None

    try:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user or not user.is_active:
            return None

        grants_result = await db.execute(
            select(RoleAssignment.role, RoleAssignment.tenant_id, RoleAssignment.journal_id).where(
                RoleAssignment.user_id == user_id,
                RoleAssignment.is_active.is_(True),
            )
        )
        grants = [
            RoleGrant(role=RoleKey(role), tenant_id=tenant_id, journal_id=journal_id)
            for role, tenant_id, journal_id in grants_result.all()
        ]
    except SQLAlchemyError as e:
        logger.error(f"Actor lookup failed for user {user_id}: {e}")
        return None

    return Actor(id=user.id, email=user.email, grants=grants)


async def authorize(
    db: AsyncSession,
    credentials: Optional[str],
    roles: Optional[Iterable[RoleKey]] = (RoleKey.SUPER_ADMIN,),
    scope: Scope = GLOBAL_SCOPE,
) -> AuthResult:
    """
    Decide whether the bearer of `credentials` may act with one of `roles` in `scope`.

    roles=None only requires an authenticated, active actor.
    """
    actor = await resolve_actor(db, credentials)
    if actor is None:
        return AuthResult(status=AuthStatus.UNAUTHORIZED)

    if roles is None or actor.has_any_role(roles, scope):
        return AuthResult(status=AuthStatus.AUTHORIZED, actor=actor)

    return AuthResult(status=AuthStatus.FORBIDDEN, actor=actor)


async def journal_scope(db: AsyncSession, journal_id: Optional[int]) -> Scope:
    """Scope of a journal, including its tenant. Unknown journals fall back to global."""
    if journal_id is None:
        return GLOBAL_SCOPE
    result = await db.execute(select(Journal.tenant_id).where(Journal.id == journal_id))
    tenant_id = result.scalar_one_or_none()
    if tenant_id is None:
        return GLOBAL_SCOPE
    return Scope(tenant_id=tenant_id, journal_id=journal_id)
