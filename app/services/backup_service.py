"""
Backup Service

Backup history lives in an optional table. When the backups capability is
off, reads return an empty history and create still succeeds (audited) but
keeps no record.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.capabilities import capabilities
from app.core.exceptions import NotFoundError
from app.models.backup import Backup
from app.schemas.backup import BackupCreate, BackupInfo, BackupResponse
from app.schemas.common import ActionResult, IdPayload
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

BACKUP_PATHS = ("/admin/backup",)
BACKUP_HISTORY_LIMIT = 50


class BackupService:
    """Service for backup history"""

    async def _info(self, ctx: ActionContext, _: Any) -> BackupInfo:
        if not capabilities.backups:
            return BackupInfo(available=False)

        result = await ctx.db.execute(
            select(Backup).order_by(Backup.created_at.desc(), Backup.id.desc()).limit(BACKUP_HISTORY_LIMIT)
        )
        backups = [BackupResponse.model_validate(b) for b in result.scalars().all()]
        totals = await ctx.db.execute(select(func.count(Backup.id), func.coalesce(func.sum(Backup.file_size), 0)))
        total_backups, total_size = totals.one()

        return BackupInfo(
            available=True,
            backups=backups,
            total_backups=total_backups or 0,
            total_size=int(total_size or 0),
            last_backup=backups[0].created_at if backups else None,
        )

    async def _create(self, ctx: ActionContext, data: BackupCreate) -> Dict[str, Any]:
        record: Optional[BackupResponse] = None
        backup_id = None
        if capabilities.backups:
            backup = Backup(
                backup_type=data.backup_type,
                description=data.description,
                status="completed",
                created_by=ctx.actor_id,
            )
            ctx.db.add(backup)
            await ctx.db.flush()
            await ctx.db.refresh(backup)
            backup_id = backup.id
            record = BackupResponse.model_validate(backup)
        else:
            logger.info("Backups table not available, backup not recorded")

        ctx.audit(
            "backup_created",
            "backup",
            backup_id,
            {"backup_type": data.backup_type, "description": data.description, "recorded": record is not None},
        )
        ctx.invalidate(*BACKUP_PATHS)
        return {"backup_type": data.backup_type, "status": "completed", "backup": record}

    async def _delete(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        if not capabilities.backups:
            raise NotFoundError("Backup not found")

        result = await ctx.db.execute(select(Backup).where(Backup.id == data.id))
        backup = result.scalar_one_or_none()
        if not backup:
            raise NotFoundError("Backup not found")
        backup_type = backup.backup_type
        await ctx.db.delete(backup)
        await ctx.db.flush()

        ctx.audit("backup_deleted", "backup", data.id, {"backup_type": backup_type})
        ctx.invalidate(*BACKUP_PATHS)
        return {"id": data.id}

    async def get_backup_info(self, db: AsyncSession, credentials: CredentialsLike) -> ActionResult:
        return await run_action("get_backup_info", db, credentials, self._info)

    async def create_backup(self, db: AsyncSession, credentials: CredentialsLike, payload: Any = None) -> ActionResult:
        return await run_action("create_backup", db, credentials, self._create, payload or {}, BackupCreate)

    async def delete_backup(self, db: AsyncSession, credentials: CredentialsLike, backup_id: Any) -> ActionResult:
        return await run_action("delete_backup", db, credentials, self._delete, {"id": backup_id}, IdPayload)


# Global backup service instance
backup_service = BackupService()
