"""
Site Settings Service
Key-value site configuration, upserted by setting_name.
"""
import json
import logging
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.site import SettingType, SiteSetting
from app.schemas.common import ActionResult
from app.schemas.site_settings import SiteSettingResponse, SiteSettingsBulk, SiteSettingsQuery, SiteSettingUpsert
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

SETTINGS_PATHS = ("/admin/settings", "/")


def serialize_setting_value(value: Any, setting_type: SettingType) -> Any:
    """Settings are stored as text"""
    if value is None:
        return None
    if setting_type == SettingType.JSON or isinstance(value, (dict, list)):
        return json.dumps(value)
    if setting_type == SettingType.BOOLEAN or isinstance(value, bool):
        if isinstance(value, str):
            return "true" if value.strip().lower() in ("true", "1", "yes", "on") else "false"
        return "true" if value else "false"
    return str(value)


class SiteSettingsService:
    """Service for site-wide settings"""

    async def upsert_setting(self, db: AsyncSession, data: SiteSettingUpsert) -> SiteSetting:
        """Insert or replace one setting by name; the caller flushes"""
        result = await db.execute(select(SiteSetting).where(SiteSetting.setting_name == data.setting_name))
        setting = result.scalar_one_or_none()
        value = serialize_setting_value(data.setting_value, data.setting_type)

        if setting is None:
            setting = SiteSetting(setting_name=data.setting_name)
            db.add(setting)
        setting.setting_value = value
        setting.setting_type = data.setting_type
        setting.setting_group = data.setting_group
        if data.description is not None:
            setting.description = data.description
        return setting

    async def _list(self, ctx: ActionContext, query: SiteSettingsQuery) -> List[SiteSettingResponse]:
        statement = select(SiteSetting)
        if query.setting_group:
            statement = statement.where(SiteSetting.setting_group == query.setting_group)
        result = await ctx.db.execute(statement.order_by(SiteSetting.setting_group, SiteSetting.setting_name))
        return [SiteSettingResponse.model_validate(setting) for setting in result.scalars().all()]

    async def _update_one(self, ctx: ActionContext, data: SiteSettingUpsert) -> SiteSettingResponse:
        setting = await self.upsert_setting(ctx.db, data)
        await ctx.db.flush()
        await ctx.db.refresh(setting)

        ctx.audit("update_site_setting", "site_setting", setting.id, {"setting_name": setting.setting_name})
        ctx.invalidate(*SETTINGS_PATHS)
        return SiteSettingResponse.model_validate(setting)

    async def _update_bulk(self, ctx: ActionContext, data: SiteSettingsBulk) -> Dict[str, Any]:
        names = []
        for item in data.settings:
            await self.upsert_setting(ctx.db, item)
            await ctx.db.flush()
            names.append(item.setting_name)

        ctx.audit("update_site_settings_bulk", "site_setting", None, {"settings": names})
        ctx.invalidate(*SETTINGS_PATHS)
        return {"updated": len(names), "settings": names}

    async def list_settings(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_site_settings", db, credentials, self._list, query or {}, SiteSettingsQuery)

    async def update_setting(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_site_setting", db, credentials, self._update_one, payload, SiteSettingUpsert)

    async def update_settings(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_site_settings_bulk", db, credentials, self._update_bulk, payload, SiteSettingsBulk)


# Global site settings service instance
site_settings_service = SiteSettingsService()
