"""
Plugin Service
Plugin settings are rows keyed by (plugin_name, journal_id, setting_name).
The "enabled" row holds the on/off switch; journal_id NULL means global.
"""
import json
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.journal import Journal
from app.models.site import PluginSetting
from app.schemas.common import ActionResult
from app.schemas.plugin import PluginList, PluginQuery, PluginRef, PluginResponse, PluginUpdate
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

PLUGIN_PATHS = ("/admin/plugins",)
ENABLED_SETTING = "enabled"


def encode_plugin_value(value: Any) -> Tuple[Optional[str], str]:
    """Return (stored text, setting_type)"""
    if value is None:
        return None, "string"
    if isinstance(value, bool):
        return ("true" if value else "false"), "boolean"
    if isinstance(value, (int, float)):
        return str(value), "number"
    if isinstance(value, (dict, list)):
        return json.dumps(value), "json"
    return str(value), "string"


def decode_plugin_value(value: Optional[str], setting_type: str) -> Any:
    if value is None:
        return None
    if setting_type == "boolean":
        return value == "true"
    if setting_type == "number":
        try:
            return int(value)
        except ValueError:
            return float(value)
    if setting_type == "json":
        return json.loads(value)
    return value


class PluginService:
    """Service for plugin configuration"""

    def _scope_filter(self, journal_id: Optional[int]):
        if journal_id is None:
            return PluginSetting.journal_id.is_(None)
        return PluginSetting.journal_id == journal_id

    async def _upsert(self, db: AsyncSession, plugin_name: str, journal_id: Optional[int], name: str, value: Any) -> None:
        result = await db.execute(
            select(PluginSetting).where(
                PluginSetting.plugin_name == plugin_name,
                self._scope_filter(journal_id),
                PluginSetting.setting_name == name,
            )
        )
        setting = result.scalar_one_or_none()
        stored, setting_type = encode_plugin_value(value)
        if setting is None:
            setting = PluginSetting(plugin_name=plugin_name, journal_id=journal_id, setting_name=name)
            db.add(setting)
        setting.setting_value = stored
        setting.setting_type = setting_type
        await db.flush()

    async def _load(self, db: AsyncSession, journal_id: Optional[int], plugin_name: Optional[str] = None) -> Dict[str, PluginResponse]:
        statement = select(PluginSetting).where(self._scope_filter(journal_id))
        if plugin_name:
            statement = statement.where(PluginSetting.plugin_name == plugin_name)
        result = await db.execute(statement.order_by(PluginSetting.plugin_name, PluginSetting.setting_name))

        plugins: Dict[str, PluginResponse] = {}
        for row in result.scalars().all():
            plugin = plugins.setdefault(
                row.plugin_name, PluginResponse(plugin_name=row.plugin_name, journal_id=journal_id, settings={})
            )
            value = decode_plugin_value(row.setting_value, row.setting_type)
            if row.setting_name == ENABLED_SETTING:
                plugin.enabled = bool(value)
            else:
                plugin.settings[row.setting_name] = value
        return plugins

    async def _list(self, ctx: ActionContext, query: PluginQuery) -> PluginList:
        plugins = await self._load(ctx.db, query.journal_id)
        return PluginList(plugins=list(plugins.values()))

    async def _update(self, ctx: ActionContext, data: PluginUpdate) -> PluginResponse:
        db = ctx.db
        if data.journal_id is not None:
            journal = (await db.execute(select(Journal.id).where(Journal.id == data.journal_id))).scalar_one_or_none()
            if journal is None:
                raise NotFoundError("Journal not found")

        if data.enabled is not None:
            await self._upsert(db, data.plugin_name, data.journal_id, ENABLED_SETTING, data.enabled)
        for name, value in data.settings.items():
            await self._upsert(db, data.plugin_name, data.journal_id, name, value)

        ctx.audit(
            "plugin_settings_updated",
            "plugin",
            data.plugin_name,
            {"journal_id": data.journal_id, "enabled": data.enabled, "settings": sorted(data.settings)},
        )
        ctx.invalidate(*PLUGIN_PATHS)
        plugins = await self._load(db, data.journal_id, data.plugin_name)
        return plugins.get(data.plugin_name) or PluginResponse(plugin_name=data.plugin_name, journal_id=data.journal_id)

    async def _delete(self, ctx: ActionContext, data: PluginRef) -> Dict[str, Any]:
        result = await ctx.db.execute(
            delete(PluginSetting).where(
                PluginSetting.plugin_name == data.plugin_name,
                self._scope_filter(data.journal_id),
            )
        )
        deleted = result.rowcount or 0
        if deleted == 0:
            raise NotFoundError("Plugin settings not found")

        ctx.audit("plugin_deleted", "plugin", data.plugin_name, {"journal_id": data.journal_id, "deleted": deleted})
        ctx.invalidate(*PLUGIN_PATHS)
        return {"plugin_name": data.plugin_name, "deleted": deleted}

    async def list_plugins(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_plugins", db, credentials, self._list, query or {}, PluginQuery)

    async def update_plugin(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_plugin", db, credentials, self._update, payload, PluginUpdate)

    async def delete_plugin(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("delete_plugin", db, credentials, self._delete, payload, PluginRef)


# Global plugin service instance
plugin_service = PluginService()
