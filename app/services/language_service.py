"""
Language Service

Site languages are two site_settings rows in the localization group:
default_language (string) and supported_languages (JSON list).
"""
import json
import logging
from typing import Any, List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.site import SettingGroup, SettingType, SiteSetting
from app.schemas.common import ActionResult
from app.schemas.language import AVAILABLE_LANGUAGES, LanguageSettings, LanguageSettingsUpdate
from app.schemas.site_settings import SiteSettingUpsert
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.site_settings_service import site_settings_service

logger = logging.getLogger(__name__)

LANGUAGE_PATHS = ("/admin/languages", "/admin/dashboard", "/")
DEFAULT_LANGUAGE_SETTING = "default_language"
SUPPORTED_LANGUAGES_SETTING = "supported_languages"


def parse_supported_languages(raw: Any) -> List[str]:
    if raw is None:
        return list(settings.DEFAULT_SUPPORTED_LANGUAGES)
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Unreadable supported_languages setting: {raw!r}")
        return list(settings.DEFAULT_SUPPORTED_LANGUAGES)
    if not isinstance(value, list) or not all(isinstance(code, str) for code in value):
        logger.warning(f"Unreadable supported_languages setting: {raw!r}")
        return list(settings.DEFAULT_SUPPORTED_LANGUAGES)
    return value


class LanguageService:
    """Service for site language settings"""

    async def _read(self, db: AsyncSession) -> Tuple[str, List[str]]:
        result = await db.execute(
            select(SiteSetting.setting_name, SiteSetting.setting_value).where(
                SiteSetting.setting_name.in_([DEFAULT_LANGUAGE_SETTING, SUPPORTED_LANGUAGES_SETTING])
            )
        )
        stored = dict(result.all())
        default_language = stored.get(DEFAULT_LANGUAGE_SETTING) or settings.DEFAULT_LANGUAGE
        supported = parse_supported_languages(stored.get(SUPPORTED_LANGUAGES_SETTING))

        # The default language always comes first among the supported ones
        if default_language not in supported:
            supported = [default_language] + supported
        return default_language, supported

    async def _get(self, ctx: ActionContext, _: Any) -> LanguageSettings:
        default_language, supported = await self._read(ctx.db)
        return LanguageSettings(
            default_language=default_language,
            supported_languages=supported,
            available_languages=AVAILABLE_LANGUAGES,
        )

    async def _update(self, ctx: ActionContext, data: LanguageSettingsUpdate) -> LanguageSettings:
        db = ctx.db
        before_default, before_supported = await self._read(db)

        await site_settings_service.upsert_setting(
            db,
            SiteSettingUpsert(
                setting_name=DEFAULT_LANGUAGE_SETTING,
                setting_value=data.default_language,
                setting_type=SettingType.STRING,
                setting_group=SettingGroup.LOCALIZATION,
            ),
        )
        await site_settings_service.upsert_setting(
            db,
            SiteSettingUpsert(
                setting_name=SUPPORTED_LANGUAGES_SETTING,
                setting_value=data.supported_languages,
                setting_type=SettingType.JSON,
                setting_group=SettingGroup.LOCALIZATION,
            ),
        )
        await db.flush()

        ctx.audit(
            "update_language_settings",
            "settings",
            None,
            {
                "before": {"default_language": before_default, "supported_languages": before_supported},
                "after": {"default_language": data.default_language, "supported_languages": data.supported_languages},
            },
        )
        ctx.invalidate(*LANGUAGE_PATHS)
        return LanguageSettings(default_language=data.default_language, supported_languages=data.supported_languages)

    async def get_language_settings(self, db: AsyncSession, credentials: CredentialsLike) -> ActionResult:
        return await run_action("get_language_settings", db, credentials, self._get)

    async def update_language_settings(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action(
            "update_language_settings", db, credentials, self._update, payload, LanguageSettingsUpdate
        )


# Global language service instance
language_service = LanguageService()
