"""
Language settings tests
"""
import json

import pytest
from sqlalchemy import select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.models.site import SettingGroup, SiteSetting
from app.services.cache_service import cache_invalidator
from app.services.language_service import language_service


class TestLanguageSettings:

    @pytest.mark.asyncio
    async def test_defaults_before_configuration(self, db_session, admin_token):
        result = await language_service.get_language_settings(db_session, admin_token)

        assert result.success is True
        assert result.data.default_language == "id"
        assert result.data.supported_languages == ["id", "en"]
        codes = [language.code for language in result.data.available_languages]
        assert "en" in codes
        assert "ms" in codes

    @pytest.mark.asyncio
    async def test_update_stores_localization_settings(self, db_session, admin_token):
        result = await language_service.update_language_settings(
            db_session, admin_token, {"default_language": "EN", "supported_languages": ["en", "fr", "en", "De"]}
        )

        assert result.success is True
        assert result.data.default_language == "en"
        assert result.data.supported_languages == ["en", "fr", "de"]

        rows = (
            await db_session.execute(
                select(SiteSetting.setting_name, SiteSetting.setting_value, SiteSetting.setting_group)
                .order_by(SiteSetting.setting_name)
            )
        ).all()
        assert [(name, group) for name, _, group in rows] == [
            ("default_language", SettingGroup.LOCALIZATION),
            ("supported_languages", SettingGroup.LOCALIZATION),
        ]
        assert json.loads(rows[1][1]) == ["en", "fr", "de"]

        reread = await language_service.get_language_settings(db_session, admin_token)
        assert reread.data.default_language == "en"
        assert reread.data.supported_languages == ["en", "fr", "de"]

        log = (await db_session.execute(select(ActivityLog))).scalar_one()
        assert log.action == "update_language_settings"
        assert log.details["before"] == {"default_language": "id", "supported_languages": ["id", "en"]}
        assert log.details["after"]["default_language"] == "en"
        assert cache_invalidator.consume("/admin/languages") is True
        assert cache_invalidator.consume("/") is True

    @pytest.mark.asyncio
    async def test_default_must_be_supported(self, db_session, admin_token):
        result = await language_service.update_language_settings(
            db_session, admin_token, {"default_language": "fr", "supported_languages": ["en"]}
        )

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION
        assert any("Default language must be in supported languages" in m for m in result.details["_schema"])
        assert (await db_session.execute(select(SiteSetting.id))).scalars().all() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"default_language": "eng", "supported_languages": ["eng"]},
            {"default_language": "en", "supported_languages": []},
            {"default_language": "en", "supported_languages": ["en", "e1"]},
        ],
    )
    async def test_invalid_codes(self, db_session, admin_token, payload):
        result = await language_service.update_language_settings(db_session, admin_token, payload)

        assert result.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_stored_default_is_moved_into_supported(self, db_session, admin_token):
        db_session.add_all([
            SiteSetting(setting_name="default_language", setting_value="ja"),
            SiteSetting(setting_name="supported_languages", setting_value="not json"),
        ])
        await db_session.commit()

        result = await language_service.get_language_settings(db_session, admin_token)

        assert result.data.default_language == "ja"
        assert result.data.supported_languages == ["ja", "id", "en"]

    @pytest.mark.asyncio
    async def test_reader_cannot_change_languages(self, db_session, reader_token):
        result = await language_service.update_language_settings(
            db_session, reader_token, {"default_language": "en", "supported_languages": ["en"]}
        )

        assert result.code == ErrorCode.FORBIDDEN
