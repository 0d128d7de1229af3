"""
HTTP adapter tests: status codes and the response envelope
"""
import pytest
from sqlalchemy import func, select

from app.models.audit import ActivityLog

API = "/api/v1"


class TestEnvelopeOverHttp:

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, client):
        response = await client.get(f"{API}/admin/issues/")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json() == {"success": False, "data": None, "error": "Unauthorized"}

    @pytest.mark.asyncio
    async def test_wrong_role_is_403(self, client, reader_headers):
        response = await client.get(f"{API}/admin/journals/", headers=reader_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_invalid_body_is_400_with_details(self, client, admin_headers):
        response = await client.post(f"{API}/admin/issues/", json={"journal_id": 1}, headers=admin_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"
        assert "year" in body["details"]

    @pytest.mark.asyncio
    async def test_malformed_path_param_uses_envelope(self, client, admin_headers):
        response = await client.post(f"{API}/admin/issues/not-a-number/publish", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_not_found_is_404(self, client, admin_headers):
        response = await client.delete(f"{API}/admin/announcements/999", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Announcement not found"

    @pytest.mark.asyncio
    async def test_create_is_201(self, client, journal, admin_headers):
        response = await client.post(
            f"{API}/admin/issues/",
            json={"journal_id": journal.id, "volume": 4, "number": "1", "year": 2024},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "draft"
        assert "error" not in body

    @pytest.mark.asyncio
    async def test_conflict_is_400(self, client, issue, admin_headers):
        issue_id = issue.id
        first = await client.post(f"{API}/admin/issues/{issue_id}/publish", headers=admin_headers)
        second = await client.post(f"{API}/admin/issues/{issue_id}/publish", headers=admin_headers)

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["error"] == "Issue is already published"

    @pytest.mark.asyncio
    async def test_request_metadata_reaches_audit_log(self, client, issue, admin_headers, db_session):
        issue_id = issue.id
        headers = {**admin_headers, "X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "admin-panel/1.0"}

        response = await client.post(f"{API}/admin/issues/{issue_id}/publish", headers=headers)

        assert response.status_code == 200
        ip, agent = (await db_session.execute(select(ActivityLog.ip_address, ActivityLog.user_agent))).one()
        assert ip == "203.0.113.7"
        assert agent == "admin-panel/1.0"


class TestEndpoints:

    @pytest.mark.asyncio
    async def test_api_key_flow(self, client, super_admin, admin_headers):
        created = await client.post(
            f"{API}/admin/api-keys/",
            json={"key_name": "CI", "user_id": super_admin.id},
            headers=admin_headers,
        )
        key_id = created.json()["data"]["api_key"]["id"]
        full_key = created.json()["data"]["full_key"]

        listing = await client.get(f"{API}/admin/api-keys/", headers=admin_headers)
        missing = await client.post(f"{API}/admin/api-keys/999/regenerate", headers=admin_headers)

        assert created.status_code == 201
        assert full_key not in listing.text
        assert listing.json()["data"]["items"][0]["id"] == key_id
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_navigation_reorder_route(self, client, admin_headers):
        first = await client.post(f"{API}/admin/navigation/", json={"name": "a", "title": "A"}, headers=admin_headers)
        second = await client.post(f"{API}/admin/navigation/", json={"name": "b", "title": "B"}, headers=admin_headers)
        a_id, b_id = first.json()["data"]["id"], second.json()["data"]["id"]

        response = await client.put(
            f"{API}/admin/navigation/reorder",
            json={"items": [{"id": b_id, "sequence": 0}, {"id": a_id, "sequence": 1}]},
            headers=admin_headers,
        )
        listing = await client.get(f"{API}/admin/navigation/", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {"updated": 2}
        assert [m["name"] for m in listing.json()["data"]] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_activity_cleanup_route(self, client, admin_headers, db_session):
        response = await client.post(f"{API}/admin/activity-log/cleanup", json={"days": 30}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["deleted"] == 0
        count = (await db_session.execute(select(func.count(ActivityLog.id)))).scalar()
        assert count == 1

    @pytest.mark.asyncio
    async def test_soft_and_hard_user_delete(self, client, reader, admin_headers):
        reader_id = reader.id

        soft = await client.delete(f"{API}/admin/users/{reader_id}", headers=admin_headers)
        fetched = await client.get(f"{API}/admin/users/{reader_id}", headers=admin_headers)
        hard = await client.delete(f"{API}/admin/users/{reader_id}?hard=true", headers=admin_headers)
        gone = await client.get(f"{API}/admin/users/{reader_id}", headers=admin_headers)

        assert soft.status_code == 200
        assert fetched.json()["data"]["is_active"] is False
        assert hard.status_code == 200
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_backup_info_degrades(self, client, admin_headers):
        response = await client.get(f"{API}/admin/backup/", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["available"] is False

    @pytest.mark.asyncio
    async def test_submission_routes(self, client, journal, reader_headers):
        journal_id = journal.id
        created = await client.post(
            f"{API}/submissions/", json={"journal_id": journal_id, "title": "Via HTTP"}, headers=reader_headers
        )
        submission_id = created.json()["data"]["id"]

        submitted = await client.post(f"{API}/submissions/{submission_id}/submit", headers=reader_headers)
        decision = await client.post(
            f"{API}/submissions/{submission_id}/decisions",
            json={"decision_type": "accept"},
            headers=reader_headers,
        )
        reviews = await client.get(f"{API}/reviews/", headers=reader_headers)

        assert created.status_code == 201
        assert submitted.json()["data"]["status"] == "submitted"
        assert decision.status_code == 403
        assert reviews.json()["data"]["total"] == 0

    @pytest.mark.asyncio
    async def test_task_routes(self, client, admin_headers):
        created = await client.post(
            f"{API}/admin/tasks/", json={"task_name": "Cache", "task_class": "clear_cache"}, headers=admin_headers
        )
        task_id = created.json()["data"]["id"]

        run = await client.post(f"{API}/admin/tasks/{task_id}/run", headers=admin_headers)
        fetched = await client.get(f"{API}/admin/tasks/{task_id}?include_logs=true", headers=admin_headers)
        duplicate = await client.post(
            f"{API}/admin/tasks/", json={"task_name": "Cache", "task_class": "clear_cache"}, headers=admin_headers
        )

        assert created.status_code == 201
        assert run.status_code == 200
        assert run.json()["data"]["status"] == "success"
        assert len(fetched.json()["data"]["logs"]) == 1
        assert duplicate.status_code == 400

    @pytest.mark.asyncio
    async def test_admin_report_routes(self, client, admin_headers, reader_headers):
        statistics = await client.get(f"{API}/admin/statistics/?period=month", headers=admin_headers)
        system_info = await client.get(f"{API}/admin/system-info/", headers=admin_headers)
        health = await client.get(f"{API}/admin/system-info/database-health", headers=admin_headers)
        stats = await client.get(f"{API}/admin/activity-log/stats", headers=admin_headers)
        maintenance = await client.post(
            f"{API}/admin/maintenance/run", json={"task_id": "clear_cache"}, headers=admin_headers
        )
        languages = await client.get(f"{API}/admin/languages/", headers=reader_headers)

        assert statistics.status_code == 200
        assert statistics.json()["data"]["period"] == "month"
        assert system_info.json()["data"]["database"]["dialect"] == "sqlite"
        assert health.json()["data"]["status"] == "healthy"
        assert stats.json()["data"]["total"] == 0
        assert maintenance.json()["data"]["task_id"] == "clear_cache"
        assert languages.status_code == 403


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["capabilities"] == {"backups": False}

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"
