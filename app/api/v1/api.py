"""
API v1 router
"""
from fastapi import APIRouter

from app.api.v1.endpoints import (
    activity_logs,
    announcements,
    api_keys,
    backups,
    dashboard,
    email_templates,
    issues,
    journals,
    languages,
    maintenance,
    navigation,
    plugins,
    site_settings,
    statistics,
    submissions,
    tasks,
    users,
)

api_router = APIRouter()

# Administration (super_admin)
api_router.include_router(dashboard.router, prefix="/admin/dashboard", tags=["Admin - Dashboard"])
api_router.include_router(journals.router, prefix="/admin/journals", tags=["Admin - Journals"])
api_router.include_router(issues.router, prefix="/admin/issues", tags=["Admin - Issues"])
api_router.include_router(users.router, prefix="/admin/users", tags=["Admin - Users"])
api_router.include_router(api_keys.router, prefix="/admin/api-keys", tags=["Admin - API Keys"])
api_router.include_router(activity_logs.router, prefix="/admin/activity-log", tags=["Admin - Activity Log"])
api_router.include_router(navigation.router, prefix="/admin/navigation", tags=["Admin - Navigation"])
api_router.include_router(site_settings.router, prefix="/admin/settings", tags=["Admin - Site Settings"])
api_router.include_router(plugins.router, prefix="/admin/plugins", tags=["Admin - Plugins"])
api_router.include_router(email_templates.router, prefix="/admin/email-templates", tags=["Admin - Email Templates"])
api_router.include_router(announcements.router, prefix="/admin/announcements", tags=["Admin - Announcements"])
api_router.include_router(backups.router, prefix="/admin/backup", tags=["Admin - Backup"])
api_router.include_router(tasks.router, prefix="/admin/tasks", tags=["Admin - Tasks"])
api_router.include_router(maintenance.router, prefix="/admin/maintenance", tags=["Admin - Maintenance"])
api_router.include_router(languages.router, prefix="/admin/languages", tags=["Admin - Languages"])
api_router.include_router(statistics.router, prefix="/admin/statistics", tags=["Admin - Statistics"])
api_router.include_router(
    statistics.system_info_router, prefix="/admin/system-info", tags=["Admin - System Info"]
)

# Editorial workflow
api_router.include_router(submissions.router, prefix="/submissions", tags=["Submissions"])
api_router.include_router(submissions.reviews_router, prefix="/reviews", tags=["Reviews"])


@api_router.get("/")
async def api_root():
    """API v1 root endpoint"""
    return {
        "message": "Journal Admin API v1",
        "status": "active",
        "version": "1.0.0",
        "endpoints": {
            "admin": "/admin/* (super_admin only)",
            "submissions": "/submissions",
            "reviews": "/reviews",
            "docs": "/docs",
            "health": "/health"
        }
    }
