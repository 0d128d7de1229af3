"""
Email Template Service
Templates are seeded by init_db.py; the admin panel edits them.
"""
import logging
from typing import Any, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.site import EmailTemplate
from app.schemas.common import ActionResult
from app.schemas.email_template import EmailTemplateResponse, EmailTemplateUpdate
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

EMAIL_TEMPLATE_PATHS = ("/admin/email-templates",)


class EmailTemplateService:

    async def _list(self, ctx: ActionContext, _: Any) -> List[EmailTemplateResponse]:
        result = await ctx.db.execute(select(EmailTemplate).order_by(EmailTemplate.key))
        return [EmailTemplateResponse.model_validate(template) for template in result.scalars().all()]

    async def _update(self, ctx: ActionContext, data: EmailTemplateUpdate) -> EmailTemplateResponse:
        result = await ctx.db.execute(select(EmailTemplate).where(EmailTemplate.id == data.id))
        template = result.scalar_one_or_none()
        if not template:
            raise NotFoundError("Email template not found")

        changes = {k: v for k, v in data.model_dump(exclude_unset=True, exclude={"id"}).items() if v is not None}
        for field, value in changes.items():
            setattr(template, field, value)
        await ctx.db.flush()
        await ctx.db.refresh(template)

        action = "email_template_status_updated" if set(changes) == {"enabled"} else "email_template_updated"
        ctx.audit(action, "email_template", template.id, {"key": template.key, "fields": sorted(changes)})
        ctx.invalidate(*EMAIL_TEMPLATE_PATHS)
        return EmailTemplateResponse.model_validate(template)

    async def list_templates(self, db: AsyncSession, credentials: CredentialsLike) -> ActionResult:
        return await run_action("list_email_templates", db, credentials, self._list)

    async def update_template(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_email_template", db, credentials, self._update, payload, EmailTemplateUpdate)


# Global email template service instance
email_template_service = EmailTemplateService()
