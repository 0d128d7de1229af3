"""
Submission Service
Editorial workflow: submission, review assignment, review completion,
editorial decisions and publication.

Status flow:
    draft -> submitted -> under_review -> review_completed
          -> accepted | declined | revision_requested -> submitted ...
    accepted -> published
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.models.journal import Article, Issue, Journal
from app.models.submission import (
    DecisionType,
    EditorialDecision,
    ReviewAssignment,
    ReviewStatus,
    Submission,
    SubmissionStatus,
)
from app.models.user import EDITORIAL_ROLES, RoleAssignment, RoleKey, User
from app.schemas.common import ActionResult, IdPayload, Page, PageQuery
from app.schemas.submission import (
    ArticleResponse,
    DecisionCreate,
    DecisionResponse,
    PublishSubmission,
    ReviewAssignmentResponse,
    ReviewCompletion,
    ReviewerAssignmentCreate,
    SubmissionCreate,
    SubmissionQuery,
    SubmissionResponse,
)
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.authorization import GLOBAL_SCOPE, Scope, journal_scope

logger = logging.getLogger(__name__)

SUBMISSION_PATHS = ("/dashboard/submissions", "/dashboard/reviews")

DECISION_OUTCOMES = {
    DecisionType.ACCEPT: SubmissionStatus.ACCEPTED,
    DecisionType.DECLINE: SubmissionStatus.DECLINED,
    DecisionType.REVISION: SubmissionStatus.REVISION_REQUESTED,
    DecisionType.RESUBMIT: SubmissionStatus.SUBMITTED,
}

# Statuses an editor can decide on; revision_requested waits for the author to resubmit
DECIDABLE_STATUSES = (
    SubmissionStatus.SUBMITTED,
    SubmissionStatus.UNDER_REVIEW,
    SubmissionStatus.REVIEW_COMPLETED,
)


async def submission_scope(db: AsyncSession, data: Any) -> Scope:
    """Scope of the journal owning data.submission_id; unknown submissions resolve to global"""
    result = await db.execute(select(Submission.journal_id).where(Submission.id == data.submission_id))
    journal_id = result.scalar_one_or_none()
    if journal_id is None:
        return GLOBAL_SCOPE
    return await journal_scope(db, journal_id)


class SubmissionService:
    """Service for the editorial workflow"""

    async def _get_submission(self, db: AsyncSession, submission_id: int) -> Submission:
        result = await db.execute(select(Submission).where(Submission.id == submission_id))
        submission = result.scalar_one_or_none()
        if not submission:
            raise NotFoundError("Submission not found")
        return submission

    async def _is_editor_for(self, ctx: ActionContext, journal_id: int) -> bool:
        scope = await journal_scope(ctx.db, journal_id)
        return ctx.actor is not None and ctx.actor.has_any_role(EDITORIAL_ROLES, scope)

    # ==================== SUBMISSIONS ====================

    async def _create(self, ctx: ActionContext, data: SubmissionCreate) -> SubmissionResponse:
        db = ctx.db
        result = await db.execute(select(Journal).where(Journal.id == data.journal_id))
        journal = result.scalar_one_or_none()
        if not journal:
            raise NotFoundError("Journal not found")
        if not journal.is_active:
            raise ConflictError("Journal is not accepting submissions")

        submission = Submission(
            journal_id=data.journal_id,
            submitter_id=ctx.actor_id,
            title=data.title,
            abstract=data.abstract,
            language=data.language,
            status=SubmissionStatus.DRAFT,
            current_round=1,
        )
        db.add(submission)
        await db.flush()
        await db.refresh(submission)

        ctx.audit("submission_created", "submission", submission.id, {"journal_id": submission.journal_id})
        ctx.invalidate(*SUBMISSION_PATHS)
        return SubmissionResponse.model_validate(submission)

    async def _list(self, ctx: ActionContext, query: SubmissionQuery) -> Page:
        filters = []
        if query.journal_id:
            filters.append(Submission.journal_id == query.journal_id)
            if not await self._is_editor_for(ctx, query.journal_id):
                filters.append(Submission.submitter_id == ctx.actor_id)
        elif not ctx.actor.is_super_admin:
            filters.append(Submission.submitter_id == ctx.actor_id)
        if query.status:
            filters.append(Submission.status == query.status)

        total = (await ctx.db.execute(select(func.count(Submission.id)).where(*filters))).scalar() or 0
        result = await ctx.db.execute(
            select(Submission)
            .where(*filters)
            .order_by(Submission.created_at.desc(), Submission.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        items = [SubmissionResponse.model_validate(s) for s in result.scalars().all()]
        return Page.build(items, total, query.page, query.limit)

    async def _get(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        db = ctx.db
        submission = await self._get_submission(db, data.id)

        reviews = (
            await db.execute(
                select(ReviewAssignment)
                .where(ReviewAssignment.submission_id == submission.id)
                .order_by(ReviewAssignment.round, ReviewAssignment.id)
            )
        ).scalars().all()

        is_owner = submission.submitter_id == ctx.actor_id
        is_reviewer = any(review.reviewer_id == ctx.actor_id for review in reviews)
        if not (is_owner or is_reviewer or await self._is_editor_for(ctx, submission.journal_id)):
            raise ForbiddenError("You do not have access to this submission")

        decisions = (
            await db.execute(
                select(EditorialDecision)
                .where(EditorialDecision.submission_id == submission.id)
                .order_by(EditorialDecision.created_at, EditorialDecision.id)
            )
        ).scalars().all()

        return {
            "submission": SubmissionResponse.model_validate(submission),
            "reviews": [ReviewAssignmentResponse.model_validate(r) for r in reviews],
            "decisions": [DecisionResponse.model_validate(d) for d in decisions],
        }

    async def _submit(self, ctx: ActionContext, data: IdPayload) -> SubmissionResponse:
        db = ctx.db
        submission = await self._get_submission(db, data.id)
        if submission.submitter_id != ctx.actor_id:
            raise ForbiddenError("Only the submitter can submit this submission")
        if submission.status not in (SubmissionStatus.DRAFT, SubmissionStatus.REVISION_REQUESTED):
            raise ConflictError("Submission already submitted")

        submission.status = SubmissionStatus.SUBMITTED
        submission.submission_date = datetime.utcnow()
        await db.flush()
        await db.refresh(submission)

        ctx.audit("submission_submitted", "submission", submission.id, {"round": submission.current_round})
        ctx.invalidate(*SUBMISSION_PATHS)
        return SubmissionResponse.model_validate(submission)

    # ==================== REVIEWS ====================

    async def _assign_reviewer(self, ctx: ActionContext, data: ReviewerAssignmentCreate) -> ReviewAssignmentResponse:
        db = ctx.db
        submission = await self._get_submission(db, data.submission_id)
        if submission.status not in (SubmissionStatus.SUBMITTED, SubmissionStatus.UNDER_REVIEW):
            raise ConflictError("Reviewers can only be assigned to submitted submissions")

        reviewer = (await db.execute(select(User).where(User.id == data.reviewer_id))).scalar_one_or_none()
        if not reviewer or not reviewer.is_active:
            raise NotFoundError("Reviewer not found")
        if reviewer.id == submission.submitter_id:
            raise ConflictError("The submitter cannot review their own submission")

        has_reviewer_role = (
            await db.execute(
                select(RoleAssignment.id).where(
                    RoleAssignment.user_id == reviewer.id,
                    RoleAssignment.role == RoleKey.REVIEWER,
                    RoleAssignment.is_active.is_(True),
                ).limit(1)
            )
        ).scalar_one_or_none()
        if has_reviewer_role is None:
            raise ConflictError("User does not have the reviewer role")

        existing = (
            await db.execute(
                select(ReviewAssignment.id).where(
                    ReviewAssignment.submission_id == submission.id,
                    ReviewAssignment.reviewer_id == reviewer.id,
                    ReviewAssignment.round == submission.current_round,
                    ReviewAssignment.status != ReviewStatus.CANCELLED,
                )
            )
        ).scalar_one_or_none()
        if existing is not None:
            raise ConflictError("Reviewer is already assigned for this round")

        assignment = ReviewAssignment(
            submission_id=submission.id,
            reviewer_id=reviewer.id,
            editor_id=ctx.actor_id,
            round=submission.current_round,
            status=ReviewStatus.PENDING,
            review_due_date=data.review_due_date,
        )
        db.add(assignment)
        submission.status = SubmissionStatus.UNDER_REVIEW
        if submission.editor_id is None:
            submission.editor_id = ctx.actor_id
        await db.flush()
        await db.refresh(assignment)

        ctx.audit(
            "reviewer_assigned",
            "submission",
            submission.id,
            {"reviewer_id": reviewer.id, "round": assignment.round, "review_id": assignment.id},
        )
        ctx.invalidate(*SUBMISSION_PATHS)
        return ReviewAssignmentResponse.model_validate(assignment)

    async def _complete_review(self, ctx: ActionContext, data: ReviewCompletion) -> ReviewAssignmentResponse:
        db = ctx.db
        result = await db.execute(select(ReviewAssignment).where(ReviewAssignment.id == data.review_id))
        review = result.scalar_one_or_none()
        if not review:
            raise NotFoundError("Review assignment not found")
        if review.reviewer_id != ctx.actor_id:
            raise ForbiddenError("Only the assigned reviewer can complete this review")
        if review.status == ReviewStatus.COMPLETED:
            raise ConflictError("Review already completed")
        if review.status == ReviewStatus.CANCELLED:
            raise ConflictError("Review assignment was cancelled")

        review.status = ReviewStatus.COMPLETED
        review.recommendation = data.recommendation
        review.review_form_data = data.review_form_data
        review.review_completed_date = datetime.utcnow()
        await db.flush()

        pending = (
            await db.execute(
                select(func.count(ReviewAssignment.id)).where(
                    ReviewAssignment.submission_id == review.submission_id,
                    ReviewAssignment.round == review.round,
                    ReviewAssignment.status == ReviewStatus.PENDING,
                )
            )
        ).scalar() or 0
        if pending == 0:
            submission = await self._get_submission(db, review.submission_id)
            if submission.status == SubmissionStatus.UNDER_REVIEW:
                submission.status = SubmissionStatus.REVIEW_COMPLETED
                await db.flush()
        await db.refresh(review)

        ctx.audit(
            "review_completed",
            "submission",
            review.submission_id,
            {"review_id": review.id, "recommendation": data.recommendation.value},
        )
        ctx.invalidate(*SUBMISSION_PATHS)
        return ReviewAssignmentResponse.model_validate(review)

    async def _list_my_reviews(self, ctx: ActionContext, query: PageQuery) -> Page:
        filters = [ReviewAssignment.reviewer_id == ctx.actor_id]
        total = (await ctx.db.execute(select(func.count(ReviewAssignment.id)).where(*filters))).scalar() or 0
        result = await ctx.db.execute(
            select(ReviewAssignment)
            .where(*filters)
            .order_by(ReviewAssignment.created_at.desc(), ReviewAssignment.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        items = [ReviewAssignmentResponse.model_validate(r) for r in result.scalars().all()]
        return Page.build(items, total, query.page, query.limit)

    # ==================== DECISIONS ====================

    async def _record_decision(self, ctx: ActionContext, data: DecisionCreate) -> DecisionResponse:
        db = ctx.db
        submission = await self._get_submission(db, data.submission_id)
        if submission.status not in DECIDABLE_STATUSES:
            raise ConflictError(f"Cannot record a decision on a {submission.status.value} submission")

        decision = EditorialDecision(
            submission_id=submission.id,
            editor_id=ctx.actor_id,
            decision_type=data.decision_type,
            round=submission.current_round,
            comments=data.comments,
        )
        db.add(decision)

        submission.status = DECISION_OUTCOMES[data.decision_type]
        if data.decision_type == DecisionType.REVISION:
            submission.current_round += 1
        await db.flush()
        await db.refresh(decision)

        ctx.audit(
            "editorial_decision_recorded",
            "submission",
            submission.id,
            {"decision": data.decision_type.value, "round": decision.round, "status": submission.status.value},
        )
        ctx.invalidate(*SUBMISSION_PATHS)
        return DecisionResponse.model_validate(decision)

    async def _publish(self, ctx: ActionContext, data: PublishSubmission) -> ArticleResponse:
        db = ctx.db
        submission = await self._get_submission(db, data.submission_id)
        if submission.status != SubmissionStatus.ACCEPTED:
            raise ConflictError("Only accepted submissions can be published")

        issue: Optional[Issue] = None
        if data.issue_id is not None:
            issue = (await db.execute(select(Issue).where(Issue.id == data.issue_id))).scalar_one_or_none()
            if not issue or issue.journal_id != submission.journal_id:
                raise NotFoundError("Issue not found")

        now = datetime.utcnow()
        article = Article(
            journal_id=submission.journal_id,
            issue_id=issue.id if issue else None,
            submission_id=submission.id,
            title=submission.title,
            abstract=submission.abstract,
            doi=data.doi,
            pages=data.pages,
            published_date=now,
        )
        db.add(article)
        submission.status = SubmissionStatus.PUBLISHED
        await db.flush()
        await db.refresh(article)

        ctx.audit(
            "submission_published",
            "submission",
            submission.id,
            {"article_id": article.id, "issue_id": article.issue_id},
        )
        ctx.invalidate(*SUBMISSION_PATHS)
        if issue is not None:
            ctx.invalidate("/admin/issues")
        return ArticleResponse.model_validate(article)

    # ==================== PUBLIC API ====================

    async def create_submission(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_submission", db, credentials, self._create, payload, SubmissionCreate, roles=None)

    async def list_submissions(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action(
            "list_submissions", db, credentials, self._list, query or {}, SubmissionQuery, roles=None
        )

    async def get_submission(self, db: AsyncSession, credentials: CredentialsLike, submission_id: Any) -> ActionResult:
        return await run_action(
            "get_submission", db, credentials, self._get, {"id": submission_id}, IdPayload, roles=None
        )

    async def submit_submission(self, db: AsyncSession, credentials: CredentialsLike, submission_id: Any) -> ActionResult:
        return await run_action(
            "submit_submission", db, credentials, self._submit, {"id": submission_id}, IdPayload, roles=None
        )

    async def assign_reviewer(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action(
            "assign_reviewer",
            db,
            credentials,
            self._assign_reviewer,
            payload,
            ReviewerAssignmentCreate,
            roles=EDITORIAL_ROLES,
            scope=submission_scope,
        )

    async def complete_review(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action(
            "complete_review", db, credentials, self._complete_review, payload, ReviewCompletion, roles=None
        )

    async def list_my_reviews(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action(
            "list_my_reviews", db, credentials, self._list_my_reviews, query or {}, PageQuery, roles=None
        )

    async def record_decision(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action(
            "record_decision",
            db,
            credentials,
            self._record_decision,
            payload,
            DecisionCreate,
            roles=EDITORIAL_ROLES,
            scope=submission_scope,
        )

    async def publish_submission(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action(
            "publish_submission",
            db,
            credentials,
            self._publish,
            payload,
            PublishSubmission,
            roles=EDITORIAL_ROLES,
            scope=submission_scope,
        )


# Global submission service instance
submission_service = SubmissionService()
