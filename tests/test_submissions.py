"""
Editorial workflow tests

author submits -> editor assigns reviewer -> reviewer completes
-> editor decides -> editor publishes into an issue
"""
import pytest
import pytest_asyncio
from sqlalchemy import select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.models.journal import Article
from app.models.submission import Submission, SubmissionStatus
from app.models.user import RoleKey
from app.services.issue_service import issue_service
from app.services.submission_service import submission_service
from tests.conftest import create_user, token_for


@pytest_asyncio.fixture
async def people(db_session, journal):
    """Author, journal editor, reviewer and an outsider, as {name: (id, token)}"""
    author = await create_user(db_session, "author@example.com", [RoleKey.AUTHOR], "Ada Author")
    editor = await create_user(
        db_session, "editor@example.com", [(RoleKey.EDITOR, None, journal.id)], "Ed Editor"
    )
    reviewer = await create_user(db_session, "reviewer@example.com", [RoleKey.REVIEWER], "Rae Reviewer")
    outsider = await create_user(db_session, "outsider@example.com", [RoleKey.READER], "Otto Outsider")
    return {
        name: (user.id, token_for(user))
        for name, user in (("author", author), ("editor", editor), ("reviewer", reviewer), ("outsider", outsider))
    }


async def submitted_submission(db_session, journal_id, author_token) -> int:
    created = await submission_service.create_submission(
        db_session, author_token, {"journal_id": journal_id, "title": "On Testing"}
    )
    submission_id = created.data.id
    submitted = await submission_service.submit_submission(db_session, author_token, submission_id)
    assert submitted.success is True
    return submission_id


async def submission_status(db_session, submission_id):
    return (
        await db_session.execute(select(Submission.status).where(Submission.id == submission_id))
    ).scalar_one()


class TestSubmissionLifecycle:

    @pytest.mark.asyncio
    async def test_full_workflow(self, db_session, journal, issue, people, admin_token):
        journal_id, issue_id = journal.id, issue.id
        _, author_token = people["author"]
        editor_id, editor_token = people["editor"]
        reviewer_id, reviewer_token = people["reviewer"]

        submission_id = await submitted_submission(db_session, journal_id, author_token)
        assert await submission_status(db_session, submission_id) == SubmissionStatus.SUBMITTED

        assigned = await submission_service.assign_reviewer(
            db_session, editor_token, {"submission_id": submission_id, "reviewer_id": reviewer_id}
        )
        assert assigned.success is True
        assert await submission_status(db_session, submission_id) == SubmissionStatus.UNDER_REVIEW

        completed = await submission_service.complete_review(
            db_session,
            reviewer_token,
            {"review_id": assigned.data.id, "recommendation": "accept", "review_form_data": {"score": 5}},
        )
        assert completed.success is True
        assert await submission_status(db_session, submission_id) == SubmissionStatus.REVIEW_COMPLETED

        decided = await submission_service.record_decision(
            db_session, editor_token, {"submission_id": submission_id, "decision_type": "accept"}
        )
        assert decided.success is True
        assert decided.data.editor_id == editor_id

        published = await submission_service.publish_submission(
            db_session, editor_token, {"submission_id": submission_id, "issue_id": issue_id, "doi": "10.1/abc"}
        )
        assert published.success is True
        assert published.data.issue_id == issue_id
        assert published.data.title == "On Testing"
        assert await submission_status(db_session, submission_id) == SubmissionStatus.PUBLISHED

        # The issue now holds an article and can no longer be deleted
        article_ids = (await db_session.execute(select(Article.id))).scalars().all()
        assert len(article_ids) == 1
        blocked = await issue_service.delete_issue(db_session, admin_token, issue_id)
        assert blocked.code == ErrorCode.CONFLICT
        assert blocked.details == {"article_count": 1}

        actions = (await db_session.execute(select(ActivityLog.action).order_by(ActivityLog.id))).scalars().all()
        assert actions == [
            "submission_created",
            "submission_submitted",
            "reviewer_assigned",
            "review_completed",
            "editorial_decision_recorded",
            "submission_published",
        ]

    @pytest.mark.asyncio
    async def test_revision_opens_new_round(self, db_session, journal, people):
        journal_id = journal.id
        _, author_token = people["author"]
        _, editor_token = people["editor"]

        submission_id = await submitted_submission(db_session, journal_id, author_token)
        decided = await submission_service.record_decision(
            db_session, editor_token, {"submission_id": submission_id, "decision_type": "revision"}
        )
        resubmitted = await submission_service.submit_submission(db_session, author_token, submission_id)

        assert decided.data.round == 1
        assert resubmitted.success is True
        assert resubmitted.data.current_round == 2
        assert resubmitted.data.status == SubmissionStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_no_second_decision_while_awaiting_revision(self, db_session, journal, people):
        journal_id = journal.id
        _, author_token = people["author"]
        _, editor_token = people["editor"]

        submission_id = await submitted_submission(db_session, journal_id, author_token)
        await submission_service.record_decision(
            db_session, editor_token, {"submission_id": submission_id, "decision_type": "revision"}
        )
        again = await submission_service.record_decision(
            db_session, editor_token, {"submission_id": submission_id, "decision_type": "revision"}
        )

        assert again.success is False
        assert again.code == ErrorCode.CONFLICT
        assert again.error == "Cannot record a decision on a revision_requested submission"
        current_round = (
            await db_session.execute(select(Submission.current_round).where(Submission.id == submission_id))
        ).scalar_one()
        assert current_round == 2
        assert await submission_status(db_session, submission_id) == SubmissionStatus.REVISION_REQUESTED

    @pytest.mark.asyncio
    async def test_submit_twice_fails(self, db_session, journal, people):
        journal_id = journal.id
        _, author_token = people["author"]

        submission_id = await submitted_submission(db_session, journal_id, author_token)
        again = await submission_service.submit_submission(db_session, author_token, submission_id)

        assert again.success is False
        assert again.error == "Submission already submitted"

    @pytest.mark.asyncio
    async def test_inactive_journal_refuses_submissions(self, db_session, journal, people):
        journal_id = journal.id
        journal.is_active = False
        await db_session.commit()
        _, author_token = people["author"]

        result = await submission_service.create_submission(
            db_session, author_token, {"journal_id": journal_id, "title": "Late"}
        )

        assert result.success is False
        assert result.error == "Journal is not accepting submissions"

    @pytest.mark.asyncio
    async def test_publish_requires_acceptance(self, db_session, journal, people):
        journal_id = journal.id
        _, author_token = people["author"]
        _, editor_token = people["editor"]
        submission_id = await submitted_submission(db_session, journal_id, author_token)

        result = await submission_service.publish_submission(db_session, editor_token, {"submission_id": submission_id})

        assert result.success is False
        assert result.error == "Only accepted submissions can be published"


class TestSubmissionAccess:

    @pytest.mark.asyncio
    async def test_outsider_cannot_read_submission(self, db_session, journal, people):
        journal_id = journal.id
        _, author_token = people["author"]
        _, editor_token = people["editor"]
        _, outsider_token = people["outsider"]
        submission_id = await submitted_submission(db_session, journal_id, author_token)

        as_author = await submission_service.get_submission(db_session, author_token, submission_id)
        as_editor = await submission_service.get_submission(db_session, editor_token, submission_id)
        as_outsider = await submission_service.get_submission(db_session, outsider_token, submission_id)

        assert as_author.success is True
        assert as_editor.success is True
        assert as_outsider.success is False
        assert as_outsider.code == ErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_editor_of_other_journal_cannot_assign(self, db_session, journal, people, tenant):
        from app.models.journal import Journal

        other = Journal(tenant_id=tenant.id, title="Other", path="other")
        db_session.add(other)
        await db_session.commit()
        other_editor = await create_user(db_session, "other.editor@example.com", [(RoleKey.EDITOR, None, other.id)])

        journal_id = journal.id
        _, author_token = people["author"]
        reviewer_id, _ = people["reviewer"]
        submission_id = await submitted_submission(db_session, journal_id, author_token)

        result = await submission_service.assign_reviewer(
            db_session, token_for(other_editor), {"submission_id": submission_id, "reviewer_id": reviewer_id}
        )

        assert result.success is False
        assert result.code == ErrorCode.FORBIDDEN
        assert await submission_status(db_session, submission_id) == SubmissionStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_reviewer_rules(self, db_session, journal, people):
        journal_id = journal.id
        author_id, author_token = people["author"]
        _, editor_token = people["editor"]
        reviewer_id, _ = people["reviewer"]
        outsider_id, outsider_token = people["outsider"]
        submission_id = await submitted_submission(db_session, journal_id, author_token)

        self_review = await submission_service.assign_reviewer(
            db_session, editor_token, {"submission_id": submission_id, "reviewer_id": author_id}
        )
        no_role = await submission_service.assign_reviewer(
            db_session, editor_token, {"submission_id": submission_id, "reviewer_id": outsider_id}
        )
        first = await submission_service.assign_reviewer(
            db_session, editor_token, {"submission_id": submission_id, "reviewer_id": reviewer_id}
        )
        duplicate = await submission_service.assign_reviewer(
            db_session, editor_token, {"submission_id": submission_id, "reviewer_id": reviewer_id}
        )
        wrong_reviewer = await submission_service.complete_review(
            db_session, outsider_token, {"review_id": first.data.id, "recommendation": "reject"}
        )

        assert self_review.error == "The submitter cannot review their own submission"
        assert no_role.error == "User does not have the reviewer role"
        assert first.success is True
        assert duplicate.error == "Reviewer is already assigned for this round"
        assert wrong_reviewer.code == ErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_reviewer_sees_own_reviews(self, db_session, journal, people):
        journal_id = journal.id
        _, author_token = people["author"]
        _, editor_token = people["editor"]
        reviewer_id, reviewer_token = people["reviewer"]
        submission_id = await submitted_submission(db_session, journal_id, author_token)
        await submission_service.assign_reviewer(
            db_session, editor_token, {"submission_id": submission_id, "reviewer_id": reviewer_id}
        )

        mine = await submission_service.list_my_reviews(db_session, reviewer_token)
        as_reviewer = await submission_service.get_submission(db_session, reviewer_token, submission_id)

        assert mine.data.total == 1
        assert mine.data.items[0].submission_id == submission_id
        assert as_reviewer.success is True

    @pytest.mark.asyncio
    async def test_list_is_limited_to_own_submissions(self, db_session, journal, people):
        journal_id = journal.id
        _, author_token = people["author"]
        _, editor_token = people["editor"]
        _, outsider_token = people["outsider"]
        await submitted_submission(db_session, journal_id, author_token)

        as_author = await submission_service.list_submissions(db_session, author_token)
        as_outsider = await submission_service.list_submissions(db_session, outsider_token)
        as_editor = await submission_service.list_submissions(db_session, editor_token, {"journal_id": journal_id})

        assert as_author.data.total == 1
        assert as_outsider.data.total == 0
        assert as_editor.data.total == 1
