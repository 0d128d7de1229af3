"""
Editorial workflow models: submissions, review assignments and decisions
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, Enum as SQLEnum, DateTime, Text, JSON
import enum

from app.models.base import Base, TimestampMixin, enum_values


class SubmissionStatus(str, enum.Enum):
    """Submission lifecycle"""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    REVIEW_COMPLETED = "review_completed"
    REVISION_REQUESTED = "revision_requested"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    PUBLISHED = "published"


class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReviewRecommendation(str, enum.Enum):
    ACCEPT = "accept"
    MINOR_REVISION = "minor_revision"
    MAJOR_REVISION = "major_revision"
    REJECT = "reject"
    RESUBMIT = "resubmit"


class DecisionType(str, enum.Enum):
    ACCEPT = "accept"
    DECLINE = "decline"
    REVISION = "revision"
    RESUBMIT = "resubmit"


class Submission(Base, TimestampMixin):
    """Manuscript submitted to a journal"""
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False, index=True)
    submitter_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    editor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    title = Column(String(500), nullable=False)
    abstract = Column(Text, nullable=True)
    language = Column(String(2), default="en", nullable=False)

    status = Column(
        SQLEnum(SubmissionStatus, name="submission_status", values_callable=enum_values),
        default=SubmissionStatus.DRAFT,
        nullable=False,
        index=True,
    )
    submission_date = Column(DateTime, nullable=True)
    current_round = Column(Integer, default=1, nullable=False)


class ReviewAssignment(Base, TimestampMixin):
    """Reviewer assigned to a submission for one review round"""
    __tablename__ = "review_assignments"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(Integer, ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    editor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    round = Column(Integer, default=1, nullable=False)

    status = Column(
        SQLEnum(ReviewStatus, name="review_status", values_callable=enum_values),
        default=ReviewStatus.PENDING,
        nullable=False,
    )
    recommendation = Column(
        SQLEnum(ReviewRecommendation, name="review_recommendation", values_callable=enum_values),
        nullable=True,
    )
    review_due_date = Column(DateTime, nullable=True)
    review_completed_date = Column(DateTime, nullable=True)
    review_form_data = Column(JSON, nullable=True)


class EditorialDecision(Base):
    """Immutable record of an editor's decision on a submission round"""
    __tablename__ = "editorial_decisions"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(Integer, ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    editor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    decision_type = Column(
        SQLEnum(DecisionType, name="decision_type", values_callable=enum_values),
        nullable=False,
    )
    round = Column(Integer, nullable=False)
    comments = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
