"""
Editorial workflow schemas: submissions, reviews and decisions
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.submission import DecisionType, ReviewRecommendation, ReviewStatus, SubmissionStatus
from app.schemas.common import PageQuery
from app.utils.sanitization import sanitize_html, strip_tags


class SubmissionCreate(BaseModel):
    journal_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=500)
    abstract: Optional[str] = None
    language: str = Field("en", min_length=2, max_length=2)

    class Config:
        extra = "forbid"

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str) -> str:
        return strip_tags(v)

    @field_validator("abstract")
    @classmethod
    def clean_abstract(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)


class SubmissionQuery(PageQuery):
    journal_id: Optional[int] = Field(None, ge=1)
    status: Optional[SubmissionStatus] = None


class ReviewerAssignmentCreate(BaseModel):
    submission_id: int = Field(..., ge=1)
    reviewer_id: int = Field(..., ge=1)
    review_due_date: Optional[datetime] = None

    class Config:
        extra = "forbid"


class ReviewCompletion(BaseModel):
    review_id: int = Field(..., ge=1)
    recommendation: ReviewRecommendation
    review_form_data: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "forbid"


class DecisionCreate(BaseModel):
    submission_id: int = Field(..., ge=1)
    decision_type: DecisionType
    comments: Optional[str] = None

    class Config:
        extra = "forbid"

    @field_validator("comments")
    @classmethod
    def clean_comments(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)


class PublishSubmission(BaseModel):
    submission_id: int = Field(..., ge=1)
    issue_id: Optional[int] = Field(None, ge=1)
    doi: Optional[str] = Field(None, max_length=255)
    pages: Optional[str] = Field(None, max_length=50)

    class Config:
        extra = "forbid"


class SubmissionResponse(BaseModel):
    id: int
    journal_id: int
    submitter_id: Optional[int] = None
    editor_id: Optional[int] = None
    title: str
    abstract: Optional[str] = None
    language: str
    status: SubmissionStatus
    submission_date: Optional[datetime] = None
    current_round: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReviewAssignmentResponse(BaseModel):
    id: int
    submission_id: int
    reviewer_id: int
    editor_id: Optional[int] = None
    round: int
    status: ReviewStatus
    recommendation: Optional[ReviewRecommendation] = None
    review_due_date: Optional[datetime] = None
    review_completed_date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DecisionResponse(BaseModel):
    id: int
    submission_id: int
    editor_id: Optional[int] = None
    decision_type: DecisionType
    round: int
    comments: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ArticleResponse(BaseModel):
    id: int
    journal_id: int
    issue_id: Optional[int] = None
    submission_id: Optional[int] = None
    title: str
    abstract: Optional[str] = None
    doi: Optional[str] = None
    pages: Optional[str] = None
    published_date: Optional[datetime] = None

    class Config:
        from_attributes = True
