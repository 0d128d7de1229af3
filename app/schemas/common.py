"""
Shared schemas: the action result envelope, pagination and validation errors
"""
import math
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.exceptions import ErrorCode

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """
    Uniform result of every admin action.

    `code` is for transports only (HTTP status mapping) and is never serialized.
    """
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    details: Optional[Any] = None
    code: Optional[ErrorCode] = Field(default=None, exclude=True)

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: ErrorCode, details: Any = None) -> "ActionResult":
        return cls(success=False, error=error, code=code, details=details)

    def to_envelope(self) -> Dict[str, Any]:
        """JSON-ready body: {success, data, error?, details?}"""
        body = self.model_dump(mode="json")
        if body.get("error") is None:
            body.pop("error", None)
        if body.get("details") is None:
            body.pop("details", None)
        return body


class Page(BaseModel, Generic[T]):
    """One page of a listing"""
    items: List[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, items: List[Any], total: int, page: int, limit: int) -> "Page":
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


class PageQuery(BaseModel):
    """Base pagination parameters"""
    model_config = ConfigDict(extra="ignore")

    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class IdPayload(BaseModel):
    """Payload for actions addressing one entity by id"""
    id: int = Field(..., ge=1)


def format_validation_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Collapse pydantic errors (or FastAPI request errors) into field-path -> messages"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ())) or "_schema"
        errors.setdefault(path, []).append(error.get("msg", "Invalid value"))
    return errors
