"""
Navigation menu schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.site import MenuPosition, MenuType
from app.utils.sanitization import strip_tags


class NavigationMenuBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    url: Optional[str] = Field(None, max_length=500)
    menu_type: MenuType = MenuType.CUSTOM
    parent_id: Optional[int] = Field(None, ge=1)
    sequence: int = Field(0, ge=0)
    enabled: bool = True
    target_blank: bool = False
    position: MenuPosition = MenuPosition.HEADER


class NavigationMenuCreate(NavigationMenuBase):
    class Config:
        extra = "forbid"

    @field_validator("name", "title")
    @classmethod
    def clean_text(cls, v: str) -> str:
        return strip_tags(v)


class NavigationMenuUpdate(BaseModel):
    id: int = Field(..., ge=1)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    url: Optional[str] = Field(None, max_length=500)
    menu_type: Optional[MenuType] = None
    parent_id: Optional[int] = Field(None, ge=1)
    sequence: Optional[int] = Field(None, ge=0)
    enabled: Optional[bool] = None
    target_blank: Optional[bool] = None
    position: Optional[MenuPosition] = None

    class Config:
        extra = "forbid"

    @field_validator("name", "title")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)


class NavigationQuery(BaseModel):
    position: Optional[MenuPosition] = None


class MenuOrderItem(BaseModel):
    id: int = Field(..., ge=1)
    sequence: int = Field(..., ge=0)


class NavigationReorder(BaseModel):
    items: List[MenuOrderItem] = Field(..., min_length=1)

    class Config:
        extra = "forbid"


class NavigationMenuResponse(NavigationMenuBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
