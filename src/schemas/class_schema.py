"""Class schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClassInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    section: Optional[str] = None
    room: Optional[str] = None
    class_code: str
    cover_color: str
    teacher_id: str
    created_at: str
    user_role: Optional[str] = Field(default=None, alias="userRole")


class CreateClassRequest(BaseModel):
    name: Optional[str] = None
    section: Optional[str] = None
    subject: Optional[str] = None
    room: Optional[str] = None
    description: Optional[str] = None


class JoinClassRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    class_code: Optional[str] = Field(default=None, alias="classCode")


class ClassResponse(BaseModel):
    """Single class wrapped as ``{"class": {...}}``."""

    model_config = ConfigDict(populate_by_name=True)

    class_: ClassInfo = Field(alias="class")


class ClassListResponse(BaseModel):
    classes: List[ClassInfo]
