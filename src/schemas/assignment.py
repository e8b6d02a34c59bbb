"""Assignment and submission schema definitions."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AssignmentType = Literal["assignment", "quiz", "material"]


class SubmissionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    assignment_id: str
    student_id: str
    content: Optional[str] = None
    status: str
    grade: Optional[float] = None
    submitted_at: str
    graded_at: Optional[str] = None


class AssignmentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    class_id: str
    teacher_id: str
    title: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    due_date: Optional[str] = None
    points: int
    assignment_type: str
    created_at: str
    # Only populated for students: the caller's own submission
    submission: Optional[SubmissionInfo] = None


class CreateAssignmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[str] = None
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    points: Optional[int] = Field(default=None, ge=0)
    assignment_type: Optional[AssignmentType] = Field(
        default=None, alias="assignmentType"
    )


class SubmitAssignmentRequest(BaseModel):
    content: Optional[str] = None


class GradeSubmissionRequest(BaseModel):
    grade: float = Field(ge=0)


class AssignmentResponse(BaseModel):
    assignment: AssignmentInfo


class AssignmentListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    assignments: List[AssignmentInfo]
    user_role: str = Field(alias="userRole")


class SubmissionResponse(BaseModel):
    submission: SubmissionInfo


class SubmissionListResponse(BaseModel):
    submissions: List[SubmissionInfo]
