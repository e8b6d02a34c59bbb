from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from config import DEFAULT_ASSIGNMENT_POINTS, DEFAULT_ASSIGNMENT_TYPE

from .base import Base


class AssignmentModel(Base):
    __tablename__ = "assignments"

    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id", ondelete="CASCADE"), index=True)
    teacher_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    due_date = Column(String, nullable=True)  # ISO format string
    points = Column(Integer, nullable=False, default=DEFAULT_ASSIGNMENT_POINTS)
    assignment_type = Column(String, nullable=False, default=DEFAULT_ASSIGNMENT_TYPE)
    created_at = Column(String, nullable=False)

    class_ = relationship("ClassModel", back_populates="assignments")
    submissions = relationship(
        "SubmissionModel",
        back_populates="assignment",
        cascade="all, delete-orphan",
    )
