from sqlalchemy import Column, Float, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base


class SubmissionModel(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint(
            "assignment_id",
            "student_id",
            name="uq_submissions_assignment_student",
        ),
    )

    id = Column(String, primary_key=True, index=True)
    assignment_id = Column(
        String,
        ForeignKey("assignments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    student_id = Column(String, index=True, nullable=False)
    content = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="submitted")
    grade = Column(Float, nullable=True)
    submitted_at = Column(String, nullable=False)
    graded_at = Column(String, nullable=True)

    assignment = relationship("AssignmentModel", back_populates="submissions")
