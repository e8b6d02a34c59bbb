from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship
from .base import Base


class ClassModel(Base):
    __tablename__ = "classes"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    section = Column(String, nullable=True)
    subject = Column(String, nullable=True)
    room = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    class_code = Column(String, unique=True, index=True, nullable=False)
    cover_color = Column(String, nullable=False)
    teacher_id = Column(String, index=True, nullable=False)
    created_at = Column(String, nullable=False)

    members = relationship(
        "ClassMembershipModel",
        back_populates="class_",
        cascade="all, delete-orphan",
    )
    assignments = relationship(
        "AssignmentModel",
        back_populates="class_",
        cascade="all, delete-orphan",
    )
