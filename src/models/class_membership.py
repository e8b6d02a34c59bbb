from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base


class ClassMembershipModel(Base):
    __tablename__ = "class_members"
    __table_args__ = (
        UniqueConstraint("class_id", "user_id", name="uq_class_members_class_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id", ondelete="CASCADE"), index=True)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True)
    role = Column(String, nullable=False)  # 'teacher' or 'student'
    joined_at = Column(String, nullable=False)

    class_ = relationship("ClassModel", back_populates="members")
