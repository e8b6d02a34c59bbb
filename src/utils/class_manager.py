"""Class management utilities."""

import logging
import random
import secrets
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

import pytz
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import (
    CLASS_CODE_ALPHABET,
    CLASS_CODE_LENGTH,
    CLASS_CODE_MAX_ATTEMPTS,
    CLASS_COVER_COLORS,
)
from core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from models.class_membership import ClassMembershipModel
from models.class_model import ClassModel

logger = logging.getLogger(__name__)

ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with microseconds."""
    return datetime.now(pytz.utc).isoformat(timespec="microseconds")


def generate_class_code(length: int = CLASS_CODE_LENGTH) -> str:
    """Generate a human-readable join code from the fixed alphabet."""
    return "".join(secrets.choice(CLASS_CODE_ALPHABET) for _ in range(length))


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ClassManager:
    """Manages class and membership operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_class(
        self,
        owner_id: str,
        name: Optional[str],
        section: Optional[str] = None,
        subject: Optional[str] = None,
        room: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ClassModel:
        """Create a new class and make the owner its teacher.

        The class row and the owner's membership are committed separately.
        If the membership insert fails the class stays committed and the
        failure is only logged.

        Args:
            owner_id: User ID of the creating teacher.
            name: Class name (required, non-blank).
            section: Optional section label.
            subject: Optional subject.
            room: Optional room.
            description: Optional free-text description.

        Returns:
            The created ClassModel.

        Raises:
            ValidationError: If the name is missing or blank.
            StoreError: If the class row cannot be inserted.
        """
        name = _clean(name)
        if not name:
            raise ValidationError("Class name is required")

        class_model = None
        for attempt in range(1, CLASS_CODE_MAX_ATTEMPTS + 1):
            class_model = ClassModel(
                id=str(uuid.uuid4()),
                name=name,
                section=_clean(section),
                subject=_clean(subject),
                room=_clean(room),
                description=_clean(description),
                class_code=generate_class_code(),
                cover_color=random.choice(CLASS_COVER_COLORS),
                teacher_id=owner_id,
                created_at=utc_now_iso(),
            )
            try:
                self.db.add(class_model)
                self.db.commit()
                break
            except IntegrityError:
                # Join code already taken; draw a new one
                self.db.rollback()
                logger.warning(
                    "Class code collision on attempt %d/%d",
                    attempt,
                    CLASS_CODE_MAX_ATTEMPTS,
                )
                class_model = None
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Error creating class")
                raise StoreError("Failed to create class")
        if class_model is None:
            logger.error("Could not allocate a unique class code")
            raise StoreError("Failed to create class")

        membership = ClassMembershipModel(
            class_id=class_model.id,
            user_id=owner_id,
            role=ROLE_TEACHER,
            joined_at=utc_now_iso(),
        )
        try:
            self.db.add(membership)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error adding teacher as member of class %s", class_model.id)

        self.db.refresh(class_model)
        logger.info("Created class %s (%s) for %s", class_model.id, class_model.class_code, owner_id)
        return class_model

    def get_class(self, class_id: str) -> ClassModel:
        model = self.db.query(ClassModel).filter(ClassModel.id == class_id).first()
        if not model:
            raise NotFoundError("Class", class_id)
        return model

    def get_membership(
        self, class_id: str, user_id: str
    ) -> Optional[ClassMembershipModel]:
        return (
            self.db.query(ClassMembershipModel)
            .filter(
                ClassMembershipModel.class_id == class_id,
                ClassMembershipModel.user_id == user_id,
            )
            .first()
        )

    def get_role(self, class_id: str, user_id: str) -> Optional[str]:
        """Return the user's role in the class, or None if not a member."""
        membership = self.get_membership(class_id, user_id)
        return membership.role if membership else None

    def require_role(
        self,
        class_id: str,
        user_id: str,
        role: Optional[str] = None,
        message: str = "Not a member of this class",
    ) -> str:
        """Check that the user is a member, optionally with a specific role.

        Returns:
            The user's role in the class.

        Raises:
            ForbiddenError: If the user is not a member or has another role.
        """
        user_role = self.get_role(class_id, user_id)
        if user_role is None or (role is not None and user_role != role):
            raise ForbiddenError(message)
        return user_role

    def get_class_for_member(
        self, class_id: str, user_id: str
    ) -> Tuple[ClassModel, str]:
        """Return a class with the caller's role, for members only."""
        model = self.get_class(class_id)
        role = self.require_role(class_id, user_id)
        return model, role

    def list_classes_for_user(self, user_id: str) -> List[Tuple[ClassModel, str]]:
        """List (class, role) pairs for every class the user belongs to."""
        try:
            rows = (
                self.db.query(ClassModel, ClassMembershipModel.role)
                .join(
                    ClassMembershipModel,
                    ClassMembershipModel.class_id == ClassModel.id,
                )
                .filter(ClassMembershipModel.user_id == user_id)
                .order_by(ClassModel.created_at.desc())
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Error fetching classes for %s", user_id)
            raise StoreError("Failed to fetch classes")
        return [(model, role) for model, role in rows]

    def join_by_code(self, code: Optional[str], user_id: str) -> ClassModel:
        """Join a class as a student using its join code.

        Args:
            code: Join code; case and surrounding whitespace are ignored.
            user_id: User ID joining the class.

        Returns:
            The joined ClassModel.

        Raises:
            ValidationError: If no code is given.
            NotFoundError: If no class has this code.
            ConflictError: If the user is already a member.
            StoreError: If the membership cannot be written.
        """
        code = (code or "").strip().upper()
        if not code:
            raise ValidationError("Class code is required")

        model = self.db.query(ClassModel).filter(ClassModel.class_code == code).first()
        if not model:
            raise NotFoundError("Class", code)

        if self.get_membership(model.id, user_id):
            raise ConflictError("Already a member of this class")

        membership = ClassMembershipModel(
            class_id=model.id,
            user_id=user_id,
            role=ROLE_STUDENT,
            joined_at=utc_now_iso(),
        )
        try:
            self.db.add(membership)
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent join by the same user
            self.db.rollback()
            raise ConflictError("Already a member of this class")
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error joining class %s", model.id)
            raise StoreError("Failed to join class")

        logger.info("User %s joined class %s", user_id, model.id)
        self.db.refresh(model)
        return model
