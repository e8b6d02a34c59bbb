"""Assignment and submission management utilities.

Every operation here is scoped by class membership: the caller's role in
the owning class decides what they may read or write.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import DEFAULT_ASSIGNMENT_POINTS, DEFAULT_ASSIGNMENT_TYPE
from core.exceptions import NotFoundError, StoreError, ValidationError
from models.assignment import AssignmentModel
from models.submission import SubmissionModel
from schemas.assignment import AssignmentInfo, SubmissionInfo
from utils.class_manager import (
    ROLE_STUDENT,
    ROLE_TEACHER,
    ClassManager,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

STATUS_SUBMITTED = "submitted"
STATUS_GRADED = "graded"


class AssignmentManager:
    """Manages assignments, submissions and grading."""

    def __init__(self, db: Session, class_manager: ClassManager):
        self.db = db
        self.class_manager = class_manager

    def get_assignment(self, assignment_id: str) -> AssignmentModel:
        model = (
            self.db.query(AssignmentModel)
            .filter(AssignmentModel.id == assignment_id)
            .first()
        )
        if not model:
            raise NotFoundError("Assignment", assignment_id)
        return model

    def list_assignments(
        self, class_id: str, user_id: str
    ) -> Tuple[str, List[AssignmentInfo]]:
        """List a class's assignments, newest first.

        Students additionally get their own submission attached to each
        assignment (or None). Other students' submissions are never read.

        Args:
            class_id: Class ID.
            user_id: Caller's user ID.

        Returns:
            Tuple of (caller's role in class, assignments).

        Raises:
            ForbiddenError: If the caller is not a member of the class.
            StoreError: If the assignments cannot be read.
        """
        role = self.class_manager.require_role(class_id, user_id)

        try:
            models = (
                self.db.query(AssignmentModel)
                .filter(AssignmentModel.class_id == class_id)
                .order_by(AssignmentModel.created_at.desc())
                .all()
            )
            assignments = [AssignmentInfo.model_validate(m) for m in models]
            if role != ROLE_STUDENT or not assignments:
                return role, assignments

            submissions = (
                self.db.query(SubmissionModel)
                .filter(
                    SubmissionModel.assignment_id.in_([a.id for a in assignments]),
                    SubmissionModel.student_id == user_id,
                )
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Error fetching assignments for class %s", class_id)
            raise StoreError("Failed to fetch assignments")

        by_assignment = {s.assignment_id: s for s in submissions}
        for assignment in assignments:
            submission = by_assignment.get(assignment.id)
            if submission is not None:
                assignment.submission = SubmissionInfo.model_validate(submission)
        return role, assignments

    def create_assignment(
        self,
        class_id: str,
        user_id: str,
        title: Optional[str],
        description: Optional[str] = None,
        instructions: Optional[str] = None,
        due_date: Optional[datetime] = None,
        points: Optional[int] = None,
        assignment_type: Optional[str] = None,
    ) -> AssignmentModel:
        """Create an assignment in a class the caller teaches.

        Raises:
            ForbiddenError: If the caller is not a teacher of the class.
            ValidationError: If the title is missing or blank.
            StoreError: If the row cannot be inserted.
        """
        self.class_manager.require_role(
            class_id,
            user_id,
            role=ROLE_TEACHER,
            message="Only teachers can create assignments",
        )
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")

        model = AssignmentModel(
            id=str(uuid.uuid4()),
            class_id=class_id,
            teacher_id=user_id,
            title=title,
            description=description,
            instructions=instructions,
            due_date=due_date.isoformat() if due_date else None,
            points=DEFAULT_ASSIGNMENT_POINTS if points is None else points,
            assignment_type=assignment_type or DEFAULT_ASSIGNMENT_TYPE,
            created_at=utc_now_iso(),
        )
        try:
            self.db.add(model)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error creating assignment in class %s", class_id)
            raise StoreError("Failed to create assignment")

        self.db.refresh(model)
        logger.info("Created assignment %s in class %s", model.id, class_id)
        return model

    def _find_submission(
        self, assignment_id: str, student_id: str
    ) -> Optional[SubmissionModel]:
        return (
            self.db.query(SubmissionModel)
            .filter(
                SubmissionModel.assignment_id == assignment_id,
                SubmissionModel.student_id == student_id,
            )
            .first()
        )

    def submit(
        self, assignment_id: str, user_id: str, content: Optional[str]
    ) -> SubmissionModel:
        """Create or replace the caller's submission for an assignment.

        Keyed on (assignment, student): a repeated call overwrites content,
        resets status to "submitted" and refreshes submitted_at. An existing
        grade is left untouched. Due dates are not enforced.

        Raises:
            NotFoundError: If the assignment does not exist.
            ForbiddenError: If the caller is not a student of the class.
            StoreError: If the row cannot be written.
        """
        assignment = self.get_assignment(assignment_id)
        self.class_manager.require_role(
            assignment.class_id,
            user_id,
            role=ROLE_STUDENT,
            message="Only students can submit assignments",
        )

        # Retry once as an update if a concurrent first submission wins the insert
        for _ in range(2):
            submission = self._find_submission(assignment_id, user_id)
            if submission is None:
                submission = SubmissionModel(
                    id=str(uuid.uuid4()),
                    assignment_id=assignment_id,
                    student_id=user_id,
                )
                self.db.add(submission)
            submission.content = content
            submission.status = STATUS_SUBMITTED
            submission.submitted_at = utc_now_iso()
            try:
                self.db.commit()
                break
            except IntegrityError:
                self.db.rollback()
                logger.warning(
                    "Concurrent submission for assignment %s by %s, retrying",
                    assignment_id,
                    user_id,
                )
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Error submitting assignment %s", assignment_id)
                raise StoreError("Failed to submit assignment")
        else:
            raise StoreError("Failed to submit assignment")

        self.db.refresh(submission)
        logger.info("User %s submitted assignment %s", user_id, assignment_id)
        return submission

    def list_submissions(
        self, assignment_id: str, user_id: str
    ) -> List[SubmissionModel]:
        """List all submissions for an assignment; teachers of the class only.

        Raises:
            NotFoundError: If the assignment does not exist.
            ForbiddenError: If the caller is not a teacher of the class.
            StoreError: If the submissions cannot be read.
        """
        assignment = self.get_assignment(assignment_id)
        self.class_manager.require_role(
            assignment.class_id,
            user_id,
            role=ROLE_TEACHER,
            message="Only teachers can view submissions",
        )
        try:
            return (
                self.db.query(SubmissionModel)
                .filter(SubmissionModel.assignment_id == assignment_id)
                .order_by(SubmissionModel.submitted_at.desc())
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Error fetching submissions for assignment %s", assignment_id)
            raise StoreError("Failed to fetch submissions")

    def grade_submission(
        self, submission_id: str, user_id: str, grade: float
    ) -> SubmissionModel:
        """Record a grade for a submission.

        Raises:
            NotFoundError: If the submission does not exist.
            ForbiddenError: If the caller is not a teacher of the class.
            ValidationError: If the grade exceeds the assignment's points.
            StoreError: If the row cannot be written.
        """
        submission = (
            self.db.query(SubmissionModel)
            .filter(SubmissionModel.id == submission_id)
            .first()
        )
        if not submission:
            raise NotFoundError("Submission", submission_id)

        assignment = submission.assignment
        self.class_manager.require_role(
            assignment.class_id,
            user_id,
            role=ROLE_TEACHER,
            message="Only teachers can grade submissions",
        )
        if grade < 0 or grade > assignment.points:
            raise ValidationError(
                f"Grade must be between 0 and {assignment.points}"
            )

        submission.grade = grade
        submission.status = STATUS_GRADED
        submission.graded_at = utc_now_iso()
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error grading submission %s", submission_id)
            raise StoreError("Failed to grade submission")

        self.db.refresh(submission)
        logger.info("User %s graded submission %s: %s", user_id, submission_id, grade)
        return submission
