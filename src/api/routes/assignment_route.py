"""Assignment, submission and grading routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user
from core.dependencies import AssignmentManagerDep
from core.exceptions import ForbiddenError, NotFoundError, StoreError, ValidationError
from schemas.assignment import (
    AssignmentInfo,
    AssignmentListResponse,
    AssignmentResponse,
    CreateAssignmentRequest,
    GradeSubmissionRequest,
    SubmissionInfo,
    SubmissionListResponse,
    SubmissionResponse,
    SubmitAssignmentRequest,
)
from schemas.user import User

router = APIRouter(prefix="/api/classgo", tags=["Assignment"])


@router.get(
    "/classes/{class_id}/assignments",
    response_model=AssignmentListResponse,
    summary="列出班级作业",
)
def list_assignments(
    class_id: str,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> AssignmentListResponse:
    """List a class's assignments, newest first.

    Students see their own submission on each assignment; teachers get the
    bare assignments.

    Args:
        class_id: Class ID.
        assignment_manager: Injected AssignmentManager instance.
        current_user: Current authenticated user.

    Returns:
        Assignments and the caller's role in the class.

    Raises:
        HTTPException: 403 if the caller is not a member, 500 on store failure.
    """
    try:
        role, assignments = assignment_manager.list_assignments(
            class_id, current_user.user_id
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return AssignmentListResponse(assignments=assignments, user_role=role)


@router.post(
    "/classes/{class_id}/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="创建作业",
)
def create_assignment(
    class_id: str,
    req: CreateAssignmentRequest,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> AssignmentResponse:
    """Create an assignment; teachers of the class only.

    Raises:
        HTTPException: 403 for non-teachers, 400 if the title is missing,
            500 on store failure.
    """
    try:
        model = assignment_manager.create_assignment(
            class_id=class_id,
            user_id=current_user.user_id,
            title=req.title,
            description=req.description,
            instructions=req.instructions,
            due_date=req.due_date,
            points=req.points,
            assignment_type=req.assignment_type,
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return AssignmentResponse(assignment=AssignmentInfo.model_validate(model))


@router.post(
    "/assignments/{assignment_id}/submit",
    response_model=SubmissionResponse,
    summary="提交作业",
)
def submit_assignment(
    assignment_id: str,
    req: SubmitAssignmentRequest,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> SubmissionResponse:
    """Submit (or resubmit) an assignment; students of the class only.

    Raises:
        HTTPException: 404 if the assignment does not exist, 403 for
            non-students, 500 on store failure.
    """
    try:
        model = assignment_manager.submit(
            assignment_id, current_user.user_id, req.content
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found",
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return SubmissionResponse(submission=SubmissionInfo.model_validate(model))


@router.get(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionListResponse,
    summary="列出作业提交",
)
def list_submissions(
    assignment_id: str,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> SubmissionListResponse:
    try:
        models = assignment_manager.list_submissions(
            assignment_id, current_user.user_id
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found",
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return SubmissionListResponse(
        submissions=[SubmissionInfo.model_validate(m) for m in models]
    )


@router.post(
    "/submissions/{submission_id}/grade",
    response_model=SubmissionResponse,
    summary="批改作业",
)
def grade_submission(
    submission_id: str,
    req: GradeSubmissionRequest,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> SubmissionResponse:
    """Grade a submission; teachers of the owning class only.

    Raises:
        HTTPException: 404 if the submission does not exist, 403 for
            non-teachers, 400 if the grade exceeds the assignment's points.
    """
    try:
        model = assignment_manager.grade_submission(
            submission_id, current_user.user_id, req.grade
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Submission not found",
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return SubmissionResponse(submission=SubmissionInfo.model_validate(model))
