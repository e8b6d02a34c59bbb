"""Class management routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user
from core.dependencies import ClassManagerDep
from core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from models.class_model import ClassModel
from schemas.class_schema import (
    ClassInfo,
    ClassListResponse,
    ClassResponse,
    CreateClassRequest,
    JoinClassRequest,
)
from schemas.user import User

router = APIRouter(prefix="/api/classgo/classes", tags=["Class"])


def _build_class_info(model: ClassModel, user_role: Optional[str] = None) -> ClassInfo:
    info = ClassInfo.model_validate(model)
    info.user_role = user_role
    return info


@router.get("", response_model=ClassListResponse, summary="列出我的班级")
def list_classes(
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> ClassListResponse:
    """List every class the caller belongs to, with the caller's role."""
    try:
        rows = class_manager.list_classes_for_user(current_user.user_id)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return ClassListResponse(
        classes=[_build_class_info(model, user_role=role) for model, role in rows]
    )


@router.post(
    "",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
    summary="创建班级",
)
def create_class(
    req: CreateClassRequest,
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> ClassResponse:
    """Create a class; the caller becomes its teacher.

    Args:
        req: Class name and optional section, subject, room, description.
        class_manager: Injected ClassManager instance.
        current_user: Current authenticated user.

    Returns:
        The created class.

    Raises:
        HTTPException: 400 if the name is missing, 500 on store failure.
    """
    try:
        model = class_manager.create_class(
            owner_id=current_user.user_id,
            name=req.name,
            section=req.section,
            subject=req.subject,
            room=req.room,
            description=req.description,
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
    return ClassResponse(class_=_build_class_info(model, user_role="teacher"))


@router.post("/join", response_model=ClassResponse, summary="通过班级码加入班级")
def join_class(
    req: JoinClassRequest,
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> ClassResponse:
    """Join a class as a student using its join code.

    Any authenticated user holding the code may join. The code is matched
    case-insensitively.

    Args:
        req: Join request with the class code.
        class_manager: Injected ClassManager instance.
        current_user: Current authenticated user.

    Returns:
        The joined class.

    Raises:
        HTTPException: 400 if the code is missing or the caller is already a
            member, 404 if no class has the code, 500 on store failure.
    """
    try:
        model = class_manager.join_by_code(req.class_code, current_user.user_id)
    except (ValidationError, ConflictError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Class not found",
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return ClassResponse(class_=_build_class_info(model, user_role="student"))


@router.get("/{class_id}", response_model=ClassResponse, summary="获取班级详情")
def get_class(
    class_id: str,
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> ClassResponse:
    try:
        model, role = class_manager.get_class_for_member(class_id, current_user.user_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Class not found",
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    return ClassResponse(class_=_build_class_info(model, user_role=role))
