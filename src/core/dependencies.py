"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes,
following Google Python Style Guide and FastAPI best practices. Managers
are built per request around a request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import assignment_manager
from utils import class_manager
from utils import llm_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_class_manager(db: Session = Depends(get_db)) -> class_manager.ClassManager:
    """Get ClassManager instance with request-scoped DB session."""
    return class_manager.ClassManager(db)


def get_assignment_manager(
    db: Session = Depends(get_db),
) -> assignment_manager.AssignmentManager:
    """Get AssignmentManager instance sharing the request-scoped DB session."""
    return assignment_manager.AssignmentManager(db, class_manager.ClassManager(db))


def get_llm_manager() -> llm_manager.LLMManager:
    """Get the LLMManager singleton."""
    return llm_manager.get_llm_manager()


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
ClassManagerDep = Annotated[
    class_manager.ClassManager, Depends(get_class_manager)
]
AssignmentManagerDep = Annotated[
    assignment_manager.AssignmentManager, Depends(get_assignment_manager)
]
LLMManagerDep = Annotated[
    llm_manager.LLMManager, Depends(get_llm_manager)
]
