from .base import Base
from .user import UserModel
from .class_model import ClassModel
from .class_membership import ClassMembershipModel
from .assignment import AssignmentModel
from .submission import SubmissionModel

__all__ = [
    "Base",
    "UserModel",
    "ClassModel",
    "ClassMembershipModel",
    "AssignmentModel",
    "SubmissionModel",
]
