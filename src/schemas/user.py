"""User schema definitions.

This module defines request/response models for accounts and authentication.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Internal user representation, including the password hash."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(
        description="The unique identifier for the user.",
        default_factory=lambda: str(uuid.uuid4()),
    )
    username: str
    password_hash: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    create_at: str = Field(
        description="The time when the user was created.",
        default_factory=lambda: datetime.now(pytz.utc).isoformat(),
    )

    def public_dict(self) -> Dict[str, Any]:
        """Return the user as a dict without the password hash."""
        data = self.model_dump()
        data.pop("password_hash", None)
        return data


class RegisterRequest(BaseModel):
    username: str
    password: str
    display_name: Optional[str] = None
    email: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user: Dict[str, Any]
    token: str


class CurrentUserResponse(BaseModel):
    user: Dict[str, Any]
