"""User management utilities.

This module provides user management functionality including user storage,
password hashing, and user authentication.
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.user import UserModel
from schemas.user import User

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


class UserAlreadyExistsError(Exception):
    """Exception raised when trying to create a user that already exists."""

    pass


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session, bcrypt_rounds: int = BCRYPT_ROUNDS):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
            bcrypt_rounds: Cost factor for new password hashes.
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        password_bytes = password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def create_user(
        self,
        username: str,
        password: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """Create a new user.

        Args:
            username: Username for the new user.
            password: Plain text password.
            display_name: Optional display name.
            email: Optional email address.

        Returns:
            Created User object.

        Raises:
            UserAlreadyExistsError: If username already exists.
        """
        existing = self.db.query(UserModel).filter(UserModel.username == username).first()
        if existing:
            raise UserAlreadyExistsError(f"User '{username}' already exists")

        user = User(
            username=username,
            password_hash=self.hash_password(password),
            display_name=display_name,
            email=email,
        )

        # Two concurrent registrations can both pass the check above; the
        # unique constraint on username catches the loser.
        try:
            model = UserModel(**user.model_dump())
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError(f"User '{username}' already exists") from e

        logger.info("Created user: %s", username)
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username.

        Args:
            username: Username to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model:
            return User.model_validate(model)
        return None
