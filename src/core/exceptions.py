"""Custom exception classes for the ClassGo API.

This module defines application-specific exceptions following Google Python
Style Guide. Managers raise these; routes translate them to HTTP responses.
"""


class ClassGoError(Exception):
    """Base exception for all ClassGo errors."""

    pass


class NotFoundError(ClassGoError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        """Initialize the exception.

        Args:
            entity: Human-readable entity name, e.g. "Class".
            entity_id: The identifier (or join code) that was looked up.
        """
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ForbiddenError(ClassGoError):
    """Raised when the caller lacks the membership or role for an action."""

    pass


class ConflictError(ClassGoError):
    """Raised when a write would duplicate a unique row."""

    pass


class ValidationError(ClassGoError):
    """Raised when data validation fails."""

    pass


class StoreError(ClassGoError):
    """Raised when the relational store fails.

    The message is the generic, client-safe description of the failed
    operation; the underlying cause is only logged.
    """

    pass


class LLMError(ClassGoError):
    """Raised when there is an error communicating with the LLM."""

    pass


class RateLimitError(LLMError):
    """Raised when the LLM provider rejects a call for quota or rate limits."""

    pass


class ConfigurationError(ClassGoError):
    """Raised when there is a configuration error."""

    pass
