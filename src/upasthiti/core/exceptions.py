from __future__ import annotations

from .enums import AuthErrorCode, IssuanceErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid.

    The message is the same for an unknown username and a wrong password.
    """

    def __init__(self, message: str = "Invalid username or password", *, code: AuthErrorCode = AuthErrorCode.INVALID_CREDENTIALS):
        super().__init__(message)
        self.code = code


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class IssuanceError(DomainError):
    """Raised when an attendance token cannot be issued."""

    def __init__(self, code: IssuanceErrorCode, message: str | None = None):
        super().__init__(message or code.value)
        self.code = code
