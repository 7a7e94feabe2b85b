from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role assigned to an identity at creation; used for authorization."""

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class CheckInOutcome(str, Enum):
    """Classified result of validating a presented attendance token."""

    ACCEPTED = "accepted"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    SUBJECT_MISMATCH = "subject-mismatch"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AuthErrorCode(str, Enum):
    INVALID_CREDENTIALS = "InvalidCredentials"


class IssuanceErrorCode(str, Enum):
    UNAUTHORIZED = "Unauthorized"
    UNKNOWN_SUBJECT = "UnknownSubject"
