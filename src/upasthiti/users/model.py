from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from ..core.enums import Role


@dataclass(frozen=True)
class BaseIdentity:
    """Domain entity: an authenticated principal.

    Note: Plain data object; the credential is kept only as a salted hash.
    """

    identity_id: str
    display_name: str
    password_hash: str

    @property
    def role(self) -> Role:
        raise NotImplementedError


@dataclass(frozen=True)
class StudentIdentity(BaseIdentity):
    student_id: str = ""
    # Display priority; the first entry is the default selection.
    enrolled_subjects: Tuple[str, ...] = ()

    @property
    def role(self) -> Role:
        return Role.STUDENT


@dataclass(frozen=True)
class FacultyIdentity(BaseIdentity):
    taught_subjects: Tuple[str, ...] = ()

    @property
    def role(self) -> Role:
        return Role.FACULTY


@dataclass(frozen=True)
class AdminIdentity(BaseIdentity):
    @property
    def role(self) -> Role:
        return Role.ADMIN


Identity = Union[StudentIdentity, FacultyIdentity, AdminIdentity]


def subjects_of(identity: Identity) -> Tuple[str, ...]:
    """Subject list owned by an identity (empty for admins)."""
    if isinstance(identity, StudentIdentity):
        return identity.enrolled_subjects
    if isinstance(identity, FacultyIdentity):
        return identity.taught_subjects
    if isinstance(identity, AdminIdentity):
        return ()
    raise TypeError(f"Unsupported identity type: {type(identity).__name__}")
