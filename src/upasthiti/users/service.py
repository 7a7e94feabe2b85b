from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_epoch_ms
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import SESSION_HANDLE_BYTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import AdminIdentity, FacultyIdentity, Identity, StudentIdentity, subjects_of
from .repository import IdentityRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Authenticated context bound to exactly one identity."""

    handle: str
    identity: Identity
    issued_at_epoch_ms: int
    active_subject: Optional[str]

    @property
    def role(self) -> Role:
        return self.identity.role

    @property
    def subjects(self):
        return subjects_of(self.identity)


class AuthService:
    """Use case: authenticate (login), track and destroy sessions."""

    def __init__(self, identities: IdentityRepository):
        self._identities = identities
        self._lock = threading.Lock()
        self._sessions: Dict[str, Session] = {}
        self._handle_by_identity: Dict[str, str] = {}
        # Unknown usernames are checked against this so both failure paths hash once.
        self._dummy_hash = generate_password_hash(secrets.token_hex(16))

    def authenticate(self, username: str, password: str, *, now_ms: Optional[int] = None) -> Session:
        identity = self._identities.get_by_username(username or "")
        if identity is None:
            check_password_hash(self._dummy_hash, password or "")
            ok = False
        else:
            try:
                ok = check_password_hash(identity.password_hash, password or "")
            except ValueError:
                # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
                ok = False

        if not ok:
            logger.info("Login failed for username=%r", (username or "").strip().lower())
            raise AuthenticationError()

        subjects = subjects_of(identity)
        session = Session(
            handle=secrets.token_urlsafe(SESSION_HANDLE_BYTES),
            identity=identity,
            issued_at_epoch_ms=now_epoch_ms() if now_ms is None else int(now_ms),
            active_subject=subjects[0] if subjects else None,
        )

        with self._lock:
            previous = self._handle_by_identity.get(identity.identity_id)
            if previous is not None:
                self._sessions.pop(previous, None)
            self._sessions[session.handle] = session
            self._handle_by_identity[identity.identity_id] = session.handle

        logger.info("Login ok identity=%s role=%s", identity.identity_id, identity.role.value)
        return session

    def get_session(self, handle: Optional[str]) -> Optional[Session]:
        if not handle:
            return None
        return self._sessions.get(handle)

    def logout(self, session: Union[Session, str, None]) -> None:
        """Destroy a session. Unknown or already destroyed sessions are ignored."""
        handle = session.handle if isinstance(session, Session) else session
        if not handle:
            return
        with self._lock:
            removed = self._sessions.pop(handle, None)
            if removed is not None and self._handle_by_identity.get(removed.identity.identity_id) == handle:
                del self._handle_by_identity[removed.identity.identity_id]
        if removed is not None:
            logger.info("Logout identity=%s", removed.identity.identity_id)

    def select_subject(self, handle: str, subject_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(handle)
            if session is None:
                raise AuthenticationError("Session expired, please sign in again")
            if session.role == Role.ADMIN:
                raise ValidationError("Admin sessions have no subject selection")
            if subject_id not in session.subjects:
                raise ValidationError("Subject is not available for this account")
            updated = replace(session, active_subject=subject_id)
            self._sessions[handle] = updated
        return updated


class UserService:
    """Use case: register identities into the credential store."""

    def __init__(self, identities: IdentityRepository):
        self._identities = identities

    @staticmethod
    def _clean_subjects(subjects: Iterable[str]) -> tuple:
        cleaned = []
        for s in subjects:
            s = require_non_empty(s, "Subject")
            if s not in cleaned:
                cleaned.append(s)
        return tuple(cleaned)

    def _hash(self, password: str) -> str:
        require_min_length(password, "Password", 6)
        return generate_password_hash(password)

    def register_student(
        self,
        *,
        username: str,
        display_name: str,
        password: str,
        student_id: str,
        subjects: Iterable[str],
    ) -> StudentIdentity:
        enrolled = self._clean_subjects(subjects)
        if not enrolled:
            raise ValidationError("A student needs at least one subject")
        identity = StudentIdentity(
            identity_id=require_non_empty(username, "Username").lower(),
            display_name=require_non_empty(display_name, "Display name"),
            password_hash=self._hash(password),
            student_id=require_non_empty(student_id, "Student id"),
            enrolled_subjects=enrolled,
        )
        if any(s.student_id == identity.student_id for s in self._identities.list_students()):
            raise ValidationError("Student id already exists")
        self._identities.add(username, identity)
        return identity

    def register_faculty(self, *, username: str, display_name: str, password: str, subjects: Iterable[str]) -> FacultyIdentity:
        taught = self._clean_subjects(subjects)
        if not taught:
            raise ValidationError("Faculty needs at least one subject")
        identity = FacultyIdentity(
            identity_id=require_non_empty(username, "Username").lower(),
            display_name=require_non_empty(display_name, "Display name"),
            password_hash=self._hash(password),
            taught_subjects=taught,
        )
        # QR payloads name the teacher, so faculty display names must be unique.
        name_key = identity.display_name.casefold()
        if any(f.display_name.casefold() == name_key for f in self._identities.list_faculty()):
            raise ValidationError("A faculty member with this display name already exists")
        self._identities.add(username, identity)
        return identity

    def register_admin(self, *, username: str, display_name: str, password: str) -> AdminIdentity:
        identity = AdminIdentity(
            identity_id=require_non_empty(username, "Username").lower(),
            display_name=require_non_empty(display_name, "Display name"),
            password_hash=self._hash(password),
        )
        self._identities.add(username, identity)
        return identity
