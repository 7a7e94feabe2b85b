from __future__ import annotations

import threading
from typing import Dict, List, Optional, Protocol, Sequence

from ..core.exceptions import ValidationError
from .model import FacultyIdentity, Identity, StudentIdentity


class IdentityRepository(Protocol):
    """Repository interface for identities (the credential store).

    Note (DIP): the service layer depends on this interface, not on a
    concrete store.
    """

    def get_by_id(self, identity_id: str) -> Optional[Identity]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Identity]:
        raise NotImplementedError

    def add(self, username: str, identity: Identity) -> None:
        raise NotImplementedError

    def list_students(self) -> Sequence[StudentIdentity]:
        raise NotImplementedError

    def list_faculty(self) -> Sequence[FacultyIdentity]:
        raise NotImplementedError


def normalize_username(username: str) -> str:
    return (username or "").strip().lower()


class InMemoryIdentityRepository:
    """Process-local credential store keyed by lower-cased username."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_username: Dict[str, Identity] = {}
        self._by_id: Dict[str, Identity] = {}

    def get_by_id(self, identity_id: str) -> Optional[Identity]:
        return self._by_id.get(identity_id)

    def get_by_username(self, username: str) -> Optional[Identity]:
        return self._by_username.get(normalize_username(username))

    def add(self, username: str, identity: Identity) -> None:
        key = normalize_username(username)
        if not key:
            raise ValidationError("Username is required")
        with self._lock:
            if key in self._by_username:
                raise ValidationError("Username already exists")
            if identity.identity_id in self._by_id:
                raise ValidationError("Identity id already exists")
            self._by_username[key] = identity
            self._by_id[identity.identity_id] = identity

    def list_students(self) -> List[StudentIdentity]:
        return [i for i in self._by_id.values() if isinstance(i, StudentIdentity)]

    def list_faculty(self) -> List[FacultyIdentity]:
        return [i for i in self._by_id.values() if isinstance(i, FacultyIdentity)]
