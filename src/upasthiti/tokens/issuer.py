from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Dict, Optional

from ..common.datetime_utils import now_epoch_ms
from ..core.enums import IssuanceErrorCode
from ..core.exceptions import IssuanceError
from ..users.model import FacultyIdentity, Identity
from .model import AttendanceToken, QRPayload

logger = logging.getLogger(__name__)


class TokenStanding(str, Enum):
    """Where a presented token stands relative to the issuer registry."""

    CURRENT = "current"
    SUPERSEDED = "superseded"
    UNKNOWN = "unknown"


class TokenIssuer:
    """Mints attendance tokens, at most one live token per issuer.

    A new token overwrites the issuer's previous one. Nothing is deleted
    when a token expires; callers compare timestamps on every read. The
    forgery index drops refs that had already expired when a later token
    was minted.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: Dict[str, AttendanceToken] = {}
        # token_ref -> token for every unexpired token minted (forgery check)
        self._issued: Dict[str, AttendanceToken] = {}

    def issue_token(self, subject_id: str, issuer: Identity, *, now_ms: Optional[int] = None) -> AttendanceToken:
        if not isinstance(issuer, FacultyIdentity):
            raise IssuanceError(IssuanceErrorCode.UNAUTHORIZED, "Only faculty can generate attendance QR codes")
        if subject_id not in issuer.taught_subjects:
            raise IssuanceError(IssuanceErrorCode.UNKNOWN_SUBJECT, f"'{subject_id}' is not taught by {issuer.display_name}")

        token = AttendanceToken.mint(
            subject_id=subject_id,
            issuer_identity_id=issuer.identity_id,
            teacher_name=issuer.display_name,
            now_ms=now_epoch_ms() if now_ms is None else int(now_ms),
        )
        with self._lock:
            replaced = self._current.get(issuer.identity_id)
            self._current[issuer.identity_id] = token
            self._prune_expired(token.issued_at_epoch_ms)
            self._issued[token.token_ref] = token

        if replaced is not None:
            logger.debug("Token %s replaced by %s", replaced.token_ref, token.token_ref)
        logger.info("Issued token subject=%s issuer=%s expires=%d", subject_id, issuer.identity_id, token.expires_at_epoch_ms)
        return token

    def _prune_expired(self, now_ms: int) -> None:
        expired = [ref for ref, t in self._issued.items() if t.expires_at_epoch_ms <= now_ms]
        for ref in expired:
            del self._issued[ref]

    def current_token_for(self, issuer_id: str) -> Optional[AttendanceToken]:
        """Latest token minted by the issuer, whether or not it has expired."""
        return self._current.get(issuer_id)

    def live_token_for(self, issuer_id: str, now_ms: Optional[int] = None) -> Optional[AttendanceToken]:
        token = self._current.get(issuer_id)
        now_ms = now_epoch_ms() if now_ms is None else int(now_ms)
        if token is None or not token.is_live_at(now_ms):
            return None
        return token

    def standing_of(self, payload: QRPayload) -> TokenStanding:
        with self._lock:
            minted = self._issued.get(payload.token_ref)
            if minted is None:
                return TokenStanding.UNKNOWN
            current = self._current.get(minted.issuer_identity_id)
        if current is not None and current.token_ref == payload.token_ref:
            return TokenStanding.CURRENT
        return TokenStanding.SUPERSEDED
