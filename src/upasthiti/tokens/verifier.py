from __future__ import annotations

import logging

from ..attendance.model import CheckInEvent
from ..core.enums import CheckInOutcome
from ..users.model import Identity, StudentIdentity
from .codec import MalformedPayload, decode_payload
from .issuer import TokenIssuer, TokenStanding

logger = logging.getLogger(__name__)


class TokenVerifier:
    """Classifies a scanned payload into a CheckInEvent.

    Never raises: every failure is reported through ``outcome`` so the
    caller handles success and failure the same way.
    """

    def __init__(self, issuer: TokenIssuer):
        self._issuer = issuer

    def verify(self, raw_payload: str, presenting_student: Identity, now_ms: int) -> CheckInEvent:
        student_id = presenting_student.student_id if isinstance(presenting_student, StudentIdentity) else presenting_student.identity_id

        try:
            payload = decode_payload(raw_payload)
        except MalformedPayload as e:
            logger.info("Malformed payload from student=%s: %s", student_id, e)
            return CheckInEvent(
                student_id=student_id,
                token_ref=None,
                verified_at_epoch_ms=now_ms,
                outcome=CheckInOutcome.MALFORMED,
            )

        def event(outcome: CheckInOutcome) -> CheckInEvent:
            return CheckInEvent(
                student_id=student_id,
                token_ref=payload.token_ref,
                verified_at_epoch_ms=now_ms,
                outcome=outcome,
                subject_id=payload.subject_id,
                issued_at_epoch_ms=payload.issued_at_epoch_ms,
            )

        # Expiry is decided from the payload timestamps before any registry lookup.
        if now_ms >= payload.expires_at_epoch_ms:
            return event(CheckInOutcome.EXPIRED)

        standing = self._issuer.standing_of(payload)
        if standing == TokenStanding.UNKNOWN or now_ms < payload.issued_at_epoch_ms:
            return event(CheckInOutcome.MALFORMED)

        if standing == TokenStanding.SUPERSEDED:
            return event(CheckInOutcome.EXPIRED)

        enrolled = presenting_student.enrolled_subjects if isinstance(presenting_student, StudentIdentity) else ()
        if payload.subject_id not in enrolled:
            return event(CheckInOutcome.SUBJECT_MISMATCH)

        return event(CheckInOutcome.ACCEPTED)
