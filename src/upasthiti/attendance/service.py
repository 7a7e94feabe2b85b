from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..common.datetime_utils import epoch_ms_to_date, now_epoch_ms
from ..common.validators import clamp_percentage
from ..core.enums import CheckInOutcome, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..tokens.issuer import TokenIssuer
from ..tokens.model import AttendanceToken
from ..tokens.verifier import TokenVerifier
from ..users.model import StudentIdentity
from ..users.repository import IdentityRepository
from ..users.service import Session
from .model import CheckInEvent, ClassDaySummary, LedgerEntry
from .repository import CheckInLedger

logger = logging.getLogger(__name__)


class AttendanceAggregator:
    """Folds accepted check-ins into per-student and per-class percentages."""

    def __init__(self, ledger: CheckInLedger, identities: IdentityRepository, *, dedupe: bool = True):
        self._ledger = ledger
        self._identities = identities
        self._dedupe = bool(dedupe)

    def record_outcome(self, event: CheckInEvent) -> bool:
        """Append an accepted, non-duplicate event. Returns whether it was counted."""
        if event.outcome != CheckInOutcome.ACCEPTED or event.dedup_key is None:
            return False
        entry = LedgerEntry(
            student_id=event.student_id,
            subject_id=event.subject_id,
            # A token belongs to the class day it was issued on, even if scanned after midnight.
            day=epoch_ms_to_date(event.issued_at_epoch_ms),
            event=event,
        )
        return self._ledger.append(entry, dedupe=self._dedupe)

    def track_class_day(self, subject_id: str, day: date) -> None:
        self._ledger.track_class_day(subject_id, day)

    def _student(self, student_id: str) -> Optional[StudentIdentity]:
        for s in self._identities.list_students():
            if s.student_id == student_id:
                return s
        return None

    def _enrolled(self, subject_id: str) -> List[StudentIdentity]:
        return [s for s in self._identities.list_students() if subject_id in s.enrolled_subjects]

    def percentage_for(self, student_id: str, subject_id: Optional[str] = None) -> int:
        student = self._student(student_id)
        if student is None:
            return 0

        subjects = student.enrolled_subjects
        if subject_id is not None:
            subjects = tuple(s for s in subjects if s == subject_id)

        tracked = {(s, d) for s in subjects for d in self._ledger.class_days(s)}
        attended = {(e.subject_id, e.day) for e in self._ledger.entries_for_student(student_id)}
        return clamp_percentage(len(attended & tracked), len(tracked))

    def present_students(self, subject_id: str, day: date) -> List[str]:
        enrolled_ids = {s.student_id for s in self._enrolled(subject_id)}
        present = {e.student_id for e in self._ledger.entries_for_class(subject_id, day)}
        return sorted(present & enrolled_ids)

    def class_percentage(self, subject_id: str, day: date) -> int:
        total = len(self._enrolled(subject_id))
        return clamp_percentage(len(self.present_students(subject_id, day)), total)

    def class_history(self, subject_id: str) -> List[ClassDaySummary]:
        total = len(self._enrolled(subject_id))
        rows = []
        for day in sorted(self._ledger.class_days(subject_id), reverse=True):
            present = len(self.present_students(subject_id, day))
            rows.append(
                ClassDaySummary(
                    day=day,
                    subject_id=subject_id,
                    present=present,
                    total=total,
                    percentage=clamp_percentage(present, total),
                )
            )
        return rows


@dataclass(frozen=True)
class CheckInResult:
    event: CheckInEvent
    counted: bool

    @property
    def accepted(self) -> bool:
        return self.event.outcome == CheckInOutcome.ACCEPTED


class AttendanceService:
    """Use cases: faculty issues a QR token, a student checks in with it."""

    def __init__(self, issuer: TokenIssuer, verifier: TokenVerifier, aggregator: AttendanceAggregator):
        self._issuer = issuer
        self._verifier = verifier
        self._aggregator = aggregator

    def issue_for_session(self, session: Session, subject_id: Optional[str] = None, *, now_ms: Optional[int] = None) -> AttendanceToken:
        subject_id = subject_id or session.active_subject
        if not subject_id:
            raise ValidationError("Select a subject first")
        token = self._issuer.issue_token(subject_id, session.identity, now_ms=now_ms)
        self._aggregator.track_class_day(subject_id, epoch_ms_to_date(token.issued_at_epoch_ms))
        return token

    def live_token(self, session: Session, *, now_ms: Optional[int] = None) -> Optional[AttendanceToken]:
        return self._issuer.live_token_for(session.identity.identity_id, now_ms)

    def check_in(self, session: Session, raw_payload: str, *, now_ms: Optional[int] = None) -> CheckInResult:
        # Identity is captured up front; a concurrent logout does not affect this call.
        student = session.identity
        if session.role != Role.STUDENT:
            raise AuthorizationError("Only students can check in")

        now_ms = now_epoch_ms() if now_ms is None else int(now_ms)
        event = self._verifier.verify(raw_payload, student, now_ms)
        counted = self._aggregator.record_outcome(event)

        logger.info(
            "Check-in student=%s subject=%s outcome=%s counted=%s",
            event.student_id,
            event.subject_id,
            event.outcome.value,
            counted,
        )
        return CheckInResult(event=event, counted=counted)
