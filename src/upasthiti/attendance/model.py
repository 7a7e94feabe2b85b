from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import CheckInOutcome


@dataclass(frozen=True)
class CheckInEvent:
    """Domain entity: the classified result of one scan attempt.

    Produced only by the token verifier; immutable once created.
    """

    student_id: str
    token_ref: Optional[str]
    verified_at_epoch_ms: int
    outcome: CheckInOutcome
    subject_id: Optional[str] = None
    issued_at_epoch_ms: Optional[int] = None

    @property
    def dedup_key(self) -> Optional[tuple]:
        if self.subject_id is None or self.issued_at_epoch_ms is None:
            return None
        return (self.student_id, self.subject_id, self.issued_at_epoch_ms)

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "tokenRef": self.token_ref,
            "verifiedAt": self.verified_at_epoch_ms,
            "outcome": self.outcome.value,
            "subject": self.subject_id,
        }


@dataclass(frozen=True)
class LedgerEntry:
    """Accepted check-in as stored in the ledger."""

    student_id: str
    subject_id: str
    day: date
    event: CheckInEvent


@dataclass(frozen=True)
class ClassDaySummary:
    """Read-model for analytics: attendance of one class on one day."""

    day: date
    subject_id: str
    present: int
    total: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "subject": self.subject_id,
            "present": self.present,
            "total": self.total,
            "percentage": self.percentage,
        }
