from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import Severity


@dataclass(frozen=True)
class FraudAlert:
    """Alert raised by the external anomaly detector; stored and listed only."""

    alert_id: int
    subject_student_id: str
    reason_code: str
    severity: Severity
    observed_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.alert_id,
            "studentId": self.subject_student_id,
            "reason": self.reason_code,
            "severity": self.severity.value,
            "observedAt": self.observed_at.isoformat(),
        }
