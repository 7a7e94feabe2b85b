from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union

from ..common.validators import require_non_empty
from ..core.enums import Severity
from ..core.exceptions import ValidationError
from .model import FraudAlert

logger = logging.getLogger(__name__)


def alert_from_dict(data: dict) -> FraudAlert:
    """Build an alert from a detector record (JSON-like dict)."""
    if not isinstance(data, dict):
        raise ValidationError("Alert must be an object")
    try:
        alert_id = int(data["id"])
        severity = Severity(str(data["severity"]).lower())
        observed_at = datetime.fromisoformat(str(data["observedAt"]))
    except KeyError as e:
        raise ValidationError(f"Missing field {e.args[0]!r}") from e
    except ValueError as e:
        raise ValidationError(f"Invalid alert: {e}") from e

    return FraudAlert(
        alert_id=alert_id,
        subject_student_id=require_non_empty(str(data.get("studentId") or ""), "studentId"),
        reason_code=require_non_empty(str(data.get("reason") or ""), "reason"),
        severity=severity,
        observed_at=observed_at,
    )


class FraudAlertFeed:
    """Read-only store for alerts produced by an external detector.

    No scoring happens here; alerts are never modified once stored.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._alerts: Dict[int, FraudAlert] = {}

    def ingest(self, alerts: Iterable[Union[FraudAlert, dict]]) -> int:
        batch: List[FraudAlert] = []
        for a in alerts:
            alert = a if isinstance(a, FraudAlert) else alert_from_dict(a)
            if not isinstance(alert.severity, Severity):
                raise ValidationError("Unknown severity")
            batch.append(alert)

        ids = [a.alert_id for a in batch]
        if len(ids) != len(set(ids)):
            raise ValidationError("Duplicate alert id in batch")

        with self._lock:
            clash = [i for i in ids if i in self._alerts]
            if clash:
                raise ValidationError(f"Alert id {clash[0]} already stored")
            for alert in batch:
                self._alerts[alert.alert_id] = alert

        if batch:
            logger.info("Ingested %d fraud alert(s)", len(batch))
        return len(batch)

    def list_alerts(self, severity: Optional[Severity] = None) -> List[FraudAlert]:
        with self._lock:
            items = list(self._alerts.values())
        if severity is not None:
            items = [a for a in items if a.severity == severity]
        items.sort(key=lambda a: a.observed_at, reverse=True)
        return items

    def count(self) -> int:
        with self._lock:
            return len(self._alerts)
