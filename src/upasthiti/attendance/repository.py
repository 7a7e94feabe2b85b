from __future__ import annotations

import threading
from datetime import date
from typing import Dict, List, Protocol, Sequence, Set, Tuple

from .model import LedgerEntry


class CheckInLedger(Protocol):
    """Repository interface for the append-only check-in ledger."""

    def append(self, entry: LedgerEntry, *, dedupe: bool = True) -> bool:
        raise NotImplementedError

    def entries_for_student(self, student_id: str) -> Sequence[LedgerEntry]:
        raise NotImplementedError

    def entries_for_class(self, subject_id: str, day: date) -> Sequence[LedgerEntry]:
        raise NotImplementedError

    def track_class_day(self, subject_id: str, day: date) -> None:
        raise NotImplementedError

    def class_days(self, subject_id: str) -> Sequence[date]:
        raise NotImplementedError


class InMemoryCheckInLedger:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: List[LedgerEntry] = []
        self._seen: Set[tuple] = set()
        self._class_days: Set[Tuple[str, date]] = set()

    def append(self, entry: LedgerEntry, *, dedupe: bool = True) -> bool:
        """Append an accepted check-in.

        The duplicate check and the insert happen under one lock so two
        near-simultaneous scans of the same token cannot both be counted.
        Returns False when the entry was a duplicate.
        """
        key = entry.event.dedup_key
        with self._lock:
            if dedupe and key is not None:
                if key in self._seen:
                    return False
                self._seen.add(key)
            self._entries.append(entry)
            self._class_days.add((entry.subject_id, entry.day))
        return True

    def entries_for_student(self, student_id: str) -> List[LedgerEntry]:
        with self._lock:
            return [e for e in self._entries if e.student_id == student_id]

    def entries_for_class(self, subject_id: str, day: date) -> List[LedgerEntry]:
        with self._lock:
            return [e for e in self._entries if e.subject_id == subject_id and e.day == day]

    def track_class_day(self, subject_id: str, day: date) -> None:
        with self._lock:
            self._class_days.add((subject_id, day))

    def class_days(self, subject_id: str) -> List[date]:
        with self._lock:
            return sorted({d for s, d in self._class_days if s == subject_id})

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
