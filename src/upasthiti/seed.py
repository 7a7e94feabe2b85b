"""Demo accounts and alerts used by development and test settings."""

from __future__ import annotations

from datetime import datetime

from .core.enums import Severity
from .fraud.model import FraudAlert
from .fraud.service import FraudAlertFeed
from .users.service import UserService

DEMO_FACULTY = [
    ("teacher1", "Dr. Anjali Verma", "password123", ["CS101 Database Systems", "CS305 Data Mining"]),
    ("teacher2", "Prof. Rajesh Singh", "password123", ["MA201 Linear Algebra", "PHY101 Mechanics"]),
]

DEMO_STUDENTS = [
    ("student1", "Aarav Sharma", "password123", "1", ["CS101 Database Systems", "MA201 Linear Algebra", "PHY101 Mechanics"]),
    ("student2", "Priya Patel", "password123", "2", ["CS101 Database Systems", "CS305 Data Mining"]),
]

DEMO_ADMINS = [
    ("admin", "Admin User", "admin123"),
]


def seed_demo_identities(users: UserService) -> None:
    for username, name, password, subjects in DEMO_FACULTY:
        users.register_faculty(username=username, display_name=name, password=password, subjects=subjects)
    for username, name, password, student_id, subjects in DEMO_STUDENTS:
        users.register_student(username=username, display_name=name, password=password, student_id=student_id, subjects=subjects)
    for username, name, password in DEMO_ADMINS:
        users.register_admin(username=username, display_name=name, password=password)


def seed_demo_alerts(feed: FraudAlertFeed, *, today: datetime | None = None) -> None:
    today = today or datetime.now()
    feed.ingest(
        [
            FraudAlert(1, "3", "Multiple device detections", Severity.HIGH, today.replace(hour=10, minute=15, second=0, microsecond=0)),
            FraudAlert(2, "5", "Location mismatch", Severity.MEDIUM, today.replace(hour=9, minute=45, second=0, microsecond=0)),
        ]
    )
