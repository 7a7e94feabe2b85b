from __future__ import annotations

import pytest

from upasthiti.container import Container, build_container

T0 = 1_700_000_000_000


@pytest.fixture
def fixed_now() -> int:
    return T0


@pytest.fixture
def container() -> Container:
    c = build_container(seed_demo_data=False)
    users = c.user_service
    users.register_faculty(
        username="teacher1",
        display_name="Dr. Anjali Verma",
        password="password123",
        subjects=["CS101", "CS305"],
    )
    users.register_faculty(
        username="teacher2",
        display_name="Prof. Rajesh Singh",
        password="password123",
        subjects=["MA201", "CS101"],
    )
    users.register_student(
        username="student1",
        display_name="Aarav Sharma",
        password="password123",
        student_id="1",
        subjects=["CS101", "MA201"],
    )
    users.register_student(
        username="student2",
        display_name="Priya Patel",
        password="password123",
        student_id="2",
        subjects=["CS101", "CS305"],
    )
    users.register_admin(username="admin", display_name="Admin User", password="admin123")
    return c


@pytest.fixture
def login(container):
    def _login(username: str, password: str = "password123", now_ms: int = T0):
        return container.auth_service.authenticate(username, password, now_ms=now_ms)

    return _login
