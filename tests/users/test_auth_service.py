from __future__ import annotations

import pytest

from upasthiti.core.enums import AuthErrorCode, Role
from upasthiti.core.exceptions import AuthenticationError, ValidationError
from upasthiti.users.model import AdminIdentity, FacultyIdentity, StudentIdentity, subjects_of


@pytest.mark.parametrize(
    "username,password,role",
    [
        ("teacher1", "password123", Role.FACULTY),
        ("student1", "password123", Role.STUDENT),
        ("admin", "admin123", Role.ADMIN),
    ],
)
def test_authenticate_returns_session_with_stored_role(container, username, password, role):
    session = container.auth_service.authenticate(username, password)
    assert session.role == role
    assert session.handle


def test_username_is_case_insensitive(container):
    session = container.auth_service.authenticate("  Student1 ", "password123")
    assert session.identity.identity_id == "student1"


def test_password_is_case_sensitive(container):
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("student1", "PASSWORD123")


def test_unknown_user_and_wrong_password_fail_identically(container):
    with pytest.raises(AuthenticationError) as unknown:
        container.auth_service.authenticate("nobody", "password123")
    with pytest.raises(AuthenticationError) as wrong:
        container.auth_service.authenticate("student1", "nope")

    assert str(unknown.value) == str(wrong.value)
    assert unknown.value.code == wrong.value.code == AuthErrorCode.INVALID_CREDENTIALS


def test_initial_subject_selection(login):
    assert login("teacher1").active_subject == "CS101"
    assert login("student2").active_subject == "CS101"
    assert login("admin", "admin123").active_subject is None


def test_session_timestamp(login, fixed_now):
    assert login("student1").issued_at_epoch_ms == fixed_now


def test_logout_is_idempotent(container, login):
    session = login("student1")
    container.auth_service.logout(session)
    assert container.auth_service.get_session(session.handle) is None

    container.auth_service.logout(session)
    container.auth_service.logout(session.handle)
    container.auth_service.logout(None)


def test_new_login_replaces_previous_session(container, login):
    first = login("student1")
    second = login("student1")
    assert container.auth_service.get_session(first.handle) is None
    assert container.auth_service.get_session(second.handle) == second


def test_logout_of_stale_session_keeps_newer_one(container, login):
    first = login("student1")
    second = login("student1")
    container.auth_service.logout(first)
    assert container.auth_service.get_session(second.handle) is not None


def test_select_subject_enforces_membership(container, login):
    session = login("student1")
    updated = container.auth_service.select_subject(session.handle, "MA201")
    assert updated.active_subject == "MA201"
    assert container.auth_service.get_session(session.handle).active_subject == "MA201"

    with pytest.raises(ValidationError):
        container.auth_service.select_subject(session.handle, "CS305")


def test_admin_cannot_select_subject(container, login):
    session = login("admin", "admin123")
    with pytest.raises(ValidationError):
        container.auth_service.select_subject(session.handle, "CS101")


def test_select_subject_after_logout(container, login):
    session = login("student1")
    container.auth_service.logout(session)
    with pytest.raises(AuthenticationError):
        container.auth_service.select_subject(session.handle, "MA201")


def test_passwords_are_stored_hashed(container):
    identity = container.identities_repo.get_by_username("student1")
    assert identity.password_hash != "password123"
    assert "$" in identity.password_hash


def test_duplicate_username_rejected(container):
    with pytest.raises(ValidationError):
        container.user_service.register_admin(username="ADMIN", display_name="Other", password="secret123")


def test_duplicate_student_id_rejected(container):
    with pytest.raises(ValidationError):
        container.user_service.register_student(
            username="student9",
            display_name="Someone",
            password="password123",
            student_id="1",
            subjects=["CS101"],
        )


def test_short_password_rejected(container):
    with pytest.raises(ValidationError):
        container.user_service.register_admin(username="root", display_name="Root", password="123")


def test_subjects_of_each_variant():
    student = StudentIdentity("s", "S", "h", student_id="9", enrolled_subjects=("A", "B"))
    faculty = FacultyIdentity("f", "F", "h", taught_subjects=("C",))
    admin = AdminIdentity("a", "A", "h")

    assert subjects_of(student) == ("A", "B")
    assert subjects_of(faculty) == ("C",)
    assert subjects_of(admin) == ()
    with pytest.raises(TypeError):
        subjects_of(object())


def test_duplicate_faculty_display_name_rejected(container):
    with pytest.raises(ValidationError):
        container.user_service.register_faculty(
            username="teacher3",
            display_name="dr. anjali verma",
            password="password123",
            subjects=["CS101"],
        )
    assert container.identities_repo.get_by_username("teacher3") is None
