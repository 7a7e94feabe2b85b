from __future__ import annotations

import json

import pytest

from upasthiti.main import create_app


@pytest.fixture
def app():
    return create_app("upasthiti.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username, password="password123"):
    return client.post("/api/login", json={"username": username, "password": password})


def test_login_returns_role_and_navigation(client):
    resp = login(client, "Teacher1")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["user"]["role"] == "faculty"
    assert body["activeSubject"] == "CS101 Database Systems"
    assert [n["viewId"] for n in body["navigation"]][:2] == ["dashboard", "attendance"]


def test_login_failure_does_not_leak_which_part_was_wrong(client):
    unknown = login(client, "ghost")
    wrong = login(client, "teacher1", "bad")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json()


def test_form_login(client):
    resp = client.post("/api/login", data={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.get_json()["subjectSelector"] is False


def test_requires_login(client):
    assert client.get("/api/navigation").status_code == 401


def test_logout_destroys_session(client):
    login(client, "student1")
    assert client.get("/api/me").status_code == 200
    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/me").status_code == 401
    # second logout is a no-op
    assert client.post("/api/logout").status_code == 200


def test_student_cannot_open_faculty_views(client):
    login(client, "student1")
    assert client.post("/api/qr/token", json={}).status_code == 403
    assert client.get("/api/fraud-alerts").status_code == 403
    assert client.get("/api/views/generate-qr").get_json()["allowed"] is False


def test_select_subject(client):
    login(client, "student1")
    ok = client.post("/api/subject", json={"subject": "PHY101 Mechanics"})
    assert ok.get_json()["activeSubject"] == "PHY101 Mechanics"
    bad = client.post("/api/subject", json={"subject": "CS305 Data Mining"})
    assert bad.status_code == 400


def test_qr_issue_and_check_in_flow():
    app = create_app("upasthiti.config.testing")
    faculty = app.test_client()
    student = app.test_client()

    login(faculty, "teacher1")
    issued = faculty.post("/api/qr/token", json={"subject": "CS101 Database Systems"})
    assert issued.status_code == 200
    token = issued.get_json()["token"]
    assert token["expiresAt"] - token["issuedAt"] == 300_000
    assert set(json.loads(token["payload"])) == {"subject", "teacher", "timestamp", "expires"}

    current = faculty.get("/api/qr/token").get_json()["token"]
    assert current["payload"] == token["payload"]

    image = faculty.get("/api/qr/token/image")
    assert image.status_code == 200
    assert image.mimetype == "image/png"

    login(student, "student1")
    first = student.post("/api/checkin", json={"payload": token["payload"]}).get_json()
    assert first["outcome"] == "accepted"
    assert first["counted"] is True

    second = student.post("/api/checkin", json={"payload": token["payload"]}).get_json()
    assert second["outcome"] == "accepted"
    assert second["counted"] is False

    bad = student.post("/api/checkin", json={"payload": "nonsense"}).get_json()
    assert bad["success"] is False
    assert bad["outcome"] == "malformed"

    mine = student.get("/api/analytics/me").get_json()
    cs101 = [s for s in mine["subjects"] if s["subject"] == "CS101 Database Systems"][0]
    assert cs101["percentage"] == 100

    history = faculty.get("/api/analytics/class").get_json()["history"]
    assert history[0]["present"] == 1
    assert history[0]["total"] == 2
    assert history[0]["percentage"] == 50

    live = faculty.get("/api/attendance").get_json()
    assert live["present"] == ["1"]


def test_issue_unknown_subject(client):
    login(client, "teacher1")
    resp = client.post("/api/qr/token", json={"subject": "MA201 Linear Algebra"})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "UnknownSubject"


def test_no_live_token_image(client):
    login(client, "teacher2")
    assert client.get("/api/qr/token/image").status_code == 404


def test_fraud_alerts_feed(client):
    login(client, "admin", "admin123")
    listed = client.get("/api/fraud-alerts").get_json()
    assert listed["count"] == 2

    added = client.post(
        "/api/fraud-alerts",
        json={"alerts": [{"id": 3, "studentId": "2", "reason": "Proxy scan", "severity": "low", "observedAt": "2025-01-20T09:00:00"}]},
    )
    assert added.status_code == 200
    assert added.get_json()["count"] == 3

    high = client.get("/api/fraud-alerts?severity=high").get_json()
    assert [a["id"] for a in high["alerts"]] == [1]

    dup = client.post("/api/fraud-alerts", json=[{"id": 3, "studentId": "2", "reason": "x", "severity": "low", "observedAt": "2025-01-20T09:00:00"}])
    assert dup.status_code == 400


def session_handle(client):
    with client.session_transaction() as s:
        return s.get("session_handle")


def test_failed_login_destroys_existing_session(app, client):
    auth = app.extensions["upasthiti"].auth_service
    login(client, "student1")
    handle = session_handle(client)
    assert auth.get_session(handle) is not None

    assert login(client, "student1", "wrong").status_code == 401
    assert auth.get_session(handle) is None
    assert session_handle(client) is None
    assert client.get("/api/me").status_code == 401


def test_login_as_other_user_destroys_previous_session(app, client):
    auth = app.extensions["upasthiti"].auth_service
    login(client, "student1")
    old = session_handle(client)

    assert login(client, "teacher1").status_code == 200
    assert auth.get_session(old) is None
    assert auth.get_session(session_handle(client)).identity.identity_id == "teacher1"
