"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

from upasthiti.common.datetime_utils import now_epoch_ms
from upasthiti.container import build_container


def main():
    container = build_container(seed_demo_data=True)
    auth = container.auth_service
    attendance = container.attendance_service

    teacher = auth.authenticate("teacher1", "password123")
    student = auth.authenticate("student1", "password123")

    now = now_epoch_ms()
    token = attendance.issue_for_session(teacher, now_ms=now)
    print("QR payload:", token.to_payload())

    result = attendance.check_in(student, token.to_payload(), now_ms=now + 1000)
    print("Outcome:", result.event.outcome.value, "counted:", result.counted)
    print("Attendance %:", container.aggregator.percentage_for("1"))


if __name__ == "__main__":
    main()
