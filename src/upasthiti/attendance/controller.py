from __future__ import annotations

from datetime import datetime, timezone

from flask import Flask, g, jsonify, request

from ..access.guards import error, make_guards
from ..access.policy import ANALYTICS, ATTENDANCE
from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.enums import Role
from ..users.model import StudentIdentity


def register(app: Flask, container: Container) -> None:
    _, view_required = make_guards(container)
    aggregator = container.aggregator

    @app.route("/api/analytics/me", endpoint="my_analytics")
    @view_required(ANALYTICS)
    def my_analytics():
        identity = g.auth.identity
        if not isinstance(identity, StudentIdentity):
            return error("Personal analytics are only available to students", 403)

        subject = request.args.get("subject") or None
        return jsonify(
            {
                "studentId": identity.student_id,
                "overall": aggregator.percentage_for(identity.student_id),
                "subjects": [
                    {"subject": s, "percentage": aggregator.percentage_for(identity.student_id, s)}
                    for s in identity.enrolled_subjects
                    if subject is None or s == subject
                ],
            }
        )

    @app.route("/api/analytics/class", endpoint="class_analytics")
    @view_required(ANALYTICS)
    def class_analytics():
        if g.auth.role == Role.STUDENT:
            return error("Class analytics are only available to staff", 403)

        subject = request.args.get("subject") or g.auth.active_subject
        if not subject:
            return error("Subject is required", 400)
        if g.auth.role == Role.FACULTY and subject not in g.auth.subjects:
            return error("Subject is not available for this account", 403)

        return jsonify(
            {
                "subject": subject,
                "history": [row.to_dict() for row in aggregator.class_history(subject)],
            }
        )

    @app.route("/api/attendance", endpoint="live_attendance")
    @view_required(ATTENDANCE)
    def live_attendance():
        subject = request.args.get("subject") or g.auth.active_subject
        if subject not in g.auth.subjects:
            return error("Subject is not available for this account", 403)

        try:
            day_s = request.args.get("date")
            day = parse_iso_date(day_s) if day_s else datetime.now(timezone.utc).date()
        except ValueError:
            return error("Invalid date (YYYY-MM-DD)", 400)

        return jsonify(
            {
                "subject": subject,
                "date": day.isoformat(),
                "present": aggregator.present_students(subject, day),
                "percentage": aggregator.class_percentage(subject, day),
            }
        )
