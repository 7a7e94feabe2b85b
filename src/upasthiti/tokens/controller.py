from __future__ import annotations

from flask import Flask, g, jsonify, send_file

from ..access.guards import error, make_guards, request_data
from ..access.policy import GENERATE_QR, SCAN_QR
from ..common.datetime_utils import now_epoch_ms
from ..container import Container
from ..core.enums import IssuanceErrorCode
from ..core.exceptions import AuthorizationError, IssuanceError, ValidationError
from .model import AttendanceToken
from .qr_image import render_png


def token_view(token: AttendanceToken, now_ms: int) -> dict:
    return {
        "subject": token.subject_id,
        "teacher": token.teacher_name,
        "issuedAt": token.issued_at_epoch_ms,
        "expiresAt": token.expires_at_epoch_ms,
        "remainingMs": token.remaining_ms(now_ms),
        "payload": token.to_payload(),
    }


def register(app: Flask, container: Container) -> None:
    _, view_required = make_guards(container)

    @app.route("/api/qr/token", methods=["POST"], endpoint="generate_qr")
    @view_required(GENERATE_QR)
    def generate_qr():
        subject = str(request_data().get("subject") or "") or None
        now_ms = now_epoch_ms()
        try:
            token = container.attendance_service.issue_for_session(g.auth, subject, now_ms=now_ms)
        except IssuanceError as e:
            status = 403 if e.code == IssuanceErrorCode.UNAUTHORIZED else 400
            return jsonify({"success": False, "code": e.code.value, "message": str(e)}), status
        except ValidationError as e:
            return error(str(e), 400)
        return jsonify({"success": True, "token": token_view(token, now_ms)})

    @app.route("/api/qr/token", methods=["GET"], endpoint="current_qr")
    @view_required(GENERATE_QR)
    def current_qr():
        now_ms = now_epoch_ms()
        token = container.attendance_service.live_token(g.auth, now_ms=now_ms)
        if token is None:
            return jsonify({"success": True, "token": None})
        return jsonify({"success": True, "token": token_view(token, now_ms)})

    @app.route("/api/qr/token/image", endpoint="current_qr_image")
    @view_required(GENERATE_QR)
    def current_qr_image():
        token = container.attendance_service.live_token(g.auth)
        if token is None:
            return error("No active QR code, generate a new one", 404)
        return send_file(render_png(token.to_payload()), mimetype="image/png")

    @app.route("/api/checkin", methods=["POST"], endpoint="checkin")
    @view_required(SCAN_QR)
    def checkin():
        raw = request_data().get("payload", "")
        if not isinstance(raw, str):
            raw = ""
        try:
            result = container.attendance_service.check_in(g.auth, raw)
        except AuthorizationError as e:
            return error(str(e), 403)
        return jsonify(
            {
                "success": result.accepted,
                "outcome": result.event.outcome.value,
                "counted": result.counted,
                "event": result.event.to_dict(),
            }
        )
