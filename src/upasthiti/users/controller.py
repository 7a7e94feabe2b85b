from __future__ import annotations

from flask import Flask, g, jsonify, session

from ..access.guards import SESSION_KEY, error, make_guards, request_data
from ..container import Container
from ..core.exceptions import AuthenticationError, ValidationError
from .service import Session


def session_view(container: Container, auth: Session) -> dict:
    policy = container.access_policy
    return {
        "user": {
            "id": auth.identity.identity_id,
            "name": auth.identity.display_name,
            "role": auth.role.value,
        },
        "subjects": list(auth.subjects),
        "activeSubject": auth.active_subject,
        "subjectSelector": policy.shows_subject_selector(auth.role),
        "navigation": [item.to_dict() for item in policy.visible_navigation(auth.role)],
    }


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        username = str(data.get("username", ""))
        password = str(data.get("password", ""))

        # Any session already bound to this client ends here, whether or not the new login succeeds.
        container.auth_service.logout(session.pop(SESSION_KEY, None))
        session.clear()

        try:
            auth = container.auth_service.authenticate(username, password)
        except AuthenticationError as e:
            return error(str(e), 401)

        session[SESSION_KEY] = auth.handle
        return jsonify({"success": True, **session_view(container, auth)})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.auth_service.logout(session.pop(SESSION_KEY, None))
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, **session_view(container, g.auth)})

    @app.route("/api/subject", methods=["POST"], endpoint="select_subject")
    @login_required
    def select_subject():
        subject = str(request_data().get("subject", ""))
        try:
            auth = container.auth_service.select_subject(g.auth.handle, subject)
        except ValidationError as e:
            return error(str(e), 400)
        except AuthenticationError as e:
            return error(str(e), 401)
        return jsonify({"success": True, "activeSubject": auth.active_subject})
