from __future__ import annotations

from flask import Flask, g, jsonify

from ..container import Container
from .guards import make_guards


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container)
    policy = container.access_policy

    @app.route("/api/navigation", endpoint="navigation")
    @login_required
    def navigation():
        role = g.auth.role
        return jsonify(
            {
                "navigation": [item.to_dict() for item in policy.visible_navigation(role)],
                "subjectSelector": policy.shows_subject_selector(role),
                "subjects": list(g.auth.subjects),
                "activeSubject": g.auth.active_subject,
            }
        )

    @app.route("/api/views/<view_id>", endpoint="view_access")
    @login_required
    def view_access(view_id: str):
        return jsonify({"viewId": view_id, "allowed": policy.is_view_allowed(g.auth.role, view_id)})
