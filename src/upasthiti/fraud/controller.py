from __future__ import annotations

from flask import Flask, jsonify, request

from ..access.guards import error, make_guards
from ..access.policy import FRAUD_DETECTION
from ..container import Container
from ..core.enums import Severity
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    _, view_required = make_guards(container)
    feed = container.fraud_feed

    @app.route("/api/fraud-alerts", methods=["GET"], endpoint="fraud_alerts")
    @view_required(FRAUD_DETECTION)
    def fraud_alerts():
        severity_s = request.args.get("severity")
        try:
            severity = Severity(severity_s.lower()) if severity_s else None
        except ValueError:
            return error("Unknown severity", 400)

        alerts = feed.list_alerts(severity)
        return jsonify({"count": feed.count(), "alerts": [a.to_dict() for a in alerts]})

    @app.route("/api/fraud-alerts", methods=["POST"], endpoint="ingest_fraud_alerts")
    @view_required(FRAUD_DETECTION)
    def ingest_fraud_alerts():
        data = request.get_json(silent=True)
        if isinstance(data, dict):
            data = data.get("alerts")
        if not isinstance(data, list):
            return error("Expected a list of alerts", 400)
        try:
            added = feed.ingest(data)
        except ValidationError as e:
            return error(str(e), 400)
        return jsonify({"success": True, "added": added, "count": feed.count()})
