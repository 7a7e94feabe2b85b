from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import get_settings_module
from .container import build_container
from .access.controller import register as register_access
from .attendance.controller import register as register_attendance
from .fraud.controller import register as register_fraud
from .tokens.controller import register as register_tokens
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Flask's dev server logs every request at INFO
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("Starting with settings=%s", settings_module)

    container = build_container(
        dedupe_checkins=bool(getattr(settings, "DEDUPE_CHECKINS", True)),
        seed_demo_data=bool(getattr(settings, "SEED_DEMO_DATA", False)),
    )
    app.extensions["upasthiti"] = container

    register_users(app, container)
    register_access(app, container)
    register_tokens(app, container)
    register_attendance(app, container)
    register_fraud(app, container)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("Unhandled error")
        message = f"Internal error: {e}" if app.config["DEBUG"] else "Internal error"
        return jsonify({"success": False, "message": message}), 500

    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"])


if __name__ == "__main__":
    main()
