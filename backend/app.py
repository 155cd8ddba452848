"""
FLASK APP ENTRY POINT - TOTP DEMO BACKEND
=========================================

Builds the Flask app, enables CORS for the demo frontend and registers the
OTP blueprint. One Authenticator (and so one replay guard and one lock) is
shared by every request of the app.

Configuration, lowest to highest precedence:
- DEFAULT_CONFIG below
- environment variables prefixed with TOTP_ (e.g. TOTP_DB_PATH, TOTP_SKEW_WINDOW)
- the mapping passed to create_app()
"""
import logging
from typing import Any, Mapping, Optional

from flask import Flask, jsonify
from flask_cors import CORS

from database import SQLiteStore
from database.setup_database import DATABASE_FILE
from totp_engine import Authenticator
from totp_engine.errors import NotEnrolledError, OTPError, StorageUnavailableError

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "verification failed"

DEFAULT_CONFIG = {
    "DB_PATH": DATABASE_FILE,
    "STEP_SECONDS": 30,
    "DIGITS": 6,
    "SKEW_WINDOW": 1,
    "RETENTION_SECONDS": None,   # None -> full span of the skew window
    "ISSUER": "TOTP Demo",
}


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config.from_prefixed_env("TOTP")
    if config:
        app.config.from_mapping(config)

    # frontend runs on another port during development
    CORS(app)

    retention = app.config["RETENTION_SECONDS"]
    app.extensions["totp"] = Authenticator(
        SQLiteStore(app.config["DB_PATH"]),
        step_seconds=int(app.config["STEP_SECONDS"]),
        digits=int(app.config["DIGITS"]),
        window=int(app.config["SKEW_WINDOW"]),
        retention_seconds=int(retention) if retention is not None else None,
    )

    from backend.routes import otp_bp
    app.register_blueprint(otp_bp)
    _register_error_handlers(app)

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({
            "service": "totp-demo",
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules() if rule.endpoint.startswith("otp.")
            ),
        })

    return app


def _register_error_handlers(app: Flask) -> None:
    # Never echo secrets, digests or internal messages back to the client.

    @app.errorhandler(NotEnrolledError)
    def not_enrolled(e):
        return jsonify({"error": "no account enrolled"}), 404

    @app.errorhandler(StorageUnavailableError)
    def storage_unavailable(e):
        logger.error("Store unavailable: %s", e)
        return jsonify({"error": GENERIC_FAILURE}), 503

    @app.errorhandler(OTPError)
    def otp_error(e):
        logger.info("Rejected request: %s", type(e).__name__)
        return jsonify({"error": GENERIC_FAILURE}), 400


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    create_app().run(debug=True, host='0.0.0.0', port=5000)
