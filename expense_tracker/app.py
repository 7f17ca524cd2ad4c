# expense_tracker/app.py

import logging
import os
import time
from datetime import datetime, timezone

from dotenv import load_dotenv
from flask import Flask, g, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from . import db
from .auth import auth_bp
from .config import Config
from .errors import register_error_handlers
from .expenses import expenses_bp
from .middleware import register_jwt_callbacks
from .responses import success

logger = logging.getLogger("expense-backend")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


# ---------------- Flask App Factory ----------------
def create_app(overrides=None):
    config = Config(overrides)

    app = Flask(__name__)
    app.config.from_mapping(config.to_flask())
    app.config.update(overrides or {})
    app.json.sort_keys = False

    if config.is_production and config.JWT_SECRET_KEY.startswith("dev-"):
        logger.warning("JWT_SECRET_KEY is the development default; set it before serving real users")

    # JWT
    jwt = JWTManager(app)
    register_jwt_callbacks(jwt)

    # CORS
    CORS(app, resources={r"/api/*": {"origins": config.cors_origins}}, supports_credentials=True)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(expenses_bp, url_prefix="/api/expenses")

    register_error_handlers(app)

    # Initialize DB
    db.init_app(app)

    # ---------------- Request hooks ----------------
    @app.before_request
    def start_timer():
        g._started = time.perf_counter()

    @app.after_request
    def finish_request(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        elapsed = (time.perf_counter() - g.get("_started", time.perf_counter())) * 1000
        logger.info(
            '%s "%s %s" %s %.1fms',
            request.remote_addr, request.method, request.full_path.rstrip("?"),
            response.status_code, elapsed,
        )
        return response

    # ---------------- Core Endpoints ----------------
    @app.route("/api/health")
    def health():
        return success(
            message="Expense Tracker API is running",
            extra={"timestamp": datetime.now(timezone.utc).isoformat()},
        )

    logger.info("App created (env=%s)", config.APP_ENV)
    return app


# ---------------- Run ----------------
def main():
    load_dotenv(os.environ.get("CONFIG_ENV_FILE", "config.env"))
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    logger.info("Server running on port %s", app.config["PORT"])
    logger.info("Health check: http://localhost:%s/api/health", app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=not app.config["IS_PRODUCTION"])


if __name__ == "__main__":
    main()
