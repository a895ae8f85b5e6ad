"""Main Flask application server."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from app.config import load_config
from app.routes.activity_routes import activity_bp, init_activity_routes

logger = logging.getLogger(__name__)

app = None


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app(config: Optional[Dict[str, Any]] = None, llm_client=None):
    """Create and configure Flask application."""
    global app

    # Load configuration
    config = config or load_config()

    # Setup logging
    logging.basicConfig(
        level=config.get('LOG_LEVEL', 'INFO'),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Create Flask app
    app = Flask(__name__)
    app.config['DEBUG'] = config.get('DEBUG', False)
    app.json.ensure_ascii = False

    # Setup CORS
    CORS(app, supports_credentials=True, origins=config.get('CORS_ORIGINS', []))

    @app.before_request
    def log_request():
        logger.info("%s %s", request.method, request.path)

    @app.after_request
    def log_response(response):
        logger.info("%s %s completed %d", request.method, request.path, response.status_code)
        return response

    init_activity_routes(config, llm_client=llm_client)
    app.register_blueprint(activity_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if exc.code == 404:
            return jsonify({
                "error": "Not found",
                "message": f"Route {request.path} not found",
                "timestamp": _timestamp(),
            }), 404
        return jsonify({
            "error": exc.name,
            "message": exc.description,
            "timestamp": _timestamp(),
        }), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return jsonify({
            "error": "Internal server error",
            "message": "Something went wrong processing your request",
            "timestamp": _timestamp(),
        }), 500

    return app


if __name__ == '__main__':
    config = load_config()
    app = create_app(config)
    port = config.get('PORT', 3001)
    host = config.get('HOST', '0.0.0.0')

    logger.info("Family Activity Finder API running on %s:%s", host, port)
    logger.info("Health check: http://localhost:%s/api/health", port)
    logger.info("Activities endpoint: http://localhost:%s/api/activities", port)
    app.run(host=host, port=port, debug=config.get('DEBUG', False))
