"""
Flask routes orchestrator for the translation API

Route implementations live in blueprints:

- blueprints/config_routes.py: Health check, provider listing and defaults
- blueprints/translation_routes.py: Aggregate and streaming translation
"""
import logging
import traceback

from flask import jsonify

from multitranslate.core.exceptions import InvalidRequestError
from .blueprints import create_config_blueprint, create_translation_blueprint

logger = logging.getLogger('routes')


def configure_routes(app, dispatcher, start_stream_job):
    """
    Configure Flask routes by registering all blueprints

    Args:
        app: Flask application instance
        dispatcher: TranslationDispatcher serving every request
        start_stream_job: Callable(request, request_id) that starts a streaming dispatch
    """
    config_bp = create_config_blueprint(dispatcher)
    app.register_blueprint(config_bp)

    translation_bp = create_translation_blueprint(dispatcher, start_stream_job)
    app.register_blueprint(translation_bp)

    _register_error_handlers(app)


def _register_error_handlers(app):
    """Register global error handlers"""

    @app.errorhandler(InvalidRequestError)
    def invalid_request(error):
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(404)
    def route_not_found(error):
        return jsonify({"error": "API Endpoint not found"}), 404

    @app.errorhandler(500)
    def internal_server_error(error):
        logger.error(f"INTERNAL SERVER ERROR: {error}\nTRACEBACK:\n{traceback.format_exc()}")
        return jsonify({"error": "Internal server error", "details": str(error)}), 500
