"""
Configuration and health check routes
"""
import logging

from flask import Blueprint, jsonify

from multitranslate.config import (
    DEBUG_MODE,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    DISPATCH_TASK_TIMEOUT,
    MT_REQUEST_TIMEOUT,
    REQUEST_TIMEOUT,
    STREAM_EVENT_NAME,
    STREAM_REQUEST_TIMEOUT,
)

# Setup logger for this module
logger = logging.getLogger('config_routes')
if DEBUG_MODE:
    logger.setLevel(logging.DEBUG)


def create_config_blueprint(dispatcher):
    """Create and configure the config blueprint"""
    bp = Blueprint('config', __name__)

    @bp.route('/api/health', methods=['GET'])
    def health_check():
        """API health check endpoint"""
        return jsonify({
            "status": "ok",
            "message": "Translation API is running",
            "providers": len(dispatcher.registry.specs())
        })

    @bp.route('/api/services', methods=['GET'])
    def list_services():
        """List every registered provider and the default selection"""
        return jsonify({
            "services": [spec.to_dict() for spec in dispatcher.registry.specs()],
            "default_services": dispatcher.default_services
        })

    @bp.route('/api/config', methods=['GET'])
    def get_default_config():
        """Get default configuration values"""
        config_response = {
            "default_source_language": DEFAULT_SOURCE_LANGUAGE,
            "default_target_language": DEFAULT_TARGET_LANGUAGE,
            "request_timeout": REQUEST_TIMEOUT,
            "stream_request_timeout": STREAM_REQUEST_TIMEOUT,
            "mt_request_timeout": MT_REQUEST_TIMEOUT,
            "dispatch_task_timeout": DISPATCH_TASK_TIMEOUT,
            "stream_event": STREAM_EVENT_NAME
        }

        if DEBUG_MODE:
            logger.debug("/api/config response:")
            logger.debug(f"   default_source_language: {DEFAULT_SOURCE_LANGUAGE}")
            logger.debug(f"   default_target_language: {DEFAULT_TARGET_LANGUAGE}")

        return jsonify(config_response)

    return bp
