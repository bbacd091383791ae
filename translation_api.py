"""
Flask web server for the translation dispatcher with WebSocket support
"""
import sys
import logging
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Reduce verbosity of werkzeug (Flask HTTP server logs)
logging.getLogger('werkzeug').setLevel(logging.WARNING)

# Fix Windows console encoding for translated scripts
if sys.platform == 'win32':
    import codecs
    sys.stdout = codecs.getwriter('utf-8')(sys.stdout.buffer, 'replace')
    sys.stderr = codecs.getwriter('utf-8')(sys.stderr.buffer, 'replace')

from multitranslate.config import (
    DEFAULT_SERVICES,
    HOST,
    PORT,
    STREAM_EVENT_NAME
)
from multitranslate.api.routes import configure_routes
from multitranslate.api.websocket import configure_websocket_handlers
from multitranslate.api.handlers import start_stream_job
from multitranslate.core.dispatcher import TranslationDispatcher
from multitranslate.core.registry import build_default_registry


app = Flask(__name__)
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*")

# Read-only provider table built once at startup
dispatcher = TranslationDispatcher(registry=build_default_registry())


def validate_configuration():
    """Validate required configuration before starting server"""
    issues = []

    if not PORT or not isinstance(PORT, int):
        issues.append("PORT must be a valid integer")
    unknown = [name for name in DEFAULT_SERVICES if name not in dispatcher.registry]
    if unknown:
        issues.append(f"DEFAULT_SERVICES names unknown providers: {', '.join(unknown)}")

    if issues:
        logger.error("=" * 70)
        logger.error("CONFIGURATION ERROR")
        logger.error("=" * 70)
        for issue in issues:
            logger.error(f"   - {issue}")
        logger.error("Create a .env file from .env.example and restart the application")
        logger.error("=" * 70)
        raise ValueError("Configuration validation failed. See errors above.")

    logger.info("Configuration validated successfully")


# Wrapper function for starting streaming jobs
def start_stream_wrapper(request, request_id):
    """Wrapper to inject dependencies into the job starter"""
    start_stream_job(dispatcher, request, request_id, socketio)


# Configure routes and WebSocket handlers
configure_routes(app, dispatcher, start_stream_wrapper)
configure_websocket_handlers(socketio)


if __name__ == '__main__':
    validate_configuration()

    logger.info("=" * 60)
    logger.info("MULTI-PROVIDER TRANSLATION SERVER")
    logger.info("=" * 60)
    logger.info(f"   - API: http://{HOST}:{PORT}/api/")
    logger.info(f"   - Health Check: http://{HOST}:{PORT}/api/health")
    logger.info(f"   - Providers: {', '.join(spec.display_name for spec in dispatcher.registry.specs())}")
    logger.info(f"   - Default services: {', '.join(DEFAULT_SERVICES)}")
    logger.info(f"   - Stream event: '{STREAM_EVENT_NAME}'")
    logger.info("")

    if HOST == '0.0.0.0':
        logger.warning("Server is binding to 0.0.0.0 (all network interfaces)")
        logger.warning("   For production, use a proper WSGI server like gunicorn:")
        logger.warning("   gunicorn --worker-class eventlet -w 1 --bind 0.0.0.0:5000 translation_api:app")

    socketio.run(app, debug=False, host=HOST, port=PORT, allow_unsafe_werkzeug=True)
