"""
Centralized configuration
"""
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Check for DEBUG_MODE early (before .env is loaded, check environment)
_debug_mode = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if _debug_mode:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("DEBUG_MODE enabled - verbose logging active")

# Get config directory (current working directory)
_config_dir = Path.cwd()
ENV_FILE = _config_dir / '.env'

if _debug_mode:
    _config_logger.debug(f"Looking for .env at: {ENV_FILE.absolute()}")
    _config_logger.debug(f".env exists: {ENV_FILE.exists()}")

# Load .env file if it exists (missing file is fine, every value has a default)
_dotenv_result = load_dotenv(ENV_FILE)
if _debug_mode:
    _config_logger.debug(f"load_dotenv() returned: {_dotenv_result}")

# Server configuration
HOST = os.getenv('HOST', '127.0.0.1')
PORT = int(os.getenv('PORT', '5000'))

# Per-adapter request timeouts (seconds)
REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '15'))
STREAM_REQUEST_TIMEOUT = float(os.getenv('STREAM_REQUEST_TIMEOUT', '60'))
MT_REQUEST_TIMEOUT = float(os.getenv('MT_REQUEST_TIMEOUT', '10'))

# Optional bound on each provider task inside a dispatch (0 disables it)
DISPATCH_TASK_TIMEOUT = float(os.getenv('DISPATCH_TASK_TIMEOUT', '0'))

# Streaming event delivery
SINK_QUEUE_SIZE = int(os.getenv('SINK_QUEUE_SIZE', '256'))
SINK_PUT_TIMEOUT = float(os.getenv('SINK_PUT_TIMEOUT', '5'))
STREAM_EVENT_NAME = os.getenv('STREAM_EVENT_NAME', 'translation-stream')

# Providers used when a request does not name any
DEFAULT_SERVICES = [
    name.strip()
    for name in os.getenv('DEFAULT_SERVICES', 'OpenAI,DeepL,Alibaba,GoogleFree').split(',')
    if name.strip()
]

# Default languages from environment
DEFAULT_SOURCE_LANGUAGE = os.getenv('DEFAULT_SOURCE_LANGUAGE', 'auto')
DEFAULT_TARGET_LANGUAGE = os.getenv('DEFAULT_TARGET_LANGUAGE', 'zh')

# Environment fallback for the DeepL key (read again at call time, see env_helper)
DEEPL_API_KEY_ENV = 'DEEPL_API_KEY'

# Debug mode (reload after .env is loaded)
DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'


def _mask(secret: str) -> str:
    return '***' + secret[-4:] if secret else '(not set)'


# Log loaded configuration in debug mode
if DEBUG_MODE or _debug_mode:
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("=" * 60)
    _config_logger.debug("LOADED CONFIGURATION VALUES:")
    _config_logger.debug("=" * 60)
    _config_logger.debug(f"   HOST: {HOST}")
    _config_logger.debug(f"   PORT: {PORT}")
    _config_logger.debug(f"   REQUEST_TIMEOUT: {REQUEST_TIMEOUT}")
    _config_logger.debug(f"   STREAM_REQUEST_TIMEOUT: {STREAM_REQUEST_TIMEOUT}")
    _config_logger.debug(f"   MT_REQUEST_TIMEOUT: {MT_REQUEST_TIMEOUT}")
    _config_logger.debug(f"   DISPATCH_TASK_TIMEOUT: {DISPATCH_TASK_TIMEOUT or '(disabled)'}")
    _config_logger.debug(f"   SINK_QUEUE_SIZE: {SINK_QUEUE_SIZE}")
    _config_logger.debug(f"   DEFAULT_SERVICES: {', '.join(DEFAULT_SERVICES)}")
    _config_logger.debug(f"   {DEEPL_API_KEY_ENV}: {_mask(os.getenv(DEEPL_API_KEY_ENV, ''))}")
    _config_logger.debug("=" * 60)

# Fixed instruction sent to every chat-style provider
SYSTEM_PROMPT_TEMPLATE = (
    "You are a translation engine. Translate the following text to {target_lang}. "
    "Output ONLY the translated text, no explanations."
)
CHAT_MAX_TOKENS = int(os.getenv('CHAT_MAX_TOKENS', '1000'))

# Browser-like headers for the unauthenticated Google endpoint
BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
