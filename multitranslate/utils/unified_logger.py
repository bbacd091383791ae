"""
Unified logging system for multitranslate
Provides consistent console output for dispatch, provider calls and stream events
"""
import sys
import os
from datetime import datetime
from typing import Optional, Dict, Any, Callable
from enum import Enum


class LogLevel(Enum):
    """Log levels with priority values"""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class LogType(Enum):
    """Types of log messages for special handling"""
    GENERAL = "general"
    DISPATCH_START = "dispatch_start"
    DISPATCH_END = "dispatch_end"
    PROVIDER_REQUEST = "provider_request"
    PROVIDER_RESULT = "provider_result"
    STREAM_EVENT = "stream_event"
    ERROR_DETAIL = "error_detail"


class Colors:
    """ANSI color codes for terminal output"""
    # Check if colors should be disabled
    NO_COLOR = os.environ.get('NO_COLOR') is not None or not sys.stdout.isatty()

    YELLOW = '' if NO_COLOR else '\033[93m'
    WHITE = '' if NO_COLOR else '\033[97m'
    GRAY = '' if NO_COLOR else '\033[90m'
    GREEN = '' if NO_COLOR else '\033[92m'
    RED = '' if NO_COLOR else '\033[91m'
    ENDC = '' if NO_COLOR else '\033[0m'

    @classmethod
    def disable(cls):
        """Disable all colors"""
        cls.YELLOW = cls.WHITE = cls.GRAY = cls.GREEN = cls.RED = cls.ENDC = ''


class UnifiedLogger:
    """
    Unified logger shared by the dispatcher, the adapters and the web host
    """

    def __init__(self,
                 name: str = "multitranslate",
                 console_output: bool = True,
                 enable_colors: bool = True,
                 min_level: LogLevel = LogLevel.INFO,
                 entry_callback: Optional[Callable[[Dict[str, Any]], None]] = None):
        """
        Initialize the unified logger

        Args:
            name: Logger name/identifier
            console_output: Whether to output to console
            enable_colors: Whether to use colored output
            min_level: Minimum log level to display
            entry_callback: Receives every structured log entry (e.g. for a web UI)
        """
        self.name = name
        self.console_output = console_output
        self.enable_colors = enable_colors
        self.min_level = min_level
        self.entry_callback = entry_callback

        if not enable_colors:
            Colors.disable()

    def _format_timestamp(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _format_console_message(self, level: LogLevel, message: str,
                                log_type: LogType = LogType.GENERAL,
                                data: Optional[Dict[str, Any]] = None) -> str:
        """Format message for console output"""
        timestamp = self._format_timestamp()
        data = data or {}

        level_colors = {
            LogLevel.DEBUG: Colors.GRAY,
            LogLevel.INFO: Colors.WHITE,
            LogLevel.WARNING: Colors.YELLOW,
            LogLevel.ERROR: Colors.RED,
            LogLevel.CRITICAL: Colors.RED
        }
        color = level_colors.get(level, Colors.WHITE)

        if log_type == LogType.DISPATCH_START:
            services = ', '.join(data.get('services', []))
            return (f"{Colors.YELLOW}[{timestamp}] DISPATCH {data.get('mode', '')} "
                    f"{data.get('source_lang', '?')} → {data.get('target_lang', '?')} "
                    f"[{services}]{Colors.ENDC}")
        if log_type == LogType.DISPATCH_END:
            return (f"{Colors.GREEN}[{timestamp}] DISPATCH COMPLETE: "
                    f"{data.get('succeeded', 0)}/{data.get('total', 0)} succeeded{Colors.ENDC}")
        if log_type == LogType.PROVIDER_RESULT:
            if data.get('error'):
                return f"{Colors.RED}[{timestamp}] {data.get('service')}: {data['error']}{Colors.ENDC}"
            return f"{Colors.GREEN}[{timestamp}] {data.get('service')}: ok ({data.get('chars', 0)} chars){Colors.ENDC}"
        if log_type == LogType.ERROR_DETAIL:
            output = [f"{Colors.RED}[{timestamp}] ERROR: {message}{Colors.ENDC}"]
            if 'details' in data:
                output.append(f"{Colors.RED}Details: {data['details']}{Colors.ENDC}")
            return '\n'.join(output)

        level_str = f"[{level.name}]" if level != LogLevel.INFO else ""
        return f"{color}[{timestamp}] {level_str} {message}{Colors.ENDC}"

    def log(self, level: LogLevel, message: str,
            log_type: LogType = LogType.GENERAL,
            data: Optional[Dict[str, Any]] = None):
        """
        Main logging method

        Args:
            level: Log level
            message: Log message
            log_type: Type of log for special formatting
            data: Additional data for the log entry
        """
        if level.value < self.min_level.value:
            return

        if self.console_output:
            try:
                print(self._format_console_message(level, message, log_type, data), flush=True)
            except UnicodeEncodeError:
                # Windows consoles (cp1252) cannot print every translated script
                safe_message = message.encode('ascii', 'replace').decode('ascii')
                print(f"[{self._format_timestamp()}] {safe_message}", flush=True)

        if self.entry_callback:
            self.entry_callback({
                'timestamp': datetime.now().isoformat(),
                'level': level.name,
                'type': log_type.value,
                'message': message,
                'data': data or {}
            })

    # Convenience methods
    def debug(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.DEBUG, message, log_type, data)

    def info(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.INFO, message, log_type, data)

    def warning(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.WARNING, message, log_type, data)

    def error(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.ERROR, message, log_type, data)


# Global logger instance
_global_logger = None


def get_logger(name: str = "multitranslate", **kwargs) -> UnifiedLogger:
    """
    Get or create the global logger instance

    Args:
        name: Logger name
        **kwargs: Additional arguments for UnifiedLogger

    Returns:
        UnifiedLogger instance
    """
    global _global_logger
    if _global_logger is None:
        if 'min_level' not in kwargs:
            # Import here to avoid circular dependencies
            from multitranslate.config import DEBUG_MODE
            kwargs['min_level'] = LogLevel.DEBUG if DEBUG_MODE else LogLevel.INFO
        _global_logger = UnifiedLogger(name, **kwargs)
    return _global_logger
