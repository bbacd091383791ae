"""
Helpers for reading settings that may live in the process environment or in .env
"""
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import dotenv_values


def _get_config_dir() -> Path:
    """Get directory for configuration files"""
    return Path.cwd()


def read_env_file_value(key: str, env_file: Optional[Union[str, Path]] = None) -> Optional[str]:
    """
    Read a single key from a dotenv-style file without touching os.environ.

    Args:
        key: Variable name to look up
        env_file: Path to the file (defaults to ./.env)

    Returns:
        The value, or None when the file or the key is missing or empty
    """
    path = Path(env_file) if env_file else _get_config_dir() / '.env'
    if not path.is_file():
        return None
    value = dotenv_values(path).get(key)
    return value or None


def lookup_setting(key: str, configured: Optional[str] = None,
                   env_file: Optional[Union[str, Path]] = None) -> Optional[str]:
    """
    Resolve a setting with the precedence: explicit value, environment, .env file.

    Args:
        key: Environment variable name used for the two fallbacks
        configured: Value supplied by the caller's configuration, if any
        env_file: Optional override for the dotenv file location

    Returns:
        The first non-empty value found, or None
    """
    if configured:
        return configured
    from_environment = os.environ.get(key)
    if from_environment:
        return from_environment
    return read_env_file_value(key, env_file)
