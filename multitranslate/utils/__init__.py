"""
Utility modules

    - unified_logger: console logging shared by the dispatcher and adapters
    - env_helper: settings lookup across os.environ and .env
"""

__all__ = []
