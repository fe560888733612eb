"""
Application configuration.

Re-exports the settings model from core.config so backend modules can use
relative imports:
    from .config import Settings, get_settings
"""

from core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
