"""
DevConnector Core Library.

This package provides the core functionality for the DevConnector API,
including configuration, database management, models, repositories,
services and logging.

Usage:
    # Config
    from core.config import get_settings, Settings

    # Database
    from core.db import DatabaseManager, get_db
    from core.models import User, Profile
    from core.repositories import ProfileRepository

    # Services
    from core.services import ProfileService

    # Logging
    from core.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"
