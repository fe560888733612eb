"""
SQLAlchemy models for the DevConnector API.

Usage:
    from core.models import User, Profile
"""

from .base import Base
from .profile import PROFILE_SCALAR_FIELDS, SOCIAL_FIELDS, Profile
from .user import User

__all__ = [
    # Base
    "Base",
    # User
    "User",
    # Profile
    "Profile",
    "PROFILE_SCALAR_FIELDS",
    "SOCIAL_FIELDS",
]
