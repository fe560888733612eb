"""
Core services holding the business logic behind the HTTP routes.
"""

from core.services.profile_service import ProfileService

__all__ = [
    "ProfileService",
]
