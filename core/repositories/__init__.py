"""
Repository pattern implementations for data access.

Repositories provide a clean abstraction over database operations.

Usage:
    from core.repositories import ProfileRepository

    with db.session() as session:
        repo = ProfileRepository(session)
        profile = repo.get_by_user_id(user_id, with_user=True)
"""

from .base import BaseRepository
from .profile_repository import ProfileRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
    "UserRepository",
]
