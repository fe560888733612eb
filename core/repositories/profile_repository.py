"""Developer profile repository."""

from typing import Any

from sqlalchemy.orm import joinedload

from core.models import Profile

from .base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile operations."""

    model = Profile

    def get_by_user_id(self, user_id: int, with_user: bool = False) -> Profile | None:
        """Get profile by owning user ID, optionally loading the user row."""
        query = self.session.query(Profile)
        if with_user:
            query = query.options(joinedload(Profile.user))
        return query.filter(Profile.user_id == user_id).first()

    def list_with_users(self) -> list[Profile]:
        """Get every profile with its user loaded. Unpaginated."""
        return self.session.query(Profile).options(joinedload(Profile.user)).order_by(Profile.id).all()

    def create_or_update(self, user_id: int, fields: dict[str, Any]) -> Profile:
        """
        Create or update a user's profile.

        Only the keys present in ``fields`` are written; other stored
        attributes are left untouched.
        """
        profile = self.get_by_user_id(user_id)

        if profile:
            for key, value in fields.items():
                setattr(profile, key, value)
        else:
            profile = Profile(user_id=user_id, **fields)
            self.session.add(profile)

        self.session.flush()
        return profile

    def delete_by_user_id(self, user_id: int) -> bool:
        """Delete the profile owned by ``user_id``. Returns False when absent."""
        profile = self.get_by_user_id(user_id)
        if profile is None:
            return False
        self.session.delete(profile)
        self.session.flush()
        return True

    def has_profile(self, user_id: int) -> bool:
        """Check if a user has a profile (efficient exists query)."""
        return self.exists_where(user_id=user_id)
