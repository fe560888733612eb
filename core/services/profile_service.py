"""
Profile aggregate service.

Merges partial updates into the stored profile and splices entries into the
embedded experience/education lists. Every operation is a plain
fetch, mutate, commit sequence on the injected session.
"""

import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager, nullcontext
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import PROFILE_WRITE_SERIALIZED, Settings
from core.exceptions import NotFoundError, StorageError
from core.locks import KeyedLocks
from core.logging import get_logger
from core.models import PROFILE_SCALAR_FIELDS, SOCIAL_FIELDS, Profile
from core.repositories import ProfileRepository, UserRepository

NO_PROFILE_MESSAGE = "There is no profile for this user"
PROFILE_NOT_FOUND_MESSAGE = "Profile not found"

EXPERIENCE = "experience"
EDUCATION = "education"


def split_skills(raw: str) -> list[str]:
    """Split a comma-delimited skills string, trimming each token.

    Empty tokens are kept: ``"a,,b"`` gives ``["a", "", "b"]``.
    """
    return [skill.strip() for skill in raw.split(",")]


def build_profile_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build the update document for an upsert.

    Absent or empty inputs are omitted so they never overwrite stored values.
    The social object is always rebuilt from the supplied links only.
    """
    update: dict[str, Any] = {}
    for name in PROFILE_SCALAR_FIELDS:
        value = fields.get(name)
        if value:
            update[name] = value

    skills = fields.get("skills")
    if skills:
        update["skills"] = split_skills(skills)

    update["social"] = {name: fields[name] for name in SOCIAL_FIELDS if fields.get(name)}
    return update


def find_entry_index(entries: list[dict[str, Any]], entry_id: str) -> int:
    """Position of the entry with ``entry_id``, or -1 when absent."""
    for index, entry in enumerate(entries):
        if entry.get("id") == entry_id:
            return index
    return -1


class ProfileService:
    """
    Create, read and edit profile aggregates.

    Args:
        session: ORM session for the current request
        settings: Application settings (write mode, sentinel removal)
        locks: Process-wide registry used when PROFILE_WRITE_MODE=serialized
        logger: Bound logger; defaults to the "profile" logger
    """

    def __init__(
        self,
        session: Session,
        settings: Settings,
        locks: KeyedLocks | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.session = session
        self.settings = settings
        self.locks = locks if locks is not None else KeyedLocks()
        self.logger = logger or get_logger("profile")
        self.profiles = ProfileRepository(session)
        self.users = UserRepository(session)

    # =========================================================================
    # Plumbing
    # =========================================================================

    def _write_guard(self, user_id: int):
        """Per-user lock in serialized mode, nothing otherwise."""
        if self.settings.profile_write_mode == PROFILE_WRITE_SERIALIZED:
            return self.locks.hold(user_id)
        return nullcontext()

    @contextmanager
    def _storage(self, operation: str, user_id: int) -> Iterator[None]:
        """Translate ORM failures into StorageError after rolling back."""
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.error(
                "storage_error",
                operation=operation,
                user_id=user_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise StorageError(f"{operation} failed") from exc

    def _require_profile(self, user_id: int) -> Profile:
        profile = self.profiles.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundError(NO_PROFILE_MESSAGE)
        return profile

    # =========================================================================
    # Profile document
    # =========================================================================

    def upsert_profile(self, user_id: int, fields: Mapping[str, Any]) -> Profile:
        """
        Create the user's profile or update it in place.

        ``fields`` holds the raw inputs: scalar attributes, a comma-delimited
        ``skills`` string and the social link names.
        """
        update = build_profile_fields(fields)

        with self._write_guard(user_id), self._storage("upsert_profile", user_id):
            is_new = not self.profiles.has_profile(user_id)
            profile = self.profiles.create_or_update(user_id, update)
            self.session.commit()

        self.logger.info(
            "profile_created" if is_new else "profile_updated",
            user_id=user_id,
            fields=sorted(update),
        )
        return profile

    def get_profile(self, user_id: int) -> Profile:
        """Profile of ``user_id`` with its owner loaded."""
        with self._storage("get_profile", user_id):
            profile = self.profiles.get_by_user_id(user_id, with_user=True)
        if profile is None:
            raise NotFoundError(NO_PROFILE_MESSAGE)
        return profile

    def get_profile_by_user(self, user_id: int | str) -> Profile:
        """Public lookup by user id taken from a URL path."""
        if isinstance(user_id, str):
            # ASCII digits only
            if not (user_id.isascii() and user_id.isdigit()):
                raise NotFoundError(PROFILE_NOT_FOUND_MESSAGE)
            user_id = int(user_id)

        with self._storage("get_profile_by_user", user_id):
            profile = self.profiles.get_by_user_id(user_id, with_user=True)
        if profile is None:
            raise NotFoundError(PROFILE_NOT_FOUND_MESSAGE)
        return profile

    def list_profiles(self) -> list[Profile]:
        """All profiles with owners loaded."""
        with self._storage("list_profiles", 0):
            return self.profiles.list_with_users()

    def delete_profile_and_user(self, user_id: int) -> None:
        """
        Delete the profile, then the user account.

        The two deletes commit separately. If the user delete fails the
        profile stays deleted and StorageError is raised.
        """
        with self._storage("delete_profile", user_id):
            removed = self.profiles.delete_by_user_id(user_id)
            self.session.commit()
        self.logger.info("profile_deleted", user_id=user_id, existed=removed)

        with self._storage("delete_user", user_id):
            self.users.delete(user_id)
            self.session.commit()
        self.logger.info("user_deleted", user_id=user_id)

    # =========================================================================
    # Embedded lists
    # =========================================================================

    def _add_entry(self, user_id: int, list_name: str, entry: Mapping[str, Any]) -> Profile:
        new_entry = {"id": uuid.uuid4().hex, **entry}

        with self._write_guard(user_id), self._storage(f"add_{list_name}", user_id):
            profile = self._require_profile(user_id)
            # Assign a new list so the JSON column is marked dirty
            setattr(profile, list_name, [new_entry, *getattr(profile, list_name)])
            self.session.commit()

        self.logger.info(f"{list_name}_added", user_id=user_id, entry_id=new_entry["id"])
        return profile

    def _remove_entry(self, user_id: int, list_name: str, entry_id: str) -> Profile:
        with self._write_guard(user_id), self._storage(f"remove_{list_name}", user_id):
            profile = self._require_profile(user_id)
            entries = list(getattr(profile, list_name))
            index = find_entry_index(entries, entry_id)

            if index >= 0:
                del entries[index]
            elif self.settings.legacy_sentinel_removal and entries:
                # Deliberate deviation switch: an unknown id normally changes
                # nothing, legacy mode lets the -1 miss index drop the last entry.
                entries.pop(index)
                self.logger.warning(
                    f"{list_name}_sentinel_removal", user_id=user_id, entry_id=entry_id
                )
            else:
                self.logger.info(f"{list_name}_entry_not_found", user_id=user_id, entry_id=entry_id)

            setattr(profile, list_name, entries)
            self.session.commit()

        return profile

    def add_experience(self, user_id: int, entry: Mapping[str, Any]) -> Profile:
        """Insert an experience entry at the front of the list."""
        return self._add_entry(user_id, EXPERIENCE, entry)

    def remove_experience(self, user_id: int, entry_id: str) -> Profile:
        """Remove the experience entry with ``entry_id``."""
        return self._remove_entry(user_id, EXPERIENCE, entry_id)

    def add_education(self, user_id: int, entry: Mapping[str, Any]) -> Profile:
        """Insert an education entry at the front of the list."""
        return self._add_entry(user_id, EDUCATION, entry)

    def remove_education(self, user_id: int, entry_id: str) -> Profile:
        """Remove the education entry with ``entry_id``."""
        return self._remove_entry(user_id, EDUCATION, entry_id)


__all__ = [
    "EDUCATION",
    "EXPERIENCE",
    "NO_PROFILE_MESSAGE",
    "PROFILE_NOT_FOUND_MESSAGE",
    "ProfileService",
    "build_profile_fields",
    "find_entry_index",
    "split_skills",
]
