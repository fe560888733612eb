"""
Developer profile SQLAlchemy model.

The profile row is the aggregate: scalar attributes plus JSON columns holding
the embedded social links and the experience/education lists.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User


# Scalar attributes accepted by the upsert, in wire order
PROFILE_SCALAR_FIELDS = ("company", "website", "location", "bio", "status", "github_username")
SOCIAL_FIELDS = ("youtube", "facebook", "twitter", "instagram", "linkedin")


class Profile(Base):
    """
    Developer profile, one per user.

    Attributes:
        status: Professional status, e.g. "Developer" (required)
        github_username: GitHub login used by the repository proxy
        skills: Ordered list of skills
        social: Mapping of social network name to URL
        experience: Embedded experience entries, most recent first
        education: Embedded education entries, most recent first
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, index=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(512), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(255))
    github_username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, default=list)
    social: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    experience: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    education: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="profile")
