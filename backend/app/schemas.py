"""
Pydantic schemas for request and response validation.

Wire names follow the public API (``githubUsername``, ``fieldOfStudy``,
``from``); Python attributes are snake_case.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


def _require(value: Any, message: str) -> Any:
    """Reject missing or empty values with an express-style message."""
    if value is None or value == "":
        raise PydanticCustomError("required", message)
    return value


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Requests
# =============================================================================


class ProfileUpsertRequest(_WireModel):
    # status and skills are validated when absent too
    status: str | None = Field(default=None, validate_default=True)
    skills: str | None = Field(default=None, validate_default=True)
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    github_username: str | None = None
    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def status_required(cls, v):
        return _require(v, "Status is required")

    @field_validator("skills", mode="before")
    @classmethod
    def skills_required(cls, v):
        return _require(v, "Skills is required")


class _EntryRequest(_WireModel):
    location: str | None = None
    from_: str | None = Field(default=None, alias="from", validate_default=True)
    to: str | None = None
    current: bool = False
    description: str | None = None

    @field_validator("from_", mode="before")
    @classmethod
    def from_required(cls, v):
        return _require(v, "From date is required")

    def to_entry(self) -> dict[str, Any]:
        """Stored form of the entry, keyed by wire names."""
        return self.model_dump(by_alias=True)


class ExperienceRequest(_EntryRequest):
    title: str | None = Field(default=None, validate_default=True)
    company: str | None = Field(default=None, validate_default=True)

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _require(v, "Title is required")

    @field_validator("company", mode="before")
    @classmethod
    def company_required(cls, v):
        return _require(v, "Company is required")


class EducationRequest(_EntryRequest):
    school: str | None = Field(default=None, validate_default=True)
    degree: str | None = Field(default=None, validate_default=True)
    field_of_study: str | None = Field(default=None, validate_default=True)

    @field_validator("school", mode="before")
    @classmethod
    def school_required(cls, v):
        return _require(v, "School is required")

    @field_validator("degree", mode="before")
    @classmethod
    def degree_required(cls, v):
        return _require(v, "Degree is required")

    @field_validator("field_of_study", mode="before")
    @classmethod
    def field_of_study_required(cls, v):
        return _require(v, "Field of study is required")


# Missing fields are reported under their Python name; errors use the wire name
REQUEST_WIRE_NAMES: dict[str, str] = {
    name: field.alias or to_camel(name)
    for model in (ProfileUpsertRequest, ExperienceRequest, EducationRequest)
    for name, field in model.model_fields.items()
}


# =============================================================================
# Responses
# =============================================================================


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    avatar: str | None = None


class SocialLinks(BaseModel):
    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None


class ExperienceEntry(_WireModel):
    id: str
    title: str
    company: str
    location: str | None = None
    from_: str = Field(alias="from")
    to: str | None = None
    current: bool = False
    description: str | None = None


class EducationEntry(_WireModel):
    id: str
    school: str
    degree: str
    field_of_study: str
    from_: str = Field(alias="from")
    to: str | None = None
    current: bool = False
    description: str | None = None


class ProfileResponse(_WireModel):
    id: int
    user: UserSummary | int
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str
    github_username: str | None = None
    skills: list[str] = Field(default_factory=list)
    social: SocialLinks = Field(default_factory=SocialLinks)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    date: datetime | None = None


class MessageResponse(BaseModel):
    msg: str
