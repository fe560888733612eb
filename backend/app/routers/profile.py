"""
Profile endpoints.

Thin handlers: authenticate, validate the body, call ProfileService and
shape the aggregate into a ProfileResponse. Errors are translated by
backend.app.error_handlers.
"""

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.api import NO_GITHUB_PROFILE_MESSAGE, GitHubClient
from core.models import Profile, User
from core.services import ProfileService

from ..auth.dependencies import get_current_user
from ..dependencies import get_app_logger, get_github_client, get_profile_service
from ..schemas import (
    EducationEntry,
    EducationRequest,
    ExperienceEntry,
    ExperienceRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpsertRequest,
    SocialLinks,
    UserSummary,
)

router = APIRouter(prefix="/profile", tags=["profile"])


def _profile_to_response(profile: Profile, include_user: bool = False) -> ProfileResponse:
    """Convert a Profile to its response, optionally with the owner's reduced view."""
    user: UserSummary | int = profile.user_id
    if include_user and profile.user is not None:
        user = UserSummary.model_validate(profile.user)

    return ProfileResponse(
        id=profile.id,
        user=user,
        company=profile.company,
        website=profile.website,
        location=profile.location,
        bio=profile.bio,
        status=profile.status,
        github_username=profile.github_username,
        skills=profile.skills or [],
        social=SocialLinks(**(profile.social or {})),
        experience=[ExperienceEntry.model_validate(e) for e in profile.experience or []],
        education=[EducationEntry.model_validate(e) for e in profile.education or []],
        date=profile.created_at,
    )


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Get current user's profile."""
    return _profile_to_response(service.get_profile(current_user.id), include_user=True)


@router.post("", response_model=ProfileResponse)
def upsert_profile(
    payload: ProfileUpsertRequest,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Create or update the current user's profile."""
    profile = service.upsert_profile(current_user.id, payload.model_dump())
    return _profile_to_response(profile)


@router.get("", response_model=list[ProfileResponse])
def list_profiles(service: ProfileService = Depends(get_profile_service)):
    """Get all profiles."""
    return [_profile_to_response(p, include_user=True) for p in service.list_profiles()]


@router.get("/user/{user_id}", response_model=ProfileResponse)
def get_profile_by_user(
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
):
    """Get profile by user ID."""
    return _profile_to_response(service.get_profile_by_user(user_id), include_user=True)


@router.delete("", response_model=MessageResponse)
def delete_profile(
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Delete the current user's profile, then the user."""
    service.delete_profile_and_user(current_user.id)
    return MessageResponse(msg="User deleted")


@router.put("/experience", response_model=ProfileResponse)
def add_experience(
    payload: ExperienceRequest,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Add an experience entry to the current user's profile."""
    return _profile_to_response(service.add_experience(current_user.id, payload.to_entry()))


@router.delete("/experience/{exp_id}", response_model=ProfileResponse)
def remove_experience(
    exp_id: str,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Remove an experience entry from the current user's profile."""
    return _profile_to_response(service.remove_experience(current_user.id, exp_id))


@router.put("/education", response_model=ProfileResponse)
def add_education(
    payload: EducationRequest,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Add an education entry to the current user's profile."""
    return _profile_to_response(service.add_education(current_user.id, payload.to_entry()))


@router.delete("/education/{edu_id}", response_model=ProfileResponse)
def remove_education(
    edu_id: str,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Remove an education entry from the current user's profile."""
    return _profile_to_response(service.remove_education(current_user.id, edu_id))


@router.get("/github/{username}")
def get_github_repos(
    username: str,
    github: GitHubClient = Depends(get_github_client),
    app_logger: structlog.stdlib.BoundLogger = Depends(get_app_logger),
):
    """
    Get the user's latest GitHub repositories.

    A non-200 upstream answer yields 400. Its parsed body is not forwarded,
    only logged, so the error response is the single response sent.
    """
    listing = github.fetch_repos(username)

    if not listing.ok:
        app_logger.warning(
            "github_body_after_error",
            username=username,
            upstream_status=listing.status_code,
            parsed=listing.parse_error is None,
        )
        return JSONResponse(status_code=400, content={"msg": NO_GITHUB_PROFILE_MESSAGE})

    if listing.parse_error is not None:
        raise ValueError(f"GitHub returned an unparseable body: {listing.parse_error}")

    return listing.repos
