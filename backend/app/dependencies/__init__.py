"""
FastAPI dependency injection module.

Everything a route needs is built from objects the app factory placed on
``app.state``:
- settings
- logger
- profile write locks
- GitHub client
"""

import structlog
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.api import GitHubClient
from core.config import Settings
from core.db import get_db
from core.services import ProfileService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_app_logger(request: Request) -> structlog.stdlib.BoundLogger:
    """Application logger."""
    return request.app.state.logger


def get_profile_service(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    logger: structlog.stdlib.BoundLogger = Depends(get_app_logger),
) -> ProfileService:
    """Get a ProfileService bound to the request session."""
    return ProfileService(
        db,
        settings=settings,
        locks=request.app.state.profile_locks,
        logger=logger.bind(component="profile"),
    )


def get_github_client(request: Request) -> GitHubClient:
    """Get the shared GitHub client."""
    return request.app.state.github
