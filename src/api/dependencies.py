"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, Request

from src.config.settings import Settings, get_settings
from src.domain.ports import SignupRepository
from src.domain.registration import RegistrationService


def get_repository(request: Request) -> SignupRepository:
    """
    Get the signup repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_app_settings() -> Settings:
    """Expose cached settings as an overridable dependency."""
    return get_settings()


def get_registration_service(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires the repository and retry settings into the domain service.
    """
    return RegistrationService(
        repository=get_repository(request),
        max_attempts=settings.max_attempts,
        retry_backoff_seconds=settings.retry_backoff_seconds,
    )
