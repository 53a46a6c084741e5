"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from credential_registry.adapters.clock import SystemClock
from credential_registry.config.settings import get_settings
from credential_registry.domain.ports import EventSink, RegistryRepository
from credential_registry.domain.registry import CredentialRegistry

# Module-level singleton - SystemClock is stateless
_clock = SystemClock()


def get_repository(request: Request) -> RegistryRepository:
    """
    Get repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_event_sink(request: Request) -> EventSink:
    """Get event sink from app state."""
    return request.app.state.event_sink


def get_clock() -> SystemClock:
    """Get system clock (singleton)."""
    return _clock


def get_registry(request: Request) -> CredentialRegistry:
    """
    Create registry service with injected dependencies.

    Wires together the repository, event sink, clock and configured admin.
    """
    return CredentialRegistry(
        repository=get_repository(request),
        event_sink=get_event_sink(request),
        clock=get_clock(),
        admin_principal=get_settings().admin_principal,
    )


# Caller principal header. Authentication happens upstream; the value is trusted.
principal_header = APIKeyHeader(
    name="X-Principal",
    description="Verified caller principal",
    auto_error=False,
)


def get_caller_principal(principal: str | None = Depends(principal_header)) -> str:
    """
    Extract the caller principal from the X-Principal header.

    Returns:
        Principal with surrounding whitespace removed

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if principal is None or not principal.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller principal",
        )
    return principal.strip()
