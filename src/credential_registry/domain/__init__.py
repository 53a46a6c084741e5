"""
Domain layer - Pure business logic with zero framework imports.

This package contains the credential lifecycle and authorization state
machine. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    AlreadyAuthorized,
    AlreadyRevoked,
    CredentialNotFound,
    InvalidHolder,
    InvalidInput,
    RegistryError,
    Unauthorized,
)
from .ports import (
    Clock,
    Credential,
    CredentialIssued,
    CredentialRevoked,
    CredentialStatus,
    EventSink,
    Issuer,
    IssuerAuthorized,
    RegistryEvent,
    RegistryRepository,
    RevokeResult,
    Verification,
)
from .registry import NULL_PRINCIPAL, CredentialRegistry, is_valid_principal

__all__ = [
    "NULL_PRINCIPAL",
    "AlreadyAuthorized",
    "AlreadyRevoked",
    "Clock",
    "Credential",
    "CredentialIssued",
    "CredentialNotFound",
    "CredentialRegistry",
    "CredentialRevoked",
    "CredentialStatus",
    "EventSink",
    "InvalidHolder",
    "InvalidInput",
    "Issuer",
    "IssuerAuthorized",
    "RegistryError",
    "RegistryEvent",
    "RegistryRepository",
    "RevokeResult",
    "Unauthorized",
    "Verification",
    "is_valid_principal",
]
