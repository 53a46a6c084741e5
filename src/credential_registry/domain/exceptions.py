"""
Domain exceptions - Semantic error types for the credential registry.

This module defines domain-specific exceptions that communicate
authorization and input rule violations without leaking infrastructure
details. Every failure is terminal for the attempted operation and
leaves registry state unchanged.
"""


class RegistryError(Exception):
    """Base class for credential registry domain errors."""

    pass


class Unauthorized(RegistryError):
    """Caller lacks the required role (admin, authorized issuer, original issuer)."""

    pass


class AlreadyAuthorized(RegistryError):
    """Issuer is already authorized."""

    pass


class AlreadyRevoked(RegistryError):
    """Credential has already been revoked."""

    pass


class InvalidHolder(RegistryError):
    """Holder principal is empty or the null principal."""

    pass


class InvalidInput(RegistryError):
    """A required text field is empty."""

    pass


class CredentialNotFound(RegistryError):
    """No credential exists with the requested id."""

    pass
