"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the entities the registry stores and the interfaces
(ports) the domain requires from infrastructure. Adapters implement these
protocols through structural subtyping.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class CredentialStatus(str, Enum):
    """
    Credential lifecycle states.

    State Transitions (forward-only):
    - ACTIVE -> REVOKED (revocation by the original issuer)

    Observed States:
    - EXPIRED: computed from the stored expiry versus the current time,
      never written. A revoked credential reports REVOKED even when it
      has also expired.

    Terminal States:
    - REVOKED: no un-revoke operation exists
    """

    ACTIVE = "ACTIVE"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"


class RevokeResult(Enum):
    """
    Result of a revocation attempt.

    Used by revoke_credential() to indicate success or the specific
    rejection reason.
    """

    SUCCESS = "success"
    NOT_ISSUER = "not_issuer"
    ALREADY_REVOKED = "already_revoked"


@dataclass(frozen=True)
class Issuer:
    """Principal authorized by the admin to mint credentials."""

    principal: str
    authorized: bool = False
    organization_name: str = ""
    issued_count: int = 0


@dataclass(frozen=True)
class Credential:
    """
    Stored credential record.

    ``expiry`` of 0 means the credential never expires. ``is_valid`` is the
    stored revocation flag; the only mutation a record ever sees is its
    true -> false transition.
    """

    id: int
    holder: str
    issuer: str
    skill_name: str
    credential_ref: str
    issue_date: int
    expiry: int = 0
    is_valid: bool = True

    def is_current(self, now: int) -> bool:
        """Stored flag combined with the expiry check at ``now``."""
        return self.is_valid and (self.expiry == 0 or self.expiry > now)

    def status(self, now: int) -> CredentialStatus:
        """Lifecycle state at ``now``; revocation takes precedence over expiry."""
        if not self.is_valid:
            return CredentialStatus.REVOKED
        if self.expiry != 0 and self.expiry <= now:
            return CredentialStatus.EXPIRED
        return CredentialStatus.ACTIVE


@dataclass(frozen=True)
class Verification:
    """Result of verify_credential(); all fields empty for an unknown id."""

    is_valid: bool
    holder: str
    issuer: str
    skill_name: str
    issue_date: int


@dataclass(frozen=True)
class IssuerAuthorized:
    issuer: str
    organization_name: str
    name: str = "IssuerAuthorized"


@dataclass(frozen=True)
class CredentialIssued:
    credential_id: int
    holder: str
    issuer: str
    skill_name: str
    name: str = "CredentialIssued"


@dataclass(frozen=True)
class CredentialRevoked:
    credential_id: int
    name: str = "CredentialRevoked"


RegistryEvent = IssuerAuthorized | CredentialIssued | CredentialRevoked


class RegistryRepository(Protocol):
    """Port interface for registry persistence."""

    def authorize_issuer(self, issuer: str, organization_name: str) -> bool:
        """
        Atomically authorize an issuer.

        Creates (or overwrites an unauthorized) issuer record with
        authorized=True, the given organization name and a zero issued count.

        Args:
            issuer: Issuer principal
            organization_name: Organization name, stored verbatim

        Returns:
            True if authorized now, False if the issuer was already authorized
        """
        ...

    def issue_credential(
        self,
        issuer: str,
        holder: str,
        skill_name: str,
        credential_ref: str,
        expiry: int,
        issued_at: int,
    ) -> int | None:
        """
        Atomically mint a credential.

        Allocates the next id, stores the record, appends the id to the
        holder index and increments the issuer's issued count as one unit.

        Returns:
            The new credential id, or None if the issuer is not authorized
            (in which case nothing changes, including the id counter)
        """
        ...

    def revoke_credential(self, caller: str, credential_id: int) -> RevokeResult:
        """
        Atomically revoke a credential.

        Return values by scenario:
        - SUCCESS: caller is the original issuer and the credential was valid
        - NOT_ISSUER: credential unknown or issued by someone else
        - ALREADY_REVOKED: caller is the issuer but the credential is revoked
        """
        ...

    def get_credential(self, credential_id: int) -> Credential | None:
        """Return the stored credential, or None if the id was never issued."""
        ...

    def get_issuer(self, principal: str) -> Issuer | None:
        """Return the issuer record, or None if never authorized."""
        ...

    def get_holder_credentials(self, holder: str) -> list[int]:
        """Return the holder's credential ids in issuance order."""
        ...

    def last_credential_id(self) -> int:
        """Return the most recently allocated id (0 before any issuance)."""
        ...


class EventSink(Protocol):
    """Port interface for registry notifications."""

    def publish(self, event: RegistryEvent) -> None:
        """
        Deliver a notification for a completed state transition.

        Called synchronously after the transition is stored. Delivery and
        ordering guarantees belong to the sink.
        """
        ...


class Clock(Protocol):
    """Port interface for the current time."""

    def now(self) -> int:
        """Return the current time as UNIX seconds."""
        ...
