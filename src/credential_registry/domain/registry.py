"""
Credential registry domain service - Credential lifecycle state machine.

This module contains the core business logic of the registry: who may
issue credentials, how credentials are minted and revoked, and how
validity is evaluated.

Credential State Machine (Forward-Only Transitions)
===================================================

States:
- ACTIVE: Initial state after issuance
- REVOKED: Terminal state after revocation by the original issuer
- EXPIRED: Observed state, computed at query time from the stored expiry

Valid Transitions:
    ACTIVE -> REVOKED   (revoke_credential by the issuing principal only)

Invalid Transitions (never allowed):
    REVOKED -> any      (REVOKED is terminal)

Roles:
- Admin: fixed at construction, may authorize issuers
- Issuer: authorized by the admin, may issue and revoke its own credentials
- Public: may verify credentials and list a holder's credentials

The caller principal is passed explicitly into every mutating operation.
The service never authenticates it; the hosting environment does that.

Note: Atomicity of each transition is enforced at the repository level
(lock-serialized in memory, row locks in PostgreSQL). The service performs
stateless checks, delegates the atomic check-and-set to the repository,
and publishes a notification only after a successful transition.
"""

import logging
from dataclasses import dataclass

from .exceptions import (
    AlreadyAuthorized,
    AlreadyRevoked,
    CredentialNotFound,
    InvalidHolder,
    InvalidInput,
    Unauthorized,
)
from .ports import (
    Clock,
    Credential,
    CredentialIssued,
    CredentialRevoked,
    EventSink,
    Issuer,
    IssuerAuthorized,
    RegistryEvent,
    RegistryRepository,
    RevokeResult,
    Verification,
)

logger = logging.getLogger(__name__)

NULL_PRINCIPAL = "0x" + "0" * 40


def is_valid_principal(principal: str | None) -> bool:
    """
    Check that a principal reference is usable as a holder.

    Rejects None, empty or whitespace-only strings and the null principal.
    """
    if principal is None or not principal.strip():
        return False
    return principal.strip().lower() != NULL_PRINCIPAL


@dataclass
class CredentialRegistry:
    """
    Domain service for the credential registry.

    Orchestrates role checks, input validation, repository transitions
    and event publication.
    """

    repository: RegistryRepository
    event_sink: EventSink
    clock: Clock
    admin_principal: str

    def authorize_issuer(self, caller: str, issuer: str, organization_name: str) -> None:
        """
        Authorize a principal to issue credentials.

        Args:
            caller: Principal performing the call (must be the admin)
            issuer: Principal to authorize
            organization_name: Organization name, stored verbatim

        Raises:
            Unauthorized: If caller is not the admin
            AlreadyAuthorized: If issuer is already authorized
        """
        if caller != self.admin_principal:
            logger.warning("authorize_issuer rejected: %s is not the admin", caller)
            raise Unauthorized(caller)

        authorized = self.repository.authorize_issuer(issuer, organization_name)
        if not authorized:
            logger.warning("authorize_issuer rejected: %s already authorized", issuer)
            raise AlreadyAuthorized(issuer)

        logger.info("Issuer authorized: %s (%s)", issuer, organization_name)
        self._publish(IssuerAuthorized(issuer=issuer, organization_name=organization_name))

    def issue_credential(
        self,
        caller: str,
        holder: str,
        skill_name: str,
        credential_ref: str,
        expiry: int = 0,
    ) -> int:
        """
        Mint a credential for a holder.

        No uniqueness is enforced across (holder, skill_name); the same
        issuer may issue the same skill to the same holder repeatedly.

        Args:
            caller: Issuing principal (must be an authorized issuer)
            holder: Principal receiving the credential
            skill_name: Non-empty skill name
            credential_ref: Opaque reference to off-system metadata
            expiry: Absolute expiry in UNIX seconds, 0 for never

        Returns:
            The newly allocated credential id

        Raises:
            Unauthorized: If caller is not an authorized issuer
            InvalidHolder: If holder is not a valid principal
            InvalidInput: If skill_name is empty
        """
        holder = holder.strip() if isinstance(holder, str) else holder
        issuer = self.repository.get_issuer(caller)
        if issuer is None or not issuer.authorized:
            logger.warning("issue_credential rejected: %s is not an authorized issuer", caller)
            raise Unauthorized(caller)

        if not is_valid_principal(holder):
            logger.warning("issue_credential rejected: invalid holder %r", holder)
            raise InvalidHolder(holder)

        if not skill_name:
            logger.warning("issue_credential rejected: empty skill name")
            raise InvalidInput("skill_name must not be empty")

        credential_id = self.repository.issue_credential(
            caller, holder, skill_name, credential_ref, expiry, self.clock.now()
        )
        if credential_id is None:
            # Authorization is checked again under the repository lock
            logger.warning("issue_credential rejected: %s is not an authorized issuer", caller)
            raise Unauthorized(caller)

        logger.info(
            "Credential issued: id=%d holder=%s issuer=%s skill=%s",
            credential_id,
            holder,
            caller,
            skill_name,
        )
        self._publish(
            CredentialIssued(
                credential_id=credential_id,
                holder=holder,
                issuer=caller,
                skill_name=skill_name,
            )
        )
        return credential_id

    def verify_credential(self, credential_id: int) -> Verification:
        """
        Evaluate a credential's validity at the current time.

        Read-only. An unknown id is not an error: it yields a record with
        is_valid=False and empty fields.
        """
        credential = self.repository.get_credential(credential_id)
        if credential is None:
            return Verification(is_valid=False, holder="", issuer="", skill_name="", issue_date=0)

        return Verification(
            is_valid=credential.is_current(self.clock.now()),
            holder=credential.holder,
            issuer=credential.issuer,
            skill_name=credential.skill_name,
            issue_date=credential.issue_date,
        )

    def revoke_credential(self, caller: str, credential_id: int) -> None:
        """
        Revoke a credential. Irreversible.

        Only the principal that issued the credential may revoke it; neither
        the admin nor other issuers can.

        Raises:
            Unauthorized: If caller did not issue the credential (or it does not exist)
            AlreadyRevoked: If the credential is already revoked
        """
        result = self.repository.revoke_credential(caller, credential_id)

        if result == RevokeResult.NOT_ISSUER:
            logger.warning(
                "revoke_credential rejected: %s did not issue credential %d", caller, credential_id
            )
            raise Unauthorized(caller)

        if result == RevokeResult.ALREADY_REVOKED:
            logger.warning("revoke_credential rejected: credential %d already revoked", credential_id)
            raise AlreadyRevoked(credential_id)

        logger.info("Credential revoked: id=%d by %s", credential_id, caller)
        self._publish(CredentialRevoked(credential_id=credential_id))

    def get_holder_credentials(self, holder: str) -> list[int]:
        """Return the holder's credential ids in issuance order, unfiltered."""
        return self.repository.get_holder_credentials(holder.strip())

    def get_credential(self, credential_id: int) -> Credential:
        """
        Return the full stored record.

        Unlike verify_credential(), an unknown id raises CredentialNotFound.
        """
        credential = self.repository.get_credential(credential_id)
        if credential is None:
            raise CredentialNotFound(credential_id)
        return credential

    def get_issuer(self, principal: str) -> Issuer:
        """Return the issuer record; unknown principals yield an unauthorized empty record."""
        issuer = self.repository.get_issuer(principal)
        if issuer is None:
            return Issuer(principal=principal)
        return issuer

    def total_credentials(self) -> int:
        """Number of credentials ever issued, revoked ones included."""
        return self.repository.last_credential_id()

    def now(self) -> int:
        """Current time in UNIX seconds from the injected clock."""
        return self.clock.now()

    def _publish(self, event: RegistryEvent) -> None:
        # The transition is already committed; a failing sink must not undo it
        try:
            self.event_sink.publish(event)
        except Exception:
            logger.exception("Event publication failed: %s", event.name)
