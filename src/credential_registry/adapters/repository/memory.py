"""
In-memory repository adapter - Implements RegistryRepository protocol.

This module provides a process-local implementation of the domain's
repository port, used for development, tests and single-process
deployments.

Concurrency Design:
-------------------
A single lock serializes every read and write. Each mutation therefore
appears atomic to every other operation, and no reader can observe an
allocated id whose record body is not yet stored. Concurrent issuance
draws ids from one linearizable counter.
"""

import threading
from dataclasses import replace

from credential_registry.domain.ports import Credential, Issuer, RevokeResult


class InMemoryRegistryRepository:
    """
    Implements RegistryRepository protocol with dictionaries.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Records are frozen dataclasses; revocation replaces the stored record.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._credentials: dict[int, Credential] = {}
        self._issuers: dict[str, Issuer] = {}
        self._holder_index: dict[str, list[int]] = {}
        self._next_id = 0

    def authorize_issuer(self, issuer: str, organization_name: str) -> bool:
        with self._lock:
            existing = self._issuers.get(issuer)
            if existing is not None and existing.authorized:
                return False
            self._issuers[issuer] = Issuer(
                principal=issuer,
                authorized=True,
                organization_name=organization_name,
                issued_count=0,
            )
            return True

    def issue_credential(
        self,
        issuer: str,
        holder: str,
        skill_name: str,
        credential_ref: str,
        expiry: int,
        issued_at: int,
    ) -> int | None:
        with self._lock:
            record = self._issuers.get(issuer)
            if record is None or not record.authorized:
                return None

            self._next_id += 1
            credential_id = self._next_id
            self._credentials[credential_id] = Credential(
                id=credential_id,
                holder=holder,
                issuer=issuer,
                skill_name=skill_name,
                credential_ref=credential_ref,
                issue_date=issued_at,
                expiry=expiry,
                is_valid=True,
            )
            self._holder_index.setdefault(holder, []).append(credential_id)
            self._issuers[issuer] = replace(record, issued_count=record.issued_count + 1)
            return credential_id

    def revoke_credential(self, caller: str, credential_id: int) -> RevokeResult:
        with self._lock:
            credential = self._credentials.get(credential_id)
            if credential is None or credential.issuer != caller:
                return RevokeResult.NOT_ISSUER
            if not credential.is_valid:
                return RevokeResult.ALREADY_REVOKED
            self._credentials[credential_id] = replace(credential, is_valid=False)
            return RevokeResult.SUCCESS

    def get_credential(self, credential_id: int) -> Credential | None:
        with self._lock:
            return self._credentials.get(credential_id)

    def get_issuer(self, principal: str) -> Issuer | None:
        with self._lock:
            return self._issuers.get(principal)

    def get_holder_credentials(self, holder: str) -> list[int]:
        with self._lock:
            # Copy so callers never see later appends
            return list(self._holder_index.get(holder, []))

    def last_credential_id(self) -> int:
        with self._lock:
            return self._next_id
