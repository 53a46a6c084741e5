"""
Integration tests for PostgresRegistryRepository.

Tests repository operations against a real PostgreSQL database.
Skipped when PostgreSQL is not reachable at DATABASE_URL.
"""

import pytest
from psycopg_pool import ConnectionPool

from credential_registry.adapters.clock import FixedClock
from credential_registry.adapters.events.outbox import InMemoryEventOutbox
from credential_registry.adapters.repository.postgres import PostgresRegistryRepository, run_migrations
from credential_registry.domain.exceptions import AlreadyRevoked, Unauthorized
from credential_registry.domain.ports import Issuer, RevokeResult, Verification
from credential_registry.domain.registry import CredentialRegistry

pytestmark = pytest.mark.integration


def issue(repository: PostgresRegistryRepository, issuer: str = "issuer", holder: str = "holder"):
    return repository.issue_credential(issuer, holder, "Rust", "ipfs://rust", 0, 1000)


class TestAuthorizeIssuer:
    """Tests for authorize_issuer method."""

    def test_first_authorization_returns_true(
        self, pg_repository: PostgresRegistryRepository
    ) -> None:
        """Authorizing a new principal returns True and stores the record."""
        assert pg_repository.authorize_issuer("issuer", "Acme U") is True
        assert pg_repository.get_issuer("issuer") == Issuer("issuer", True, "Acme U", 0)

    def test_second_authorization_returns_false(
        self, pg_repository: PostgresRegistryRepository
    ) -> None:
        """Re-authorizing returns False (not exception) and keeps the record."""
        pg_repository.authorize_issuer("issuer", "Acme U")

        assert pg_repository.authorize_issuer("issuer", "Renamed") is False
        assert pg_repository.get_issuer("issuer").organization_name == "Acme U"

    def test_unknown_issuer_is_none(self, pg_repository: PostgresRegistryRepository) -> None:
        """Never-authorized principal has no record."""
        assert pg_repository.get_issuer("nobody") is None


class TestIssueCredential:
    """Tests for issue_credential method."""

    def test_unauthorized_returns_none_and_keeps_counter(
        self, pg_repository: PostgresRegistryRepository
    ) -> None:
        """Unauthorized issuance returns None; the counter stays at 0."""
        assert issue(pg_repository, issuer="stranger") is None
        assert pg_repository.last_credential_id() == 0

    def test_sequential_ids_and_index(self, pg_repository: PostgresRegistryRepository) -> None:
        """Ids start at 1, holder index keeps order, issuer count increments."""
        pg_repository.authorize_issuer("issuer", "Acme U")

        ids = [issue(pg_repository, holder=h) for h in ("alice", "bob", "alice")]

        assert ids == [1, 2, 3]
        assert pg_repository.get_holder_credentials("alice") == [1, 3]
        assert pg_repository.get_holder_credentials("bob") == [2]
        assert pg_repository.get_holder_credentials("carol") == []
        assert pg_repository.get_issuer("issuer").issued_count == 3
        assert pg_repository.last_credential_id() == 3

    def test_stored_record(self, pg_repository: PostgresRegistryRepository) -> None:
        """Stored record round-trips every field."""
        pg_repository.authorize_issuer("issuer", "Acme U")
        credential_id = pg_repository.issue_credential(
            "issuer", "holder", "Go", "ipfs://go", 5000, 1234
        )

        credential = pg_repository.get_credential(credential_id)
        assert credential.holder == "holder"
        assert credential.issuer == "issuer"
        assert credential.skill_name == "Go"
        assert credential.credential_ref == "ipfs://go"
        assert credential.issue_date == 1234
        assert credential.expiry == 5000
        assert credential.is_valid is True

    def test_unknown_credential_is_none(self, pg_repository: PostgresRegistryRepository) -> None:
        """Unknown id returns None."""
        assert pg_repository.get_credential(99) is None


class TestRevokeCredential:
    """Tests for revoke_credential method."""

    def test_revoke_flow(self, pg_repository: PostgresRegistryRepository) -> None:
        """SUCCESS once, ALREADY_REVOKED after, NOT_ISSUER for others."""
        pg_repository.authorize_issuer("issuer", "Acme U")
        credential_id = issue(pg_repository)

        assert pg_repository.revoke_credential("other", credential_id) == RevokeResult.NOT_ISSUER
        assert pg_repository.revoke_credential("issuer", credential_id) == RevokeResult.SUCCESS
        assert (
            pg_repository.revoke_credential("issuer", credential_id)
            == RevokeResult.ALREADY_REVOKED
        )
        assert pg_repository.get_credential(credential_id).is_valid is False

    def test_unknown_id_is_not_issuer(self, pg_repository: PostgresRegistryRepository) -> None:
        """Unknown id gets NOT_ISSUER."""
        assert pg_repository.revoke_credential("issuer", 404) == RevokeResult.NOT_ISSUER


class TestRegistryOverPostgres:
    """Domain service scenarios backed by PostgreSQL."""

    def test_lifecycle_scenario(self, pg_repository: PostgresRegistryRepository) -> None:
        """Authorize, issue, verify, revoke, verify."""
        registry = CredentialRegistry(
            repository=pg_repository,
            event_sink=InMemoryEventOutbox(),
            clock=FixedClock(start=1000),
            admin_principal="admin",
        )
        registry.authorize_issuer("admin", "issuer", "Acme U")
        assert registry.issue_credential("issuer", "holder", "Rust", "", 0) == 1
        assert registry.verify_credential(1) == Verification(True, "holder", "issuer", "Rust", 1000)

        with pytest.raises(Unauthorized):
            registry.issue_credential("stranger", "holder", "Rust", "", 0)
        assert registry.total_credentials() == 1

        registry.revoke_credential("issuer", 1)
        with pytest.raises(AlreadyRevoked):
            registry.revoke_credential("issuer", 1)
        assert registry.verify_credential(1) == Verification(False, "holder", "issuer", "Rust", 1000)
        assert registry.get_holder_credentials("holder") == [1]


class TestMigrations:
    """Tests for run_migrations."""

    def test_migrations_are_idempotent(self, pool: ConnectionPool) -> None:
        """Running migrations twice does not fail or reset the counter row."""
        run_migrations(pool)

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM registry_state")
            assert cursor.fetchone()[0] == 1
