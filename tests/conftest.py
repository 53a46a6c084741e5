"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An isolated in-memory registry per test
- A manually advanced clock
- An event outbox capturing published notifications
- A PostgreSQL pool and repository (skipped without a database)
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from credential_registry.adapters.clock import FixedClock
from credential_registry.adapters.events.outbox import InMemoryEventOutbox
from credential_registry.adapters.repository.memory import InMemoryRegistryRepository
from credential_registry.adapters.repository.postgres import (
    PostgresRegistryRepository,
    run_migrations,
)
from credential_registry.config.settings import get_settings
from credential_registry.domain.registry import CredentialRegistry

ADMIN = "0xA11CE00000000000000000000000000000000001"
ISSUER = "0x1550E00000000000000000000000000000000002"
OTHER_ISSUER = "0x1550E00000000000000000000000000000000003"
HOLDER = "0xB0B0000000000000000000000000000000000004"
STRANGER = "0xBAD0000000000000000000000000000000000005"

T0 = 1_700_000_000


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at T0 until a test advances it."""
    return FixedClock(start=T0)


@pytest.fixture
def repository() -> InMemoryRegistryRepository:
    """Fresh in-memory registry state for each test."""
    return InMemoryRegistryRepository()


@pytest.fixture
def outbox() -> InMemoryEventOutbox:
    """Outbox capturing notifications published by the registry."""
    return InMemoryEventOutbox()


@pytest.fixture
def registry(
    repository: InMemoryRegistryRepository, outbox: InMemoryEventOutbox, clock: FixedClock
) -> CredentialRegistry:
    """Registry service wired to in-memory adapters with ADMIN as admin."""
    return CredentialRegistry(
        repository=repository,
        event_sink=outbox,
        clock=clock,
        admin_principal=ADMIN,
    )


@pytest.fixture
def authorized_registry(registry: CredentialRegistry) -> CredentialRegistry:
    """Registry where ISSUER and OTHER_ISSUER are already authorized."""
    registry.authorize_issuer(ADMIN, ISSUER, "Acme U")
    registry.authorize_issuer(ADMIN, OTHER_ISSUER, "Globex Institute")
    return registry


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool and apply migrations, or skip without a database."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Reset registry tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM credentials")
        conn.execute("DELETE FROM issuers")
        conn.execute("UPDATE registry_state SET next_id = 0")
        conn.commit()
    yield


@pytest.fixture
def pg_repository(pool: ConnectionPool, clean_database: None) -> PostgresRegistryRepository:
    """PostgreSQL repository over a clean database."""
    return PostgresRegistryRepository(pool)
