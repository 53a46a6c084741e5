"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition tests against
both repository adapters.
"""

import pytest

from credential_registry.adapters.clock import FixedClock
from credential_registry.adapters.events.outbox import InMemoryEventOutbox
from credential_registry.adapters.repository.memory import InMemoryRegistryRepository
from credential_registry.domain.ports import RegistryRepository
from credential_registry.domain.registry import CredentialRegistry

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture(params=["memory", "postgres"])
def backend(request: pytest.FixtureRequest) -> RegistryRepository:
    """Each adversarial test runs against both adapters."""
    if request.param == "memory":
        return InMemoryRegistryRepository()
    return request.getfixturevalue("pg_repository")


@pytest.fixture
def race_registry(backend: RegistryRepository) -> CredentialRegistry:
    """Registry over the parametrized backend with "admin" as admin."""
    return CredentialRegistry(
        repository=backend,
        event_sink=InMemoryEventOutbox(),
        clock=FixedClock(start=1_700_000_000),
        admin_principal="admin",
    )
