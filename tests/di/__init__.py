"""Mock providers for testing."""

from .container import build_test_container
from .keycloak import MockKeycloakProvider
from .tenant import MockTenantProvider

__all__ = [
    "MockKeycloakProvider",
    "MockTenantProvider",
    "build_test_container",
]
