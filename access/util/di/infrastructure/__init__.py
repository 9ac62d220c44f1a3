"""Infrastructure providers."""

# Import bases
from .keycloak import KeycloakProvider
from .provisioning import ProvisioningAggregatorProvider
from .tenant import TenantProvider

# Import implementations (needed for __subclasses__())
from .keycloak import ProdKeycloakProvider  # noqa: F401
from .tenant import ProdTenantProvider  # noqa: F401

__all__ = [
    "KeycloakProvider",
    "ProdKeycloakProvider",
    "ProdTenantProvider",
    "ProvisioningAggregatorProvider",
    "TenantProvider",
]
