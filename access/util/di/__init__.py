"""Dependency injection module."""

from typing import Type

from access.util.di.application import ProdApplicationProvider
from access.util.di.base import Component, ProviderBase
from access.util.di.core import ProdConfigProvider
from access.util.di.domain import ProdDomainProvider
from access.util.di.infrastructure import (
    KeycloakProvider,
    ProdKeycloakProvider,
    ProdTenantProvider,
    ProvisioningAggregatorProvider,
    TenantProvider,
)

# Single list - all providers treated uniformly
PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Infrastructure components (mockable)
    KeycloakProvider,
    TenantProvider,
    # Strategy registry (combines all provisioning strategies)
    ProvisioningAggregatorProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Get appropriate provider class.

    Concrete providers have no subclasses and are returned as-is. Mockable
    components are resolved to the subclass whose ``__is_mock__`` matches.

    Args:
        base: Provider base class
        use_mock: Whether to use mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        ValueError: If requested implementation not found
    """
    if not base.is_mockable():
        return base

    impl = next(
        (c for c in base.__subclasses__() if getattr(c, "__is_mock__", False) == use_mock),
        None,
    )

    if not impl:
        kind = "mock" if use_mock else "production"
        component_name = getattr(base, "__mock_component__", base.__name__)
        raise ValueError(f"No {kind} implementation for {component_name}")

    return impl


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    # Infrastructure base classes
    "KeycloakProvider",
    "ProvisioningAggregatorProvider",
    "TenantProvider",
    # Infrastructure implementations
    "ProdKeycloakProvider",
    "ProdTenantProvider",
]
