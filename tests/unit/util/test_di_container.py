"""Unit tests for DI wiring."""

import pytest

from access.adapter.keycloak import InMemoryIdentityDirectory
from access.adapter.tenant import MockChannelTypeClient
from access.application.service import AccessInviteService
from access.domain.repository import ChannelTypeClient, IdentityDirectory
from access.domain.service import (
    PartnerProvisioningStrategy,
    ProvisioningStrategy,
    StaffProvisioningStrategy,
)
from access.domain.value import InviteType
from access.util.di import (
    KeycloakProvider,
    ProdConfigProvider,
    ProdKeycloakProvider,
    get_provider,
)
from tests.di import MockKeycloakProvider, build_test_container
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestGetProvider:
    """Tests for provider selection."""

    def test_concrete_provider_returned_as_is(self):
        """Providers without subclasses are their own implementation."""
        assert get_provider(ProdConfigProvider) is ProdConfigProvider

    def test_selects_mock_or_production(self):
        """Mockable components resolve to the matching subclass."""
        assert get_provider(KeycloakProvider, use_mock=False) is ProdKeycloakProvider
        assert get_provider(KeycloakProvider, use_mock=True) is MockKeycloakProvider

    def test_unknown_unmock_component(self):
        """Unmocking a component that doesn't exist is an error."""
        with pytest.raises(ValueError):
            build_test_container(unmock={"ldap"})


class TestContainer:
    """Tests for the assembled test container."""

    @pytest.mark.asyncio
    async def test_strategy_registry_covers_every_type(self, unit_env):
        """Each invite type maps to its provisioning strategy."""
        # Act
        strategies = await unit_env.get(dict[InviteType, ProvisioningStrategy])

        # Assert
        assert set(strategies) == set(InviteType)
        assert isinstance(strategies[InviteType.STAFF], StaffProvisioningStrategy)
        assert isinstance(strategies[InviteType.PARTNER], PartnerProvisioningStrategy)

    @pytest.mark.asyncio
    async def test_mocks_are_shared_with_interfaces(self, unit_env):
        """Seeding handles and interfaces resolve to the same instances."""
        # Act
        directory = await unit_env.get(IdentityDirectory)
        inmemory = await unit_env.get(InMemoryIdentityDirectory)
        channel_types = await unit_env.get(ChannelTypeClient)
        mock_channel_types = await unit_env.get(MockChannelTypeClient)

        # Assert
        assert directory is inmemory
        assert channel_types is mock_channel_types

    @pytest.mark.asyncio
    async def test_facade_resolves(self, unit_env):
        """The facade and everything behind it can be built."""
        # Act
        service = await unit_env.get(AccessInviteService)

        # Assert
        assert isinstance(service, AccessInviteService)
