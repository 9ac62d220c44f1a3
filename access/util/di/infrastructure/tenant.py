"""Tenant service infrastructure providers."""

from dishka import Scope, provide

from access.adapter.tenant import RealChannelTypeClient
from access.config import TenantServiceSettings
from access.domain.repository import ChannelTypeClient
from access.util.di.base import ProviderBase


class TenantProvider(ProviderBase):
    """Tenant service component base."""

    __mock_component__ = "tenant"


class ProdTenantProvider(TenantProvider):
    """Production tenant service provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_channel_type_client(
        self, settings: TenantServiceSettings
    ) -> ChannelTypeClient:
        """Provide channel type client."""
        return RealChannelTypeClient(settings=settings)
