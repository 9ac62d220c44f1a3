"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from access.config import KeycloakSettings, Settings, TenantServiceSettings
from access.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_keycloak_settings(self, settings: Settings) -> KeycloakSettings:
        """Provide Keycloak admin settings."""
        return settings.keycloak

    @provide(scope=Scope.APP)
    def provide_tenant_service_settings(
        self, settings: Settings
    ) -> TenantServiceSettings:
        """Provide tenant service settings."""
        return settings.tenant_service
