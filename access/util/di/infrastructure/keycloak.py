"""Keycloak infrastructure providers."""

from dishka import Scope, provide

from access.adapter.keycloak import KeycloakDirectory
from access.config import KeycloakSettings
from access.domain.repository import IdentityDirectory
from access.util.di.base import ProviderBase


class KeycloakProvider(ProviderBase):
    """Keycloak component base."""

    __mock_component__ = "keycloak"


class ProdKeycloakProvider(KeycloakProvider):
    """Production Keycloak provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_directory(self, settings: KeycloakSettings) -> IdentityDirectory:
        """Provide the Keycloak admin API client.

        Raises:
            ValueError: If Keycloak admin credentials are not configured
        """
        if not settings.base_url:
            raise ValueError("Keycloak base URL must be configured")
        if not settings.admin_username or not settings.admin_password:
            raise ValueError("Keycloak admin credentials must be configured")

        return KeycloakDirectory(settings=settings)
