"""Keycloak identity directory adapter."""

from .client import KeycloakDirectory
from .inmemory import InMemoryIdentityDirectory

__all__ = ["KeycloakDirectory", "InMemoryIdentityDirectory"]
