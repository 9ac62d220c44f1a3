"""Tenant service adapter."""

from .client import MockChannelTypeClient, RealChannelTypeClient

__all__ = ["RealChannelTypeClient", "MockChannelTypeClient"]
