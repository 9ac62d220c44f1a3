"""Tenant service client for channel type lookups.

Channel types only enrich the partner invitation email, so every failure is
surfaced as ``DownstreamServiceError`` and callers fall back to the values
in the invitation request.
"""

import httpx
import logfire

from access.adapter.error import DownstreamServiceError
from access.config import TenantServiceSettings
from access.domain.model.directory import ChannelType
from access.domain.repository import ChannelTypeClient


class RealChannelTypeClient(ChannelTypeClient):
    """Channel type client backed by the tenant service's REST API."""

    def __init__(
        self,
        settings: TenantServiceSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize tenant service client.

        Args:
            settings: Tenant service connection settings
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.settings = settings
        self.transport = transport
        self.base_url = settings.base_url.rstrip("/")

    async def get_channel_type(self, channel_type_id: int) -> ChannelType:
        headers = {"Accept": "application/json"}
        if self.settings.api_token:
            headers["Authorization"] = f"Bearer {self.settings.api_token}"

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.get(
                    f"{self.base_url}/api/channel-types/{channel_type_id}",
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logfire.warn(
                "Channel type lookup HTTP error",
                channel_type_id=channel_type_id,
                error=str(e),
            )
            raise DownstreamServiceError(f"HTTP error fetching channel type: {e}") from e

        if response.status_code != 200:
            logfire.warn(
                "Channel type lookup failed",
                channel_type_id=channel_type_id,
                status_code=response.status_code,
            )
            raise DownstreamServiceError(
                f"Channel type lookup failed: {response.status_code}"
            )

        try:
            result = response.json()
            return ChannelType(
                id=result.get("id", channel_type_id),
                name=result.get("name"),
                commission_rate=result.get("commissionRate"),
            )
        except (ValueError, AttributeError) as e:
            raise DownstreamServiceError(f"Unreadable channel type response: {e}") from e


class MockChannelTypeClient(ChannelTypeClient):
    """Mock channel type client for testing.

    Serves the channel types it was seeded with and fails like an
    unreachable service for any other id.
    """

    def __init__(self, channel_types: list[ChannelType] | None = None) -> None:
        self.channel_types = {item.id: item for item in channel_types or []}
        self.requested_ids: list[int] = []

    async def get_channel_type(self, channel_type_id: int) -> ChannelType:
        self.requested_ids.append(channel_type_id)
        channel_type = self.channel_types.get(channel_type_id)
        if channel_type is None:
            raise DownstreamServiceError(
                f"Channel type lookup failed: {channel_type_id}"
            )
        return channel_type
