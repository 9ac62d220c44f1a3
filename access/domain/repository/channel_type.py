"""Channel type lookup interface."""

from abc import ABC, abstractmethod

from access.domain.model.directory import ChannelType


class ChannelTypeClient(ABC):
    """Contract for the tenant service's channel type lookup."""

    @abstractmethod
    async def get_channel_type(self, channel_type_id: int) -> ChannelType:
        """Fetch a channel type.

        Args:
            channel_type_id: Channel type ID

        Returns:
            The channel type

        Raises:
            DownstreamServiceError: If the lookup fails for any reason
        """
        pass
