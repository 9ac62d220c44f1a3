"""Remote collaborator interfaces.

Interfaces are defined in the domain layer (dependency inversion).
Implementations live in the adapter layer.
"""

from access.domain.repository.channel_type import ChannelTypeClient
from access.domain.repository.directory import IdentityDirectory

__all__ = [
    "ChannelTypeClient",
    "IdentityDirectory",
]
