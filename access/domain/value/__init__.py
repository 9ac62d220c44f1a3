"""Domain value objects for access invitations."""

from access.domain.value.identifiers import (
    GroupId,
    InviteId,
    OrganizationId,
    RoleId,
    UserId,
    new_invite_id,
)
from access.domain.value.types import (
    ChannelTypeRef,
    GroupRef,
    InviteStatus,
    InviteType,
    RoleRef,
)

__all__ = [
    # Identifiers
    "InviteId",
    "UserId",
    "OrganizationId",
    "GroupId",
    "RoleId",
    "new_invite_id",
    # Types
    "InviteType",
    "InviteStatus",
    "GroupRef",
    "RoleRef",
    "ChannelTypeRef",
]
