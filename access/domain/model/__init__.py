"""Domain model entities for access invitations."""

from access.domain.model.directory import (
    ChannelType,
    DirectoryGroup,
    DirectoryRole,
    DirectoryUser,
    Organization,
)
from access.domain.model.invitation import (
    AcceptanceResult,
    InvitationFields,
    InvitationRecord,
    InviteCreateInput,
    InviteMetadata,
    PartnerMetadata,
    StaffMetadata,
)

__all__ = [
    "AcceptanceResult",
    "ChannelType",
    "DirectoryGroup",
    "DirectoryRole",
    "DirectoryUser",
    "InvitationFields",
    "InvitationRecord",
    "InviteCreateInput",
    "InviteMetadata",
    "Organization",
    "PartnerMetadata",
    "StaffMetadata",
]
