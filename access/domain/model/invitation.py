"""Invitation entities.

An invitation is not stored as its own row. It is reconstructed from the
attribute bag of the directory user it targets, and one user carries at most
one active invitation at a time.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field

from access.domain.model.common import DomainModel
from access.domain.value import (
    ChannelTypeRef,
    GroupRef,
    InviteId,
    InviteStatus,
    InviteType,
    OrganizationId,
    RoleRef,
    UserId,
)


class StaffMetadata(DomainModel):
    """Entitlements requested for a staff member."""

    kind: Literal["staff"] = "staff"
    groups: list[GroupRef] = Field(min_length=1)
    roles: list[RoleRef] | None = None
    note: str | None = Field(default=None, max_length=1000)


class PartnerMetadata(DomainModel):
    """Entitlements requested for an external business partner."""

    kind: Literal["partner"] = "partner"
    channel_type: ChannelTypeRef
    commission_percent: float | None = Field(default=None, ge=0, le=100)
    groups: list[GroupRef] | None = None
    note: str | None = Field(default=None, max_length=1000)


InviteMetadata = Annotated[
    Union[StaffMetadata, PartnerMetadata], Field(discriminator="kind")
]

METADATA_SCHEMAS: dict[InviteType, type[StaffMetadata] | type[PartnerMetadata]] = {
    InviteType.STAFF: StaffMetadata,
    InviteType.PARTNER: PartnerMetadata,
}


class InviteCreateInput(DomainModel):
    """A validated invitation request."""

    type: InviteType
    organization_id: OrganizationId
    email: str
    first_name: str
    last_name: str
    metadata: InviteMetadata


class InvitationFields(DomainModel):
    """The invitation state written into a user's attribute bag."""

    invite_id: InviteId
    organization_id: OrganizationId
    type: InviteType
    status: InviteStatus
    metadata: InviteMetadata
    secret_hash: str | None = None
    created_at: datetime
    expires_at: datetime
    joined_at: datetime | None = None


class InvitationRecord(InvitationFields):
    """An invitation as reconstructed from a directory user.

    Name, email and verification flag are mirrored from the user record.
    ``secret_hash`` never serializes; use ``sanitized()`` before handing a
    record to a caller.
    """

    user_id: UserId
    secret_hash: str | None = Field(default=None, exclude=True, repr=False)
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    email_verified: bool = False

    def sanitized(self) -> "InvitationRecord":
        """Return a copy without the secret hash."""
        return self.model_copy(update={"secret_hash": None})

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class AcceptanceResult(DomainModel):
    """Outcome of a successful redemption."""

    user_id: UserId
    invitation_id: InviteId
    organization_id: OrganizationId
    status: InviteStatus = InviteStatus.ACCEPTED
    email_verified: bool = True
    applied_groups: list[GroupRef] = Field(default_factory=list)
    applied_roles: list[RoleRef] = Field(default_factory=list)
