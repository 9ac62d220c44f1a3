"""Domain value objects for access invitations.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from pydantic import field_validator

from access.domain.value.common import ValueObject


class InviteType(str, Enum):
    """Kind of invitee. Selects the metadata schema and provisioning strategy."""

    STAFF = "staff"
    PARTNER = "partner"


class InviteStatus(str, Enum):
    """Status of an invitation.

    Only PENDING and ACCEPTED are ever written. EXPIRED is detected lazily at
    redemption time and CANCELLED has no transition into it.
    """

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class GroupRef(ValueObject):
    """Reference to a directory group."""

    id: str
    name: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate id is not blank."""
        if not v.strip():
            raise ValueError("Group id must not be empty")
        return v


class RoleRef(ValueObject):
    """Reference to a realm role."""

    id: str
    name: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate id is not blank."""
        if not v.strip():
            raise ValueError("Role id must not be empty")
        return v


class ChannelTypeRef(ValueObject):
    """Reference to a channel type owned by the tenant service."""

    id: int
    name: str | None = None
