"""Strongly typed identifiers.

Keycloak hands out opaque string ids, so these wrap ``str`` rather than UUID.
"""

from typing import NewType
from uuid import uuid4

InviteId = NewType("InviteId", str)
UserId = NewType("UserId", str)
OrganizationId = NewType("OrganizationId", str)
GroupId = NewType("GroupId", str)
RoleId = NewType("RoleId", str)

INVITE_ID_PREFIX = "acc_"


def new_invite_id() -> InviteId:
    """Generate a globally unique invite id (never contains a '.')."""
    return InviteId(f"{INVITE_ID_PREFIX}{uuid4().hex}")
