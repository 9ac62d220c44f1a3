"""Identity directory entities.

Mirrors the parts of Keycloak's admin representations this service reads and
writes. Field aliases follow Keycloak's camelCase JSON.
"""

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from access.domain.model.common import DomainModel
from access.domain.value import GroupId, OrganizationId, RoleId, UserId

Attributes = dict[str, list[str]]


class DirectoryModel(DomainModel):
    """Base for Keycloak representations."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_representation(self) -> dict:
        """Serialize to Keycloak JSON."""
        return self.model_dump(by_alias=True, exclude_none=True)


class DirectoryUser(DirectoryModel):
    """A directory identity record (Keycloak ``UserRepresentation``).

    The ``attributes`` bag is the only place invitation state lives.
    """

    id: UserId | None = None
    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    enabled: bool = True
    email_verified: bool = False
    attributes: Attributes = Field(default_factory=dict)


class DirectoryGroup(DirectoryModel):
    """A directory group (Keycloak ``GroupRepresentation``)."""

    id: GroupId
    name: str
    path: str | None = None
    sub_groups: list["DirectoryGroup"] = Field(default_factory=list)


class DirectoryRole(DirectoryModel):
    """A realm role (Keycloak ``RoleRepresentation``)."""

    id: RoleId
    name: str
    description: str | None = None


class Organization(DirectoryModel):
    """A tenant (Keycloak ``OrganizationRepresentation``)."""

    id: OrganizationId
    name: str | None = None
    display_name: str | None = None
    alias: str | None = None
    enabled: bool = True


class ChannelType(DomainModel):
    """A channel type from the tenant service."""

    id: int
    name: str | None = None
    commission_rate: float | None = None


def flatten_groups(groups: list[DirectoryGroup]) -> list[DirectoryGroup]:
    """Flatten a group tree depth-first, parents before children."""
    flat: list[DirectoryGroup] = []
    for group in groups:
        flat.append(group)
        flat.extend(flatten_groups(group.sub_groups))
    return flat
