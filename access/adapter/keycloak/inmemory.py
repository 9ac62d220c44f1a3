"""In-memory identity directory for testing and local development."""

from uuid import uuid4

from access.adapter.error import DirectoryError
from access.domain.model.directory import (
    DirectoryGroup,
    DirectoryRole,
    DirectoryUser,
    Organization,
    flatten_groups,
)
from access.domain.repository import IdentityDirectory
from access.domain.value import GroupId, OrganizationId, RoleId, UserId


class InMemoryIdentityDirectory(IdentityDirectory):
    """In-memory implementation of IdentityDirectory for testing.

    Mirrors the Keycloak behaviors the invitation flows depend on: exact
    (case-insensitive) email lookup, 409 for duplicate organization members
    and 404 for unknown entities.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, DirectoryUser] = {}
        self._organizations: dict[OrganizationId, Organization] = {}
        self._members: dict[OrganizationId, set[UserId]] = {}
        self._groups: list[DirectoryGroup] = []
        self._user_groups: dict[UserId, list[GroupId]] = {}
        self._roles: list[DirectoryRole] = []
        self._user_roles: dict[UserId, list[DirectoryRole]] = {}

        # Keycloak invitation emails that would have been sent
        self.sent_invitations: list[tuple[OrganizationId, UserId]] = []
        # Every group addition, in order (repeats included)
        self.group_additions: list[tuple[UserId, GroupId]] = []

    # Seeding helpers

    def add_organization(
        self, name: str, display_name: str | None = None
    ) -> Organization:
        organization = Organization(
            id=OrganizationId(str(uuid4())), name=name, display_name=display_name
        )
        self._organizations[organization.id] = organization
        self._members[organization.id] = set()
        return organization

    def add_group(self, name: str, group_id: str | None = None) -> DirectoryGroup:
        group = DirectoryGroup(
            id=GroupId(group_id or str(uuid4())), name=name, path=f"/{name}"
        )
        self._groups.append(group)
        return group

    def add_role(self, name: str, role_id: str | None = None) -> DirectoryRole:
        role = DirectoryRole(id=RoleId(role_id or str(uuid4())), name=name)
        self._roles.append(role)
        return role

    def add_existing_user(self, user: DirectoryUser) -> DirectoryUser:
        stored = user.model_copy(update={"id": user.id or UserId(str(uuid4()))})
        self._users[stored.id] = stored
        return stored

    def group_ids_of(self, user_id: UserId) -> list[GroupId]:
        return list(self._user_groups.get(user_id, []))

    def roles_of(self, user_id: UserId) -> list[DirectoryRole]:
        return list(self._user_roles.get(user_id, []))

    def members_of(self, organization_id: OrganizationId) -> set[UserId]:
        return set(self._members.get(organization_id, set()))

    def _require_user(self, user_id: UserId) -> DirectoryUser:
        user = self._users.get(user_id)
        if user is None:
            raise DirectoryError(f"User not found: {user_id}", status_code=404)
        return user

    def _find_group(self, group_id: GroupId) -> DirectoryGroup | None:
        for group in flatten_groups(self._groups):
            if group.id == group_id:
                return group
        return None

    # IdentityDirectory

    async def find_users_by_email(self, email: str) -> list[DirectoryUser]:
        wanted = email.lower()
        return [
            user
            for user in self._users.values()
            if user.email is not None and user.email.lower() == wanted
        ]

    async def search_users_by_attribute(
        self, name: str, value: str, max_results: int = 1000
    ) -> list[DirectoryUser]:
        matches = [
            user for user in self._users.values() if value in user.attributes.get(name, [])
        ]
        return matches[:max_results]

    async def get_user(self, user_id: UserId) -> DirectoryUser | None:
        return self._users.get(user_id)

    async def create_user(self, user: DirectoryUser) -> UserId:
        for existing in self._users.values():
            if user.username and existing.username == user.username:
                raise DirectoryError("User exists with same username", status_code=409)

        user_id = UserId(str(uuid4()))
        self._users[user_id] = user.model_copy(update={"id": user_id})
        return user_id

    async def update_user(self, user: DirectoryUser) -> None:
        if user.id is None:
            raise ValueError("Cannot update a user without an id")
        self._require_user(user.id)
        self._users[user.id] = user

    async def get_organization(
        self, organization_id: OrganizationId
    ) -> Organization | None:
        return self._organizations.get(organization_id)

    async def add_organization_member(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> None:
        if organization_id not in self._organizations:
            raise DirectoryError(
                f"Organization not found: {organization_id}", status_code=404
            )
        self._require_user(user_id)

        members = self._members[organization_id]
        if user_id in members:
            raise DirectoryError("User is already a member", status_code=409)
        members.add(user_id)

    async def invite_existing_user(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> None:
        if organization_id not in self._organizations:
            raise DirectoryError(
                f"Organization not found: {organization_id}", status_code=404
            )
        self._require_user(user_id)
        self.sent_invitations.append((organization_id, user_id))

    async def list_groups(self) -> list[DirectoryGroup]:
        return flatten_groups(self._groups)

    async def list_user_groups(self, user_id: UserId) -> list[DirectoryGroup]:
        self._require_user(user_id)
        groups = []
        for group_id in self._user_groups.get(user_id, []):
            group = self._find_group(group_id)
            if group is not None:
                groups.append(group)
        return groups

    async def add_user_to_group(self, user_id: UserId, group_id: GroupId) -> None:
        self._require_user(user_id)
        if self._find_group(group_id) is None:
            raise DirectoryError(f"Group not found: {group_id}", status_code=404)

        self.group_additions.append((user_id, group_id))
        memberships = self._user_groups.setdefault(user_id, [])
        if group_id not in memberships:
            memberships.append(group_id)

    async def remove_user_from_group(self, user_id: UserId, group_id: GroupId) -> None:
        self._require_user(user_id)
        memberships = self._user_groups.get(user_id, [])
        if group_id in memberships:
            memberships.remove(group_id)

    async def list_realm_roles(self) -> list[DirectoryRole]:
        return list(self._roles)

    async def assign_realm_roles(
        self, user_id: UserId, roles: list[DirectoryRole]
    ) -> None:
        self._require_user(user_id)
        assigned = self._user_roles.setdefault(user_id, [])
        for role in roles:
            if role not in assigned:
                assigned.append(role)
