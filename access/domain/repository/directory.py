"""Identity directory interface."""

from abc import ABC, abstractmethod

from access.domain.model.directory import (
    DirectoryGroup,
    DirectoryRole,
    DirectoryUser,
    Organization,
)
from access.domain.value import GroupId, OrganizationId, UserId


class IdentityDirectory(ABC):
    """Contract for the remote identity directory (Keycloak admin API).

    The directory is the only source of truth for users, tenants, groups and
    invitation state. Implementations raise ``DirectoryError`` for failed
    calls; lookups of a single missing entity return None instead.
    """

    @abstractmethod
    async def find_users_by_email(self, email: str) -> list[DirectoryUser]:
        """Find users whose email matches exactly.

        Args:
            email: Email address

        Returns:
            Matching users (usually zero or one)
        """
        pass

    @abstractmethod
    async def search_users_by_attribute(
        self, name: str, value: str, max_results: int = 1000
    ) -> list[DirectoryUser]:
        """Find users carrying ``value`` under attribute ``name``.

        Args:
            name: Attribute key
            value: Attribute value
            max_results: Upper bound on returned users

        Returns:
            Matching users
        """
        pass

    @abstractmethod
    async def get_user(self, user_id: UserId) -> DirectoryUser | None:
        """Get a user by ID.

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def create_user(self, user: DirectoryUser) -> UserId:
        """Create a user.

        Returns:
            ID assigned by the directory
        """
        pass

    @abstractmethod
    async def update_user(self, user: DirectoryUser) -> None:
        """Replace a user's representation, attributes included."""
        pass

    @abstractmethod
    async def get_organization(
        self, organization_id: OrganizationId
    ) -> Organization | None:
        """Get an organization by ID.

        Returns:
            The organization if found, None otherwise
        """
        pass

    @abstractmethod
    async def add_organization_member(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> None:
        """Add a user to an organization.

        Raises:
            DirectoryError: With status 409 if the user is already a member
        """
        pass

    @abstractmethod
    async def invite_existing_user(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> None:
        """Trigger the directory's own invitation email for an existing user."""
        pass

    @abstractmethod
    async def list_groups(self) -> list[DirectoryGroup]:
        """List the realm's group catalog, sub-groups flattened in."""
        pass

    @abstractmethod
    async def list_user_groups(self, user_id: UserId) -> list[DirectoryGroup]:
        """List groups a user belongs to."""
        pass

    @abstractmethod
    async def add_user_to_group(self, user_id: UserId, group_id: GroupId) -> None:
        """Add a user to a group (idempotent)."""
        pass

    @abstractmethod
    async def remove_user_from_group(self, user_id: UserId, group_id: GroupId) -> None:
        """Remove a user from a group."""
        pass

    @abstractmethod
    async def list_realm_roles(self) -> list[DirectoryRole]:
        """List realm roles."""
        pass

    @abstractmethod
    async def assign_realm_roles(
        self, user_id: UserId, roles: list[DirectoryRole]
    ) -> None:
        """Bulk-assign realm roles to a user."""
        pass
