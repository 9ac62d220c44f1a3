"""Unit tests for the provisioning strategies."""

import pytest

from access.adapter.keycloak import InMemoryIdentityDirectory
from access.domain.error import ProvisioningError
from access.domain.model import DirectoryUser, PartnerMetadata, StaffMetadata
from access.domain.service import (
    PartnerProvisioningStrategy,
    ProvisioningContext,
    StaffProvisioningStrategy,
)
from access.domain.value import (
    ChannelTypeRef,
    GroupId,
    GroupRef,
    OrganizationId,
    RoleRef,
)
from tests.conftest import seed_directory
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


async def _user(directory: InMemoryIdentityDirectory) -> DirectoryUser:
    return directory.add_existing_user(
        DirectoryUser(username="someone@example.com", email="someone@example.com")
    )


def _context(user: DirectoryUser, metadata) -> ProvisioningContext:
    return ProvisioningContext(
        user=user, metadata=metadata, organization_id=OrganizationId("org-1")
    )


class TestStaffProvisioning:
    """Tests for StaffProvisioningStrategy."""

    @pytest.mark.asyncio
    async def test_adds_groups_and_roles(self, unit_env):
        """Staff get every requested group and role."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        seed_directory(directory)
        strategy = await unit_env.get(StaffProvisioningStrategy)
        user = await _user(directory)
        metadata = StaffMetadata(
            groups=[GroupRef(id="g1"), GroupRef(id="g2")],
            roles=[RoleRef(id="r-viewer"), RoleRef(id="editor")],
        )

        # Act
        result = await strategy.execute(_context(user, metadata))

        # Assert
        assert directory.group_ids_of(user.id) == ["g1", "g2"]
        assert [role.name for role in directory.roles_of(user.id)] == ["viewer", "editor"]
        assert result.applied_groups == [
            GroupRef(id="g1", name="Engineering"),
            GroupRef(id="g2", name="Sales"),
        ]
        assert result.applied_roles == [
            RoleRef(id="r-viewer", name="viewer"),
            RoleRef(id="r-editor", name="editor"),
        ]

    @pytest.mark.asyncio
    async def test_drops_unknown_groups_and_roles(self, unit_env):
        """Ids that don't resolve are skipped, not fatal."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        seed_directory(directory)
        strategy = await unit_env.get(StaffProvisioningStrategy)
        user = await _user(directory)
        metadata = StaffMetadata(
            groups=[GroupRef(id="g-missing"), GroupRef(id="g1")],
            roles=[RoleRef(id="r-missing")],
        )

        # Act
        result = await strategy.execute(_context(user, metadata))

        # Assert
        assert directory.group_ids_of(user.id) == ["g1"]
        assert directory.roles_of(user.id) == []
        assert result.applied_groups == [GroupRef(id="g1", name="Engineering")]
        assert result.applied_roles == []

    @pytest.mark.asyncio
    async def test_repeated_group_added_once(self, unit_env):
        """A group listed twice is added once."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        seed_directory(directory)
        strategy = await unit_env.get(StaffProvisioningStrategy)
        user = await _user(directory)
        metadata = StaffMetadata(groups=[GroupRef(id="g1"), GroupRef(id="g1")])

        # Act
        await strategy.execute(_context(user, metadata))

        # Assert
        assert directory.group_additions == [(user.id, GroupId("g1"))]

    @pytest.mark.asyncio
    async def test_rejects_partner_metadata(self, unit_env):
        """Running the staff strategy on partner metadata is a programming error."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        strategy = await unit_env.get(StaffProvisioningStrategy)
        user = await _user(directory)
        metadata = PartnerMetadata(channel_type=ChannelTypeRef(id=7))

        # Act & Assert
        with pytest.raises(TypeError):
            await strategy.execute(_context(user, metadata))


class TestPartnerProvisioning:
    """Tests for PartnerProvisioningStrategy."""

    @pytest.mark.asyncio
    async def test_adds_partner_group(self, unit_env):
        """Partners always land in the business partners group."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        seed_directory(directory)
        strategy = await unit_env.get(PartnerProvisioningStrategy)
        user = await _user(directory)
        metadata = PartnerMetadata(channel_type=ChannelTypeRef(id=7))

        # Act
        result = await strategy.execute(_context(user, metadata))

        # Assert
        assert directory.group_ids_of(user.id) == ["g-partners"]
        assert result.applied_groups == [
            GroupRef(id="g-partners", name="Business Partners")
        ]
        assert result.applied_roles == []

    @pytest.mark.asyncio
    async def test_partner_never_ends_in_admin_group(self, unit_env):
        """Requested admin groups are dropped and existing ones removed."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        seed_directory(directory)
        strategy = await unit_env.get(PartnerProvisioningStrategy)
        user = await _user(directory)
        await directory.add_user_to_group(user.id, GroupId("g-admins"))
        metadata = PartnerMetadata(
            channel_type=ChannelTypeRef(id=7),
            groups=[GroupRef(id="g-admins"), GroupRef(id="g2")],
        )

        # Act
        result = await strategy.execute(_context(user, metadata))

        # Assert
        assert directory.group_ids_of(user.id) == ["g-partners", "g2"]
        assert [group.id for group in result.applied_groups] == ["g-partners", "g2"]

    @pytest.mark.asyncio
    async def test_partner_group_name_is_case_insensitive(self, unit_env):
        """Any configured spelling of the partner group matches, in any case."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        directory.add_group("BUSINESS-PARTNERS", group_id="g-bp")
        strategy = await unit_env.get(PartnerProvisioningStrategy)
        user = await _user(directory)
        metadata = PartnerMetadata(channel_type=ChannelTypeRef(id=7))

        # Act
        await strategy.execute(_context(user, metadata))

        # Assert
        assert directory.group_ids_of(user.id) == ["g-bp"]

    @pytest.mark.asyncio
    async def test_missing_partner_group_fails_before_any_write(self, unit_env):
        """Without a partner group nothing is applied and the strategy fails."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        directory.add_group("Sales", group_id="g2")
        strategy = await unit_env.get(PartnerProvisioningStrategy)
        user = await _user(directory)
        metadata = PartnerMetadata(
            channel_type=ChannelTypeRef(id=7), groups=[GroupRef(id="g2")]
        )

        # Act & Assert
        with pytest.raises(ProvisioningError):
            await strategy.execute(_context(user, metadata))
        assert directory.group_ids_of(user.id) == []

    @pytest.mark.asyncio
    async def test_rejects_staff_metadata(self, unit_env):
        """Running the partner strategy on staff metadata is a programming error."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        strategy = await unit_env.get(PartnerProvisioningStrategy)
        user = await _user(directory)
        metadata = StaffMetadata(groups=[GroupRef(id="g1")])

        # Act & Assert
        with pytest.raises(TypeError):
            await strategy.execute(_context(user, metadata))
