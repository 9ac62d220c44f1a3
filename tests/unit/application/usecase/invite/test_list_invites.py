"""Unit tests for ListInvitesUseCase."""

from datetime import datetime, timedelta, timezone

import pytest

from access.adapter.keycloak import InMemoryIdentityDirectory
from access.application.usecase.invite import ListInvitesRequest, ListInvitesUseCase
from access.domain.model import (
    DirectoryUser,
    InvitationFields,
    PartnerMetadata,
    StaffMetadata,
)
from access.domain.service import InviteAttributeCodec
from access.domain.value import (
    ChannelTypeRef,
    GroupRef,
    InviteStatus,
    InviteType,
    OrganizationId,
    new_invite_id,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

ORG_ID = OrganizationId("org-1")
BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


async def _seed(
    unit_env,
    first_name: str,
    last_name: str,
    created_offset_hours: int,
    invite_type: InviteType = InviteType.STAFF,
    status: InviteStatus = InviteStatus.PENDING,
    organization_id: OrganizationId = ORG_ID,
) -> DirectoryUser:
    directory = await unit_env.get(InMemoryIdentityDirectory)
    codec = await unit_env.get(InviteAttributeCodec)
    email = f"{first_name.lower()}.{last_name.lower()}@example.com"
    created_at = BASE_TIME + timedelta(hours=created_offset_hours)

    metadata = (
        StaffMetadata(groups=[GroupRef(id="g1")])
        if invite_type == InviteType.STAFF
        else PartnerMetadata(channel_type=ChannelTypeRef(id=7))
    )
    fields = InvitationFields(
        invite_id=new_invite_id(),
        organization_id=organization_id,
        type=invite_type,
        status=status,
        metadata=metadata,
        secret_hash="e" * 64 if status == InviteStatus.PENDING else None,
        created_at=created_at,
        expires_at=created_at + timedelta(hours=24),
        joined_at=created_at + timedelta(hours=1)
        if status == InviteStatus.ACCEPTED
        else None,
    )
    return directory.add_existing_user(
        DirectoryUser(
            username=email,
            email=email,
            first_name=first_name,
            last_name=last_name,
            attributes=codec.encode({}, fields),
        )
    )


class TestListInvites:
    """Tests for filtering, ordering and paging."""

    @pytest.mark.asyncio
    async def test_filters_by_organization_and_type(self, unit_env):
        """Only invites of the requested organization and type are listed."""
        # Arrange
        await _seed(unit_env, "Ada", "Lovelace", 1)
        await _seed(unit_env, "Sam", "Partner", 2, invite_type=InviteType.PARTNER)
        await _seed(unit_env, "Other", "Org", 3, organization_id=OrganizationId("org-2"))
        directory = await unit_env.get(InMemoryIdentityDirectory)
        directory.add_existing_user(
            DirectoryUser(username="plain@example.com", email="plain@example.com")
        )
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        response = await use_case.execute(
            ListInvitesRequest(type=InviteType.STAFF, organization_id=ORG_ID)
        )

        # Assert
        assert [record.first_name for record in response.invitations] == ["Ada"]
        assert response.total_count == 1

    @pytest.mark.asyncio
    async def test_newest_first(self, unit_env):
        """Invites are ordered by creation time, newest first."""
        # Arrange
        await _seed(unit_env, "Middle", "One", 2)
        await _seed(unit_env, "Oldest", "One", 1)
        await _seed(unit_env, "Newest", "One", 3)
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        response = await use_case.execute(
            ListInvitesRequest(type=InviteType.STAFF, organization_id=ORG_ID)
        )

        # Assert
        assert [record.first_name for record in response.invitations] == [
            "Newest",
            "Middle",
            "Oldest",
        ]

    @pytest.mark.asyncio
    async def test_timestamp_without_offset_still_sorts(self, unit_env):
        """An invite whose creation time was edited without an offset still lists."""
        # Arrange
        directory = await unit_env.get(InMemoryIdentityDirectory)
        await _seed(unit_env, "Aware", "One", 1)
        edited = await _seed(unit_env, "Edited", "One", 0)
        attributes = dict(edited.attributes)
        attributes["access_invite_created_at"] = ["2025-01-01T05:00:00"]
        await directory.update_user(edited.model_copy(update={"attributes": attributes}))
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        response = await use_case.execute(
            ListInvitesRequest(type=InviteType.STAFF, organization_id=ORG_ID)
        )

        # Assert
        assert [record.first_name for record in response.invitations] == [
            "Edited",
            "Aware",
        ]

    @pytest.mark.asyncio
    async def test_pagination(self, unit_env):
        """Pages slice the sorted list and report totals."""
        # Arrange
        for hour in range(5):
            await _seed(unit_env, f"User{hour}", "Paged", hour)
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        second_page = await use_case.execute(
            ListInvitesRequest(
                type=InviteType.STAFF, organization_id=ORG_ID, page=2, size=2
            )
        )
        beyond = await use_case.execute(
            ListInvitesRequest(
                type=InviteType.STAFF, organization_id=ORG_ID, page=4, size=2
            )
        )

        # Assert
        assert [record.first_name for record in second_page.invitations] == [
            "User2",
            "User1",
        ]
        assert second_page.total_count == 5
        assert second_page.total_pages == 3
        assert second_page.current_page == 2
        assert beyond.invitations == []
        assert beyond.total_count == 5

    @pytest.mark.asyncio
    async def test_empty_result(self, unit_env):
        """No invites means zero pages."""
        # Arrange
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        response = await use_case.execute(
            ListInvitesRequest(type=InviteType.PARTNER, organization_id=ORG_ID)
        )

        # Assert
        assert response.invitations == []
        assert response.total_count == 0
        assert response.total_pages == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "term,expected",
        [
            ("ada", ["Ada"]),
            ("LOVELACE", ["Ada"]),
            ("ada love", ["Ada"]),
            ("grace.hopper@", ["Grace"]),
            ("example.com", ["Grace", "Ada"]),
            ("nobody", []),
        ],
    )
    async def test_search(self, unit_env, term, expected):
        """Search matches full name or email, case-insensitively."""
        # Arrange
        await _seed(unit_env, "Ada", "Lovelace", 1)
        await _seed(unit_env, "Grace", "Hopper", 2)
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        response = await use_case.execute(
            ListInvitesRequest(
                type=InviteType.STAFF, organization_id=ORG_ID, search=term
            )
        )

        # Assert
        assert [record.first_name for record in response.invitations] == expected

    @pytest.mark.asyncio
    async def test_status_filter(self, unit_env):
        """Statuses narrow the listing; no statuses means all of them."""
        # Arrange
        await _seed(unit_env, "Pending", "One", 1)
        await _seed(unit_env, "Accepted", "One", 2, status=InviteStatus.ACCEPTED)
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        accepted = await use_case.execute(
            ListInvitesRequest(
                type=InviteType.STAFF,
                organization_id=ORG_ID,
                statuses=[InviteStatus.ACCEPTED],
            )
        )
        everything = await use_case.execute(
            ListInvitesRequest(type=InviteType.STAFF, organization_id=ORG_ID)
        )

        # Assert
        assert [record.first_name for record in accepted.invitations] == ["Accepted"]
        assert everything.total_count == 2

    @pytest.mark.asyncio
    async def test_records_are_sanitized(self, unit_env):
        """Listed records never carry the secret hash."""
        # Arrange
        await _seed(unit_env, "Ada", "Lovelace", 1)
        use_case = await unit_env.get(ListInvitesUseCase)

        # Act
        response = await use_case.execute(
            ListInvitesRequest(type=InviteType.STAFF, organization_id=ORG_ID)
        )

        # Assert
        assert all(record.secret_hash is None for record in response.invitations)
        assert "secret_hash" not in response.model_dump_json()
