"""Access invite service.

Single entry point for callers: create, list and accept invitations.
"""

from collections.abc import Mapping
from typing import Any

from access.application.usecase.invite import (
    AcceptInviteRequest,
    AcceptInviteUseCase,
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)
from access.domain.model import AcceptanceResult
from access.domain.value import InviteStatus, InviteType


class AccessInviteService:
    """Facade over the invitation use cases."""

    def __init__(
        self,
        create_invite_use_case: CreateInviteUseCase,
        list_invites_use_case: ListInvitesUseCase,
        accept_invite_use_case: AcceptInviteUseCase,
    ) -> None:
        self.create_invite_use_case = create_invite_use_case
        self.list_invites_use_case = list_invites_use_case
        self.accept_invite_use_case = accept_invite_use_case

    async def create_invite(
        self,
        payload: Mapping[str, Any],
        expires_in_minutes: int | None = None,
    ) -> CreateInviteResponse:
        """Issue an invitation and return its record with the one-time token.

        The duplicate check always applies here.
        """
        return await self.create_invite_use_case.execute(
            CreateInviteRequest(
                payload=dict(payload),
                expires_in_minutes=expires_in_minutes,
            )
        )

    async def list_invites(
        self,
        invite_type: InviteType,
        organization_id: str,
        page: int = 1,
        size: int = 20,
        search: str | None = None,
        statuses: list[InviteStatus] | None = None,
    ) -> ListInvitesResponse:
        """List an organization's invitations of one type, newest first."""
        return await self.list_invites_use_case.execute(
            ListInvitesRequest(
                type=invite_type,
                organization_id=organization_id,
                page=page,
                size=size,
                search=search,
                statuses=statuses,
            )
        )

    async def accept_invite(self, token: str) -> AcceptanceResult:
        """Redeem an invitation token."""
        return await self.accept_invite_use_case.execute(AcceptInviteRequest(token=token))
