"""List invites use case."""

import math

import logfire
from pydantic import BaseModel, Field

from access.application.usecase.base import BaseUseCase
from access.config import Settings
from access.domain.model import InvitationRecord
from access.domain.repository import IdentityDirectory
from access.domain.service import InviteAttributeCodec
from access.domain.service.attribute_codec import ORGANIZATION_ID_KEY
from access.domain.value import InviteStatus, InviteType


class ListInvitesRequest(BaseModel):
    """Request to list an organization's invites of one type."""

    type: InviteType
    organization_id: str = Field(min_length=1)
    page: int = Field(default=1, ge=1)
    size: int = Field(default=20, ge=1, le=100)
    search: str | None = None
    statuses: list[InviteStatus] | None = None


class ListInvitesResponse(BaseModel):
    """One page of invites."""

    invitations: list[InvitationRecord]
    total_count: int
    current_page: int
    total_pages: int


def _matches_search(record: InvitationRecord, term: str) -> bool:
    full_name = f"{record.first_name or ''} {record.last_name or ''}".lower()
    return term in full_name or term in (record.email or "").lower()


class ListInvitesUseCase(BaseUseCase[ListInvitesRequest, ListInvitesResponse]):
    """Use case for listing invites.

    Invitations live on directory users, so filtering, sorting and paging
    happen in memory over at most ``list_max_users`` users.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        attribute_codec: InviteAttributeCodec,
        settings: Settings,
    ) -> None:
        self.directory = directory
        self.attribute_codec = attribute_codec
        self.settings = settings

    async def execute(self, request: ListInvitesRequest) -> ListInvitesResponse:
        """Execute list invites use case.

        Args:
            request: Filters and page

        Returns:
            Sanitized records, newest first
        """
        with logfire.span(
            "list_invites",
            organization_id=request.organization_id,
            invite_type=request.type.value,
            page=request.page,
            size=request.size,
        ):
            users = await self.directory.search_users_by_attribute(
                ORGANIZATION_ID_KEY,
                request.organization_id,
                max_results=self.settings.invitations.list_max_users,
            )

            records: list[InvitationRecord] = []
            for user in users:
                record = self.attribute_codec.decode(user)
                if record is None:
                    continue
                if record.organization_id != request.organization_id:
                    continue
                if record.type != request.type:
                    continue
                if request.statuses and record.status not in request.statuses:
                    continue
                records.append(record.sanitized())

            term = (request.search or "").strip().lower()
            if term:
                records = [record for record in records if _matches_search(record, term)]

            records.sort(key=lambda record: record.created_at, reverse=True)

            total_count = len(records)
            start = (request.page - 1) * request.size
            page = records[start : start + request.size]

            logfire.info(
                "Invites listed",
                organization_id=request.organization_id,
                total_count=total_count,
                returned=len(page),
            )

            return ListInvitesResponse(
                invitations=page,
                total_count=total_count,
                current_page=request.page,
                total_pages=math.ceil(total_count / request.size),
            )
