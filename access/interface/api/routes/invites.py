"""Invite routes.

Caller authentication is left to the gateway in front of this service.
"""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from access.adapter.error import AdapterError
from access.application.service import AccessInviteService
from access.application.usecase.invite import CreateInviteResponse, ListInvitesResponse
from access.domain.error import DomainError
from access.domain.model import AcceptanceResult
from access.domain.value import InviteStatus, InviteType
from access.interface.error import to_http_exception

router = APIRouter(tags=["invites"], route_class=DishkaRoute)


class CreateInviteAPIRequest(BaseModel):
    """API request for creating an invite.

    Fields are loosely typed here; the invite validation service owns the
    rules and reports the first broken one. Unknown fields are ignored, so
    callers cannot switch off the duplicate check.
    """

    type: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    metadata: dict[str, Any] | None = None
    expires_in_minutes: int | None = Field(default=None, gt=0)


class AcceptInviteAPIRequest(BaseModel):
    """API request for redeeming an invite."""

    token: str


def _parse_statuses(raw: str | None) -> list[InviteStatus] | None:
    """Parse a comma-separated status filter such as ``PENDING,ACCEPTED``."""
    if not raw:
        return None
    try:
        return [InviteStatus(part.strip().upper()) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status filter: {raw}",
        )


@router.post(
    "/organizations/{organization_id}/invites",
    response_model=CreateInviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invite(
    organization_id: str,
    request: CreateInviteAPIRequest,
    access_invite_service: FromDishka[AccessInviteService],
) -> CreateInviteResponse:
    """Create an invite for a staff member or partner.

    Args:
        organization_id: Organization the invitee joins
        request: Invitee and entitlements
        access_invite_service: Invite facade from DI

    Returns:
        Invite record and the one-time token

    Raises:
        HTTPException: If validation fails, a duplicate exists, the
            organization is unknown, or the directory fails
    """
    payload = request.model_dump(
        include={"type", "email", "first_name", "last_name", "metadata"},
        exclude_none=True,
    )
    payload["organization_id"] = organization_id

    try:
        return await access_invite_service.create_invite(
            payload,
            expires_in_minutes=request.expires_in_minutes,
        )
    except (DomainError, AdapterError) as e:
        raise to_http_exception(e) from e


@router.get(
    "/organizations/{organization_id}/invites", response_model=ListInvitesResponse
)
async def list_invites(
    organization_id: str,
    access_invite_service: FromDishka[AccessInviteService],
    invite_type: InviteType = Query(alias="type"),
    page: int = Query(default=1, ge=1),
    size: int = Query(default=20, ge=1, le=100),
    search: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
) -> ListInvitesResponse:
    """List an organization's invites, newest first.

    Args:
        organization_id: Organization ID
        access_invite_service: Invite facade from DI
        invite_type: Invite type to list
        page: Page number (1-based)
        size: Page size (1-100)
        search: Case-insensitive match on name or email
        status_filter: Comma-separated statuses

    Returns:
        One page of invites
    """
    statuses = _parse_statuses(status_filter)

    try:
        return await access_invite_service.list_invites(
            invite_type,
            organization_id,
            page=page,
            size=size,
            search=search,
            statuses=statuses,
        )
    except (DomainError, AdapterError) as e:
        raise to_http_exception(e) from e


@router.post("/invites/accept", response_model=AcceptanceResult)
async def accept_invite(
    request: AcceptInviteAPIRequest,
    access_invite_service: FromDishka[AccessInviteService],
) -> AcceptanceResult:
    """Redeem an invite token.

    Args:
        request: Token from the invitation link
        access_invite_service: Invite facade from DI

    Returns:
        Applied groups and roles

    Raises:
        HTTPException: 400 for malformed or unverifiable tokens, 409 if
            already used, 410 if expired
    """
    try:
        return await access_invite_service.accept_invite(request.token)
    except (DomainError, AdapterError) as e:
        raise to_http_exception(e) from e
