"""Invite use cases."""

from access.application.usecase.invite.accept_invite import (
    AcceptInviteRequest,
    AcceptInviteUseCase,
)
from access.application.usecase.invite.create_invite import (
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
)
from access.application.usecase.invite.list_invites import (
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)

__all__ = [
    "AcceptInviteRequest",
    "AcceptInviteUseCase",
    "CreateInviteRequest",
    "CreateInviteResponse",
    "CreateInviteUseCase",
    "ListInvitesRequest",
    "ListInvitesResponse",
    "ListInvitesUseCase",
]
