"""Application services."""

from access.application.service.access_invite_service import AccessInviteService

__all__ = ["AccessInviteService"]
