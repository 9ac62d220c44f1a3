"""Create invite use case."""

import math
from datetime import timedelta
from typing import Any

import logfire
from pydantic import BaseModel, Field

from access.adapter.error import DirectoryError, DownstreamServiceError
from access.application.usecase.base import BaseUseCase
from access.config import Settings
from access.domain.error import InvitePersistenceError, OrganizationNotFoundError
from access.domain.model import (
    DirectoryUser,
    InvitationFields,
    InvitationRecord,
    InviteCreateInput,
    Organization,
    PartnerMetadata,
)
from access.domain.model.directory import Attributes
from access.domain.repository import ChannelTypeClient, IdentityDirectory
from access.domain.service import (
    InviteAttributeCodec,
    InviteTokenCodec,
    InviteValidationService,
)
from access.domain.value import InviteStatus, InviteType, new_invite_id
from access.util.clock import Clock, utc_now

DEFAULT_ORGANIZATION_NAME = "Organization"
DEFAULT_CHANNEL_TYPE_NAME = "Business Partner"


class CreateInviteRequest(BaseModel):
    """Request to create an invite.

    ``allow_duplicate`` is for internal callers such as back-office tooling.
    The facade and the HTTP API never set it.
    """

    payload: dict[str, Any]
    expires_in_minutes: int | None = Field(default=None, gt=0)
    allow_duplicate: bool = False


class CreateInviteResponse(BaseModel):
    """Created invite and its one-time token.

    The token is returned exactly once and never stored in clear.
    """

    record: InvitationRecord
    token: str


def _format_number(value: float) -> str:
    """Render 10.0 as "10" and 12.5 as "12.5"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class CreateInviteUseCase(BaseUseCase[CreateInviteRequest, CreateInviteResponse]):
    """Use case for issuing an invitation.

    The workflow writes to the directory in several steps (user, attributes,
    membership, notification) with no rollback. A failure midway leaves the
    earlier writes in place.
    """

    def __init__(
        self,
        validation_service: InviteValidationService,
        token_codec: InviteTokenCodec,
        attribute_codec: InviteAttributeCodec,
        directory: IdentityDirectory,
        channel_type_client: ChannelTypeClient,
        settings: Settings,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize use case.

        Args:
            validation_service: Payload and duplicate validation
            token_codec: Token minting
            attribute_codec: Invitation attribute encoding
            directory: Identity directory
            channel_type_client: Tenant service lookup for partner emails
            settings: Application settings
            clock: Source of the current time
        """
        self.validation_service = validation_service
        self.token_codec = token_codec
        self.attribute_codec = attribute_codec
        self.directory = directory
        self.channel_type_client = channel_type_client
        self.settings = settings
        self.clock = clock

    async def execute(self, request: CreateInviteRequest) -> CreateInviteResponse:
        """Execute create invite use case.

        Args:
            request: Create invite request

        Returns:
            Sanitized invitation record and the raw token

        Raises:
            ValidationError: If the payload is invalid (nothing written)
            DuplicateInviteError: If an equivalent invite is live (nothing written)
            OrganizationNotFoundError: If the organization doesn't exist
            InvitePersistenceError: If the stored attributes don't read back
            DirectoryError: If a directory call fails
        """
        with logfire.span(
            "create_invite",
            organization_id=request.payload.get("organization_id"),
            invite_type=request.payload.get("type"),
        ):
            invite_input = await self.validation_service.validate(
                request.payload, allow_duplicate=request.allow_duplicate
            )

            now = self.clock()
            expiry_minutes = (
                request.expires_in_minutes
                or self.settings.invitations.default_expiry_minutes
            )
            expires_at = now + timedelta(minutes=expiry_minutes)
            invite_id = new_invite_id()

            user, is_new_user = await self._ensure_user(invite_input)
            user_id = user.id

            generated = self.token_codec.generate(invite_id, user_id)
            fields = InvitationFields(
                invite_id=invite_id,
                organization_id=invite_input.organization_id,
                type=invite_input.type,
                status=InviteStatus.PENDING,
                metadata=invite_input.metadata,
                secret_hash=generated.secret_hash,
                created_at=now,
                expires_at=expires_at,
            )
            base_attributes = self.attribute_codec.encode(user.attributes, fields)

            organization = await self.directory.get_organization(
                invite_input.organization_id
            )
            if organization is None:
                logfire.warn(
                    "Organization not found",
                    organization_id=invite_input.organization_id,
                )
                raise OrganizationNotFoundError(invite_input.organization_id)

            personalization = await self._personalization_attributes(
                invite_input, organization, generated.token, expiry_minutes
            )

            # Existing users keep their names
            updates: dict[str, Any] = {
                "attributes": {**base_attributes, **personalization}
            }
            if is_new_user:
                updates["first_name"] = invite_input.first_name
                updates["last_name"] = invite_input.last_name
            await self.directory.update_user(user.model_copy(update=updates))

            await self._ensure_membership(invite_input.organization_id, user_id)
            await self.directory.invite_existing_user(
                invite_input.organization_id, user_id
            )

            refreshed = await self.directory.get_user(user_id)
            record = self.attribute_codec.decode(refreshed) if refreshed else None
            if record is None:
                logfire.error(
                    "Invite attributes did not read back",
                    invite_id=invite_id,
                    user_id=user_id,
                )
                raise InvitePersistenceError(
                    "Failed to register access invitation attributes"
                )

            logfire.info(
                "Invite created",
                invite_id=invite_id,
                user_id=user_id,
                organization_id=invite_input.organization_id,
                invite_type=invite_input.type.value,
                new_user=is_new_user,
                expires_at=expires_at.isoformat(),
            )

            return CreateInviteResponse(record=record.sanitized(), token=generated.token)

    async def _ensure_user(
        self, invite_input: InviteCreateInput
    ) -> tuple[DirectoryUser, bool]:
        """Find the invitee by exact email or create them.

        Returns:
            Tuple of (user, is_new_user)
        """
        existing = await self.directory.find_users_by_email(invite_input.email)
        if existing:
            logfire.info("Invitee already exists", user_id=existing[0].id)
            return existing[0], False

        user_id = await self.directory.create_user(
            DirectoryUser(
                username=invite_input.email,
                email=invite_input.email,
                first_name=invite_input.first_name,
                last_name=invite_input.last_name,
                enabled=True,
                email_verified=False,
            )
        )

        created = await self.directory.get_user(user_id)
        if created is None:
            raise InvitePersistenceError("Failed to create user for invitation")
        return created, True

    async def _ensure_membership(self, organization_id: str, user_id: str) -> None:
        try:
            await self.directory.add_organization_member(organization_id, user_id)
        except DirectoryError as e:
            if not e.is_conflict:
                raise
            logfire.info(
                "Invitee already an organization member",
                organization_id=organization_id,
                user_id=user_id,
            )

    async def _personalization_attributes(
        self,
        invite_input: InviteCreateInput,
        organization: Organization,
        token: str,
        expiry_minutes: int,
    ) -> Attributes:
        """Attributes read by the directory's invitation email template."""
        organization_name = organization.name or DEFAULT_ORGANIZATION_NAME
        attributes: Attributes = {
            "user_type": [invite_input.type.value],
            "organization_id": [invite_input.organization_id],
            "organization_name": [organization_name],
            "organization_display_name": [
                organization.display_name or organization_name
            ],
            "magic_link_token": [token],
            "custom_app_url": [self.settings.invitations.app_url],
            "invitation_expiry_hours": [str(math.ceil(expiry_minutes / 60))],
        }

        if invite_input.type == InviteType.PARTNER:
            attributes.update(await self._channel_type_attributes(invite_input.metadata))

        return attributes

    async def _channel_type_attributes(self, metadata: PartnerMetadata) -> Attributes:
        requested = metadata.channel_type
        name = requested.name
        commission_rate = metadata.commission_percent

        try:
            channel_type = await self.channel_type_client.get_channel_type(requested.id)
        except DownstreamServiceError as e:
            logfire.warn(
                "Channel type lookup failed, using invite values",
                channel_type_id=requested.id,
                error=str(e),
            )
        else:
            name = channel_type.name or name
            if channel_type.commission_rate is not None:
                commission_rate = channel_type.commission_rate

        attributes: Attributes = {
            "channel_type_id": [str(requested.id)],
            "channel_type_name": [name or DEFAULT_CHANNEL_TYPE_NAME],
        }
        if commission_rate is not None:
            attributes["channel_type_commission_rate"] = [_format_number(commission_rate)]
        return attributes
