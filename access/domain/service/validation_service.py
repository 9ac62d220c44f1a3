"""Invitation payload validation."""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

import logfire
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from access.config import Settings
from access.domain.error import DuplicateInviteError, ValidationError
from access.domain.model.invitation import METADATA_SCHEMAS, InviteCreateInput
from access.domain.repository import IdentityDirectory
from access.domain.value import InviteStatus, InviteType, OrganizationId
from access.util.clock import Clock, utc_now

from .attribute_codec import InviteAttributeCodec
from .base import Service

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class InvitePayload(BaseModel):
    """Top-level shape of an invitation request.

    ``metadata`` is only checked for being an object here; its schema depends
    on ``type`` and is validated separately.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    type: InviteType
    organization_id: str = Field(min_length=1)
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=254, pattern=EMAIL_PATTERN)
    metadata: dict[str, Any] = Field(default_factory=dict)


def _first_error(error: PydanticValidationError, prefix: str | None = None) -> ValidationError:
    """Reduce a pydantic error to the first failure, as a domain error."""
    first = error.errors()[0]
    path = [str(part) for part in first["loc"]]
    if prefix:
        path.insert(0, prefix)
    return ValidationError(first["msg"], field=".".join(path) or None)


class InviteValidationService(Service):
    """Validate invitation payloads before anything is written."""

    span_name = "invite_validation"

    def __init__(
        self,
        directory: IdentityDirectory,
        attribute_codec: InviteAttributeCodec,
        settings: Settings,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize validation service.

        Args:
            directory: Identity directory used for the duplicate check
            attribute_codec: Codec to read invitations off existing users
            settings: Application settings
            clock: Source of the current time
        """
        self.directory = directory
        self.attribute_codec = attribute_codec
        self.settings = settings
        self.clock = clock

    async def validate(
        self, payload: Mapping[str, Any], allow_duplicate: bool = False
    ) -> InviteCreateInput:
        """Validate an invitation payload.

        Args:
            payload: Raw request payload
            allow_duplicate: Skip the duplicate check

        Returns:
            The typed, normalized invitation input

        Raises:
            ValidationError: On the first structural or metadata error
            DuplicateInviteError: If an equivalent invitation is live
        """
        with self.span("validate", allow_duplicate=allow_duplicate):
            try:
                parsed = InvitePayload.model_validate(dict(payload))
            except PydanticValidationError as e:
                error = _first_error(e)
                logfire.info("Invite payload rejected", field=error.field)
                raise error from e

            email = parsed.email.lower()
            organization_id = OrganizationId(parsed.organization_id)

            if not allow_duplicate:
                await self.ensure_not_duplicate(email, organization_id, parsed.type)

            schema = METADATA_SCHEMAS[parsed.type]
            try:
                metadata = schema.model_validate(
                    {**parsed.metadata, "kind": parsed.type.value}
                )
            except PydanticValidationError as e:
                error = _first_error(e, prefix="metadata")
                logfire.info("Invite metadata rejected", field=error.field)
                raise error from e

            return InviteCreateInput(
                type=parsed.type,
                organization_id=organization_id,
                email=email,
                first_name=parsed.first_name,
                last_name=parsed.last_name,
                metadata=metadata,
            )

    async def ensure_not_duplicate(
        self, email: str, organization_id: OrganizationId, invite_type: InviteType
    ) -> None:
        """Reject when an equivalent invitation is pending or was just accepted.

        Best effort: the read here and the write in creation are not atomic,
        so two concurrent requests can both pass.

        Raises:
            DuplicateInviteError: If a conflicting invitation exists
        """
        window = timedelta(minutes=self.settings.invitations.duplicate_window_minutes)
        now = self.clock()

        for user in await self.directory.find_users_by_email(email):
            record = self.attribute_codec.decode(user)
            if record is None:
                continue
            if record.organization_id != organization_id or record.type != invite_type:
                continue

            recently_accepted = (
                record.status == InviteStatus.ACCEPTED
                and record.joined_at is not None
                and now - record.joined_at < window
            )
            if record.status == InviteStatus.PENDING or recently_accepted:
                logfire.warn(
                    "Duplicate invite rejected",
                    organization_id=organization_id,
                    invite_type=invite_type.value,
                    existing_invite_id=record.invite_id,
                    existing_status=record.status.value,
                )
                raise DuplicateInviteError(email, organization_id, invite_type.value)
