"""Invitation attribute codec.

Keycloak users carry a generic ``dict[str, list[str]]`` attribute bag. The
invitation lifecycle is stored there under a fixed ``access_invite_`` key
namespace, every value wrapped as a single-element list.
"""

from collections.abc import Mapping
from datetime import datetime, timezone

import logfire
from pydantic import ValidationError as PydanticValidationError

from access.domain.model.directory import Attributes, DirectoryUser
from access.domain.model.invitation import (
    METADATA_SCHEMAS,
    InvitationFields,
    InvitationRecord,
)
from access.domain.value import (
    InviteId,
    InviteStatus,
    InviteType,
    OrganizationId,
    UserId,
)

from .base import Service

ATTRIBUTE_PREFIX = "access_invite"

ID_KEY = f"{ATTRIBUTE_PREFIX}_id"
TYPE_KEY = f"{ATTRIBUTE_PREFIX}_type"
STATUS_KEY = f"{ATTRIBUTE_PREFIX}_status"
SECRET_HASH_KEY = f"{ATTRIBUTE_PREFIX}_secret_hash"
METADATA_KEY = f"{ATTRIBUTE_PREFIX}_metadata"
ORGANIZATION_ID_KEY = f"{ATTRIBUTE_PREFIX}_organization_id"
CREATED_AT_KEY = f"{ATTRIBUTE_PREFIX}_created_at"
EXPIRES_AT_KEY = f"{ATTRIBUTE_PREFIX}_expires_at"
JOINED_AT_KEY = f"{ATTRIBUTE_PREFIX}_joined_at"

REQUIRED_KEYS = (ID_KEY, TYPE_KEY, ORGANIZATION_ID_KEY, CREATED_AT_KEY, EXPIRES_AT_KEY)


def _first(attributes: Mapping[str, list[str]], key: str) -> str | None:
    values = attributes.get(key)
    if not values:
        return None
    return values[0] or None


def _timestamp(raw: str) -> datetime:
    """Parse an ISO timestamp; values without an offset are read as UTC."""
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


class InviteAttributeCodec(Service):
    """Encode and decode invitation state in a user's attribute bag."""

    def encode(
        self, existing: Mapping[str, list[str]], fields: InvitationFields
    ) -> Attributes:
        """Merge invitation fields into an existing attribute bag.

        Args:
            existing: Current attributes of the user (left untouched)
            fields: Invitation state to write

        Returns:
            New attribute bag
        """
        attributes: Attributes = {key: list(values) for key, values in existing.items()}

        attributes[ID_KEY] = [fields.invite_id]
        attributes[TYPE_KEY] = [fields.type.value]
        attributes[STATUS_KEY] = [fields.status.value]
        attributes[METADATA_KEY] = [fields.metadata.model_dump_json(exclude_none=True)]
        attributes[ORGANIZATION_ID_KEY] = [fields.organization_id]
        attributes[CREATED_AT_KEY] = [fields.created_at.isoformat()]
        attributes[EXPIRES_AT_KEY] = [fields.expires_at.isoformat()]

        if fields.secret_hash:
            attributes[SECRET_HASH_KEY] = [fields.secret_hash]
        else:
            attributes.pop(SECRET_HASH_KEY, None)

        if fields.joined_at:
            attributes[JOINED_AT_KEY] = [fields.joined_at.isoformat()]
        else:
            attributes.pop(JOINED_AT_KEY, None)

        return attributes

    def clear_secret(self, attributes: Mapping[str, list[str]]) -> Attributes:
        """Drop the secret hash, keeping every other key."""
        return {
            key: list(values)
            for key, values in attributes.items()
            if key != SECRET_HASH_KEY
        }

    def mark_accepted(
        self, attributes: Mapping[str, list[str]], joined_at: datetime
    ) -> Attributes:
        """Set status to ACCEPTED and record when the invitee joined."""
        updated: Attributes = {key: list(values) for key, values in attributes.items()}
        updated[STATUS_KEY] = [InviteStatus.ACCEPTED.value]
        updated[JOINED_AT_KEY] = [joined_at.isoformat()]
        return updated

    def decode(self, user: DirectoryUser) -> InvitationRecord | None:
        """Reconstruct the invitation stored on a user.

        Returns None, never raises, when the bag holds no complete invitation.
        Callers treat None as "no active invitation".
        """
        attributes = user.attributes or {}
        if user.id is None or any(_first(attributes, key) is None for key in REQUIRED_KEYS):
            return None

        try:
            invite_type = InviteType(_first(attributes, TYPE_KEY))
            status = InviteStatus(_first(attributes, STATUS_KEY) or InviteStatus.PENDING)
            created_at = _timestamp(_first(attributes, CREATED_AT_KEY))
            expires_at = _timestamp(_first(attributes, EXPIRES_AT_KEY))
            joined_raw = _first(attributes, JOINED_AT_KEY)
            joined_at = _timestamp(joined_raw) if joined_raw else None

            schema = METADATA_SCHEMAS[invite_type]
            metadata = schema.model_validate_json(_first(attributes, METADATA_KEY) or "")
        except (ValueError, PydanticValidationError) as e:
            logfire.warn(
                "Unreadable invitation attributes",
                user_id=user.id,
                error=str(e),
            )
            return None

        return InvitationRecord(
            invite_id=InviteId(_first(attributes, ID_KEY)),
            user_id=UserId(user.id),
            organization_id=OrganizationId(_first(attributes, ORGANIZATION_ID_KEY)),
            type=invite_type,
            status=status,
            metadata=metadata,
            secret_hash=_first(attributes, SECRET_HASH_KEY),
            created_at=created_at,
            expires_at=expires_at,
            joined_at=joined_at,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            email_verified=user.email_verified,
        )
