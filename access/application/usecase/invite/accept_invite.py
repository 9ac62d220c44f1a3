"""Accept invite use case."""

import logfire
from pydantic import BaseModel

from access.adapter.error import DirectoryError
from access.application.usecase.base import BaseUseCase
from access.domain.error import (
    AlreadyUsedError,
    ExpiredError,
    InvalidOrExpiredInvitationError,
)
from access.domain.model import AcceptanceResult
from access.domain.repository import IdentityDirectory
from access.domain.service import (
    InviteAttributeCodec,
    InviteTokenCodec,
    ProvisioningContext,
    ProvisioningStrategy,
)
from access.domain.value import InviteStatus, InviteType
from access.util.clock import Clock, utc_now

# Written for the invitation email only; useless once the invite is consumed
MAGIC_LINK_TOKEN_KEY = "magic_link_token"


class AcceptInviteRequest(BaseModel):
    """Request to redeem an invite token."""

    token: str


class AcceptInviteUseCase(BaseUseCase[AcceptInviteRequest, AcceptanceResult]):
    """Use case for redeeming an invitation.

    Failures that could reveal whether an account or invitation exists all
    surface as ``InvalidOrExpiredInvitationError``. The specific reason is
    only logged.
    """

    def __init__(
        self,
        token_codec: InviteTokenCodec,
        attribute_codec: InviteAttributeCodec,
        directory: IdentityDirectory,
        strategies: dict[InviteType, ProvisioningStrategy],
        clock: Clock = utc_now,
    ) -> None:
        """Initialize use case.

        Args:
            token_codec: Token parsing and verification
            attribute_codec: Invitation attribute decoding
            directory: Identity directory
            strategies: Provisioning strategy per invite type
            clock: Source of the current time
        """
        self.token_codec = token_codec
        self.attribute_codec = attribute_codec
        self.directory = directory
        self.strategies = strategies
        self.clock = clock

    def _reject(self, reason: str, **details) -> InvalidOrExpiredInvitationError:
        logfire.warn("Invite redemption rejected", reason=reason, **details)
        return InvalidOrExpiredInvitationError()

    async def execute(self, request: AcceptInviteRequest) -> AcceptanceResult:
        """Execute accept invite use case.

        Args:
            request: Token to redeem

        Returns:
            Applied entitlements

        Raises:
            MalformedTokenError: If the token doesn't have three segments
            InvalidOrExpiredInvitationError: For any unverifiable token
            AlreadyUsedError: If the invitation was already accepted
            ExpiredError: If the invitation expired
        """
        with logfire.span("accept_invite", token=request.token[:8] + "..."):
            parsed = self.token_codec.parse(request.token)

            try:
                user = await self.directory.get_user(parsed.user_id)
            except DirectoryError as e:
                raise self._reject(
                    "directory lookup failed",
                    user_id=parsed.user_id,
                    status_code=e.status_code,
                    error=str(e),
                ) from e
            if user is None:
                raise self._reject("user not found", user_id=parsed.user_id)

            record = self.attribute_codec.decode(user)
            if record is None:
                raise self._reject("no invitation on user", user_id=parsed.user_id)

            if record.invite_id != parsed.invite_id:
                raise self._reject(
                    "invite id mismatch",
                    user_id=parsed.user_id,
                    invite_id=parsed.invite_id,
                )

            if record.secret_hash is None:
                # Hash is erased on acceptance; a pending invite without one is corrupt
                if record.status == InviteStatus.PENDING:
                    raise self._reject(
                        "pending invite has no secret", invite_id=record.invite_id
                    )
            elif not self.token_codec.verify(parsed.secret, record.secret_hash):
                raise self._reject("secret mismatch", invite_id=record.invite_id)

            if record.status != InviteStatus.PENDING:
                logfire.info(
                    "Invite already used",
                    invite_id=record.invite_id,
                    status=record.status.value,
                )
                raise AlreadyUsedError()

            now = self.clock()
            if record.is_expired(now):
                logfire.info(
                    "Invite expired",
                    invite_id=record.invite_id,
                    expires_at=record.expires_at.isoformat(),
                )
                raise ExpiredError()

            strategy = self.strategies.get(record.type)
            if strategy is None:
                raise RuntimeError(f"No provisioning strategy for {record.type.value}")

            provisioned = await strategy.execute(
                ProvisioningContext(
                    user=user,
                    metadata=record.metadata,
                    organization_id=record.organization_id,
                )
            )

            attributes = self.attribute_codec.clear_secret(
                self.attribute_codec.mark_accepted(user.attributes, now)
            )
            attributes.pop(MAGIC_LINK_TOKEN_KEY, None)
            await self.directory.update_user(
                user.model_copy(
                    update={"attributes": attributes, "email_verified": True}
                )
            )

            logfire.info(
                "Invite accepted",
                invite_id=record.invite_id,
                user_id=record.user_id,
                organization_id=record.organization_id,
                invite_type=record.type.value,
            )

            return AcceptanceResult(
                user_id=record.user_id,
                invitation_id=record.invite_id,
                organization_id=record.organization_id,
                status=InviteStatus.ACCEPTED,
                email_verified=True,
                applied_groups=provisioned.applied_groups,
                applied_roles=provisioned.applied_roles,
            )
