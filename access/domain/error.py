"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Invitation payload failed validation.

    Recoverable: the caller must correct the input and retry.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class DuplicateInviteError(BusinessRuleViolationError):
    """Raised when an equivalent invitation is pending or was just accepted."""

    def __init__(self, email: str, organization_id: str, invite_type: str):
        self.email = email
        self.organization_id = organization_id
        self.invite_type = invite_type
        super().__init__(
            f"An invitation for {email} is already pending or was recently accepted"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class OrganizationNotFoundError(NotFoundError):
    """Raised when an invite targets an organization the directory doesn't know."""

    def __init__(self, organization_id: str):
        super().__init__("Organization", organization_id)


class InvitePersistenceError(DomainError):
    """Raised when invitation attributes don't round-trip through the directory."""

    pass


class ProvisioningError(DomainError):
    """Raised when the directory lacks something every acceptance of a type needs.

    Nothing has been written when this is raised, so the token stays redeemable
    once the directory is fixed.
    """

    pass


class InvitationError(DomainError):
    """Base error for invitation redemption."""

    pass


class MalformedTokenError(InvitationError):
    """Raised when an invitation token is structurally invalid."""

    def __init__(self) -> None:
        super().__init__("Malformed invitation token")


class InvalidOrExpiredInvitationError(InvitationError):
    """Generic redemption failure.

    Covers unknown user, missing invitation, invite id mismatch and secret
    mismatch with one message so callers can't enumerate accounts or invites.
    """

    MESSAGE = "Invalid or expired invitation"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class AlreadyUsedError(InvitationError):
    """Raised when an invitation has already been accepted."""

    def __init__(self) -> None:
        super().__init__("This invitation has already been used")


class ExpiredError(InvitationError):
    """Raised when an invitation is redeemed after its expiry."""

    def __init__(self) -> None:
        super().__init__("This invitation has expired")
