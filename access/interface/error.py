"""Translation of domain and adapter errors into HTTP responses."""

from fastapi import HTTPException, status

from access.adapter.error import AdapterError
from access.domain.error import (
    AlreadyUsedError,
    BusinessRuleViolationError,
    DomainError,
    ExpiredError,
    InvalidOrExpiredInvitationError,
    InvitationError,
    InvitePersistenceError,
    NotFoundError,
    ProvisioningError,
    ValidationError,
)

DIRECTORY_UNAVAILABLE = "Identity directory unavailable"


def to_http_exception(error: DomainError | AdapterError) -> HTTPException:
    """Map an error raised by the invitation flows to an HTTP status.

    Args:
        error: Domain or adapter error

    Returns:
        HTTPException carrying a message that is safe to show the caller
    """
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, BusinessRuleViolationError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, AlreadyUsedError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, ExpiredError):
        return HTTPException(status_code=status.HTTP_410_GONE, detail=str(error))
    if isinstance(error, InvalidOrExpiredInvitationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=InvalidOrExpiredInvitationError.MESSAGE,
        )
    if isinstance(error, InvitationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, ProvisioningError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Invitation cannot be completed until the directory is configured",
        )
    if isinstance(error, (InvitePersistenceError, AdapterError)):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=DIRECTORY_UNAVAILABLE
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error"
    )
