"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class DirectoryError(ProviderError):
    """Keycloak admin API call failed.

    ``status_code`` is None for transport failures and timeouts.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409


class DownstreamServiceError(ProviderError):
    """Tenant service call failed."""

    pass
