"""Application configuration."""

from pathlib import Path
from typing import Literal
from pydantic import BaseModel, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class KeycloakSettings(BaseModel):
    """Keycloak admin API configuration."""

    base_url: str = "http://localhost:9080"

    # Realm holding the organizations, users and groups we manage
    realm: str = "crm"

    # Admin credentials are exchanged against the admin realm (password grant)
    admin_realm: str = "master"
    admin_client_id: str = "admin-cli"
    admin_client_secret: str | None = None
    admin_username: str = "admin"
    admin_password: str = "CHANGE_ME_IN_PRODUCTION"

    timeout_seconds: float = 30.0

    # Refresh the cached admin token this many seconds before it expires
    token_refresh_margin_seconds: int = 30


class TenantServiceSettings(BaseModel):
    """Tenant (channel type) service configuration."""

    base_url: str = "http://localhost:8080"
    api_token: str | None = None
    timeout_seconds: float = 10.0


class InvitationSettings(BaseModel):
    """Invitation configuration."""

    # Invites expire after 24 hours unless the caller asks otherwise
    default_expiry_minutes: int = 60 * 24

    # An invite accepted less than this many minutes ago still blocks a new one
    duplicate_window_minutes: int = 5

    # Public URL of the onboarding app, rendered into invitation emails
    app_url: str = "http://localhost:3000"

    # Accepted spellings (case-insensitive) of the fixed partner group
    partner_group_names: list[str] = [
        "business partners",
        "business-partners",
        "business_partners",
        "business partner",
        "partners",
    ]

    # Groups a partner must never belong to
    admin_group_names: list[str] = ["admins", "admin", "administrators"]

    # Upper bound on users fetched when listing invites for a tenant
    list_max_users: int = 1000


class APISettings(BaseModel):
    """API configuration."""

    host: str
    port: int
    protocol: Literal["http", "https"]

    @computed_field
    @property
    def base_url(self) -> str:
        """Construct base URL from host.

        In development: http://localhost:8000
        In production: https://access.example.com
        """
        if self.host == "localhost":
            return f"{self.protocol}://{self.host}:{self.port}"
        else:
            # Production uses standard ports (80/443)
            return f"{self.protocol}://{self.host}"


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, using ``__`` for nested values:

        KEYCLOAK__BASE_URL=https://sso.example.com
        KEYCLOAK__REALM=crm
        KEYCLOAK__ADMIN_PASSWORD=...
        TENANT_SERVICE__BASE_URL=https://api.example.com
        INVITATIONS__APP_URL=https://app.example.com
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows KEYCLOAK__REALM syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Git commit SHA (loaded from version.txt file or defaults to "unknown")
    git_sha: str = "unknown"

    host: str = "localhost"
    port: int = 8000

    # Nested settings
    keycloak: KeycloakSettings = KeycloakSettings()
    tenant_service: TenantServiceSettings = TenantServiceSettings()
    invitations: InvitationSettings = InvitationSettings()
    api: APISettings = APISettings(
        host="localhost", port=8000, protocol="http"
    )  # Overwritten in validator
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def initialize_api_settings(self) -> "Settings":
        """Initialize API settings from host and environment."""
        protocol: Literal["http", "https"] = (
            "http" if self.environment in ("test", "development") else "https"
        )

        self.api = APISettings(host=self.host, port=self.port, protocol=protocol)
        self.git_sha = self._load_git_sha()

        return self

    @staticmethod
    def _load_git_sha() -> str:
        """Load git SHA from version file.

        Returns:
            Git SHA if version file exists, otherwise "unknown"
        """
        version_file = Path("/app/version.txt")
        if version_file.exists():
            try:
                return version_file.read_text().strip()
            except OSError:
                return "unknown"
        # In development, version file may not exist
        return "unknown"
