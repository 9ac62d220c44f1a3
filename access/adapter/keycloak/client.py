"""Keycloak admin REST client.

Talks to ``{base_url}/admin/realms/{realm}`` with an admin access token
obtained by password grant against the admin realm. The token is cached and
refreshed shortly before it expires; nothing else is cached.
"""

import time
from typing import Any

import httpx
import logfire

from access.adapter.error import DirectoryError
from access.config import KeycloakSettings
from access.domain.model.directory import (
    DirectoryGroup,
    DirectoryRole,
    DirectoryUser,
    Organization,
    flatten_groups,
)
from access.domain.repository import IdentityDirectory
from access.domain.value import GroupId, OrganizationId, UserId


class KeycloakDirectory(IdentityDirectory):
    """Identity directory backed by the Keycloak admin API."""

    def __init__(
        self,
        settings: KeycloakSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Keycloak client.

        Args:
            settings: Keycloak connection and admin credentials
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.settings = settings
        self.transport = transport

        base_url = settings.base_url.rstrip("/")
        self.admin_url = f"{base_url}/admin/realms/{settings.realm}"
        self.token_url = (
            f"{base_url}/realms/{settings.admin_realm}/protocol/openid-connect/token"
        )

        self._access_token: str | None = None
        self._token_expires_at: float = 0.0

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.timeout_seconds, transport=self.transport
        )

    async def _get_access_token(self) -> str:
        """Return the cached admin token, fetching a new one when stale.

        Raises:
            DirectoryError: If the token request fails
        """
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        data = {
            "grant_type": "password",
            "client_id": self.settings.admin_client_id,
            "username": self.settings.admin_username,
            "password": self.settings.admin_password,
        }
        if self.settings.admin_client_secret:
            data["client_secret"] = self.settings.admin_client_secret

        try:
            async with self._client() as client:
                response = await client.post(self.token_url, data=data)
        except httpx.HTTPError as e:
            logfire.error("Keycloak token request HTTP error", error=str(e))
            raise DirectoryError(f"HTTP error fetching admin token: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Keycloak token request failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise DirectoryError(
                f"Failed to get admin token: {response.status_code}",
                status_code=response.status_code,
            )

        result = response.json()
        expires_in = int(result.get("expires_in", 60))
        margin = self.settings.token_refresh_margin_seconds

        self._access_token = result["access_token"]
        self._token_expires_at = time.monotonic() + max(expires_in - margin, 0)
        return self._access_token

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request to the realm admin API.

        Raises:
            DirectoryError: On transport failure, timeout or non-2xx status
        """
        token = await self._get_access_token()
        url = f"{self.admin_url}{path}"

        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    data=data,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.TimeoutException as e:
            logfire.error("Keycloak request timed out", method=method, path=path)
            raise DirectoryError(f"Keycloak request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logfire.error(
                "Keycloak request HTTP error", method=method, path=path, error=str(e)
            )
            raise DirectoryError(f"HTTP error calling Keycloak: {e}") from e

        if response.is_error:
            logfire.warn(
                "Keycloak API error",
                method=method,
                path=path,
                status_code=response.status_code,
                error=response.text,
            )
            raise DirectoryError(
                f"Keycloak API error: {response.status_code} {method} {path}",
                status_code=response.status_code,
            )

        return response

    async def find_users_by_email(self, email: str) -> list[DirectoryUser]:
        response = await self._request(
            "GET",
            "/users",
            params={"email": email, "exact": "true", "briefRepresentation": "false"},
        )
        return [DirectoryUser.model_validate(item) for item in response.json()]

    async def search_users_by_attribute(
        self, name: str, value: str, max_results: int = 1000
    ) -> list[DirectoryUser]:
        response = await self._request(
            "GET",
            "/users",
            params={
                "q": f"{name}:{value}",
                "max": max_results,
                "briefRepresentation": "false",
            },
        )
        return [DirectoryUser.model_validate(item) for item in response.json()]

    async def get_user(self, user_id: UserId) -> DirectoryUser | None:
        try:
            response = await self._request("GET", f"/users/{user_id}")
        except DirectoryError as e:
            if e.is_not_found:
                return None
            raise
        return DirectoryUser.model_validate(response.json())

    async def create_user(self, user: DirectoryUser) -> UserId:
        response = await self._request(
            "POST", "/users", json=user.to_representation()
        )

        # Keycloak answers 201 with the new user's URL in Location
        location = response.headers.get("Location", "")
        user_id = location.rstrip("/").rsplit("/", 1)[-1]
        if not user_id:
            raise DirectoryError("Keycloak did not return the created user's id")

        logfire.info("Keycloak user created", user_id=user_id)
        return UserId(user_id)

    async def update_user(self, user: DirectoryUser) -> None:
        if user.id is None:
            raise ValueError("Cannot update a user without an id")
        await self._request("PUT", f"/users/{user.id}", json=user.to_representation())

    async def get_organization(
        self, organization_id: OrganizationId
    ) -> Organization | None:
        try:
            response = await self._request("GET", f"/organizations/{organization_id}")
        except DirectoryError as e:
            if e.is_not_found:
                return None
            raise
        return Organization.model_validate(response.json())

    async def add_organization_member(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> None:
        # The member endpoint takes the bare user id as a JSON string body
        await self._request(
            "POST", f"/organizations/{organization_id}/members", json=user_id
        )

    async def invite_existing_user(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> None:
        await self._request(
            "POST",
            f"/organizations/{organization_id}/members/invite-existing-user",
            data={"id": user_id},
        )

    async def list_groups(self) -> list[DirectoryGroup]:
        response = await self._request(
            "GET", "/groups", params={"briefRepresentation": "false"}
        )
        groups = [DirectoryGroup.model_validate(item) for item in response.json()]
        return flatten_groups(groups)

    async def list_user_groups(self, user_id: UserId) -> list[DirectoryGroup]:
        response = await self._request("GET", f"/users/{user_id}/groups")
        return [DirectoryGroup.model_validate(item) for item in response.json()]

    async def add_user_to_group(self, user_id: UserId, group_id: GroupId) -> None:
        await self._request("PUT", f"/users/{user_id}/groups/{group_id}")

    async def remove_user_from_group(self, user_id: UserId, group_id: GroupId) -> None:
        await self._request("DELETE", f"/users/{user_id}/groups/{group_id}")

    async def list_realm_roles(self) -> list[DirectoryRole]:
        response = await self._request("GET", "/roles")
        return [DirectoryRole.model_validate(item) for item in response.json()]

    async def assign_realm_roles(
        self, user_id: UserId, roles: list[DirectoryRole]
    ) -> None:
        await self._request(
            "POST",
            f"/users/{user_id}/role-mappings/realm",
            json=[role.to_representation() for role in roles],
        )
