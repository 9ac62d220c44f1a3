"""Test configuration and helpers."""

from typing import Any

from access.adapter.keycloak import InMemoryIdentityDirectory
from access.domain.model import Organization


def seed_directory(directory: InMemoryIdentityDirectory) -> Organization:
    """Seed a directory with one organization and a small group/role catalog.

    Groups: ``g1`` (Engineering), ``g2`` (Sales), ``g-admins`` (Admins) and
    ``g-partners`` (Business Partners). Roles: ``r-viewer`` (viewer) and
    ``r-editor`` (editor).

    Returns:
        The seeded organization
    """
    directory.add_group("Engineering", group_id="g1")
    directory.add_group("Sales", group_id="g2")
    directory.add_group("Admins", group_id="g-admins")
    directory.add_group("Business Partners", group_id="g-partners")
    directory.add_role("viewer", role_id="r-viewer")
    directory.add_role("editor", role_id="r-editor")
    return directory.add_organization("acme", display_name="Acme Corp")


def staff_payload(
    organization_id: str,
    email: str = "jane.doe@example.com",
    groups: list[dict[str, Any]] | None = None,
    roles: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a staff invite payload."""
    metadata: dict[str, Any] = {"groups": groups if groups is not None else [{"id": "g1"}]}
    if roles is not None:
        metadata["roles"] = roles
    return {
        "type": "staff",
        "organization_id": organization_id,
        "email": email,
        "first_name": "Jane",
        "last_name": "Doe",
        "metadata": metadata,
    }


def partner_payload(
    organization_id: str,
    email: str = "sam.partner@example.com",
    channel_type_id: int = 42,
    commission_percent: float | None = 10,
    groups: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a partner invite payload."""
    metadata: dict[str, Any] = {"channel_type": {"id": channel_type_id}}
    if commission_percent is not None:
        metadata["commission_percent"] = commission_percent
    if groups is not None:
        metadata["groups"] = groups
    return {
        "type": "partner",
        "organization_id": organization_id,
        "email": email,
        "first_name": "Sam",
        "last_name": "Partner",
        "metadata": metadata,
    }
