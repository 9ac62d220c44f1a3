"""Provisioning strategies applied when an invitation is accepted.

One strategy per invite type. The set is closed; the registry mapping each
``InviteType`` to its strategy is assembled in DI.
"""

from abc import ABC, abstractmethod
from typing import ClassVar

import logfire
from pydantic import Field

from access.config import Settings
from access.domain.error import ProvisioningError
from access.domain.model.directory import DirectoryGroup, DirectoryUser
from access.domain.model.invitation import (
    InviteMetadata,
    PartnerMetadata,
    StaffMetadata,
)
from access.domain.repository import IdentityDirectory
from access.domain.value import GroupRef, InviteType, OrganizationId, RoleRef, UserId
from access.domain.value.common import ValueObject

from .base import Service


class ProvisioningContext(ValueObject):
    """What a strategy needs to grant entitlements."""

    user: DirectoryUser
    metadata: InviteMetadata
    organization_id: OrganizationId


class ProvisioningResult(ValueObject):
    """Entitlements actually applied."""

    applied_groups: list[GroupRef] = Field(default_factory=list)
    applied_roles: list[RoleRef] = Field(default_factory=list)


class ProvisioningStrategy(Service, ABC):
    """Grant the entitlements of one invite type."""

    span_name = "provisioning"
    invite_type: ClassVar[InviteType]

    def __init__(self, directory: IdentityDirectory, settings: Settings) -> None:
        self.directory = directory
        self.settings = settings

    @abstractmethod
    async def execute(self, context: ProvisioningContext) -> ProvisioningResult:
        """Apply entitlements to the invited user.

        Unresolvable requested group or role ids are dropped. A missing group
        the type always requires raises ProvisioningError before any write.
        Directory failures propagate.
        """
        pass

    @staticmethod
    def _user_id(context: ProvisioningContext) -> UserId:
        if context.user.id is None:
            raise ValueError("Cannot provision a user without an id")
        return context.user.id

    async def _group_catalog(self) -> dict[str, DirectoryGroup]:
        return {group.id: group for group in await self.directory.list_groups()}


class StaffProvisioningStrategy(ProvisioningStrategy):
    """Add staff to their requested groups and assign requested realm roles."""

    invite_type = InviteType.STAFF

    async def execute(self, context: ProvisioningContext) -> ProvisioningResult:
        metadata = context.metadata
        if not isinstance(metadata, StaffMetadata):
            raise TypeError(f"Staff strategy got {metadata.kind} metadata")

        user_id = self._user_id(context)

        with self.span(
            "staff",
            user_id=user_id,
            organization_id=context.organization_id,
        ):
            catalog = await self._group_catalog()

            applied_groups: list[GroupRef] = []
            for ref in metadata.groups:
                group = catalog.get(ref.id)
                if group is None:
                    logfire.warn("Requested group not found", group_id=ref.id)
                    continue
                if any(applied.id == group.id for applied in applied_groups):
                    continue
                await self.directory.add_user_to_group(user_id, group.id)
                applied_groups.append(GroupRef(id=group.id, name=group.name))

            applied_roles: list[RoleRef] = []
            if metadata.roles:
                realm_roles = await self.directory.list_realm_roles()
                by_id = {role.id: role for role in realm_roles}
                by_name = {role.name: role for role in realm_roles}

                resolved = []
                for ref in metadata.roles:
                    role = by_id.get(ref.id) or by_name.get(ref.id)
                    if role is None and ref.name:
                        role = by_name.get(ref.name)
                    if role is None:
                        logfire.warn("Requested role not found", role_id=ref.id)
                        continue
                    if role in resolved:
                        continue
                    resolved.append(role)

                if resolved:
                    await self.directory.assign_realm_roles(user_id, resolved)
                applied_roles = [RoleRef(id=role.id, name=role.name) for role in resolved]

            logfire.info(
                "Staff provisioned",
                user_id=user_id,
                groups=[group.id for group in applied_groups],
                roles=[role.id for role in applied_roles],
            )
            return ProvisioningResult(
                applied_groups=applied_groups, applied_roles=applied_roles
            )


class PartnerProvisioningStrategy(ProvisioningStrategy):
    """Put partners in the business partners group and keep them out of admins.

    Requested groups are added on top, except admin groups. No roles.
    """

    invite_type = InviteType.PARTNER

    def _is_admin_group(self, group: DirectoryGroup) -> bool:
        admin_names = {name.lower() for name in self.settings.invitations.admin_group_names}
        return group.name.lower() in admin_names

    def _find_partner_group(
        self, catalog: dict[str, DirectoryGroup]
    ) -> DirectoryGroup | None:
        # Configured spellings are tried in order
        by_name = {group.name.lower(): group for group in catalog.values()}
        for name in self.settings.invitations.partner_group_names:
            group = by_name.get(name.lower())
            if group is not None:
                return group
        return None

    async def execute(self, context: ProvisioningContext) -> ProvisioningResult:
        metadata = context.metadata
        if not isinstance(metadata, PartnerMetadata):
            raise TypeError(f"Partner strategy got {metadata.kind} metadata")

        user_id = self._user_id(context)

        with self.span(
            "partner",
            user_id=user_id,
            organization_id=context.organization_id,
        ):
            catalog = await self._group_catalog()

            partner_group = self._find_partner_group(catalog)
            if partner_group is None:
                logfire.error(
                    "Business partners group not found, partner invites cannot be accepted",
                    accepted_names=self.settings.invitations.partner_group_names,
                )
                raise ProvisioningError("Business partners group is not configured")

            targets: dict[str, DirectoryGroup] = {partner_group.id: partner_group}

            for ref in metadata.groups or []:
                group = catalog.get(ref.id)
                if group is None:
                    logfire.warn("Requested group not found", group_id=ref.id)
                    continue
                if self._is_admin_group(group):
                    logfire.warn(
                        "Admin group dropped from partner invite", group_id=group.id
                    )
                    continue
                targets.setdefault(group.id, group)

            for group in targets.values():
                await self.directory.add_user_to_group(user_id, group.id)

            for group in await self.directory.list_user_groups(user_id):
                if self._is_admin_group(group):
                    await self.directory.remove_user_from_group(user_id, group.id)
                    logfire.info(
                        "Partner removed from admin group",
                        user_id=user_id,
                        group_id=group.id,
                    )

            applied_groups = [
                GroupRef(id=group.id, name=group.name) for group in targets.values()
            ]
            logfire.info(
                "Partner provisioned",
                user_id=user_id,
                groups=[group.id for group in applied_groups],
            )
            return ProvisioningResult(applied_groups=applied_groups)
