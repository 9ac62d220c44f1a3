"""Domain layer DI providers."""

from dishka import Scope, provide

from access.config import Settings
from access.domain.repository import IdentityDirectory
from access.domain.service import (
    InviteAttributeCodec,
    InviteTokenCodec,
    InviteValidationService,
    PartnerProvisioningStrategy,
    StaffProvisioningStrategy,
)
from access.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped; the directory client they share is
    APP-scoped so its admin token cache outlives a request.
    """

    scope = Scope.REQUEST

    @provide
    def get_token_codec(self) -> InviteTokenCodec:
        """Provide invitation token codec."""
        return InviteTokenCodec()

    @provide
    def get_attribute_codec(self) -> InviteAttributeCodec:
        """Provide invitation attribute codec."""
        return InviteAttributeCodec()

    @provide
    def get_validation_service(
        self,
        directory: IdentityDirectory,
        attribute_codec: InviteAttributeCodec,
        settings: Settings,
    ) -> InviteValidationService:
        """Provide invitation validation service."""
        return InviteValidationService(
            directory=directory, attribute_codec=attribute_codec, settings=settings
        )

    @provide
    def get_staff_strategy(
        self, directory: IdentityDirectory, settings: Settings
    ) -> StaffProvisioningStrategy:
        """Provide staff provisioning strategy."""
        return StaffProvisioningStrategy(directory=directory, settings=settings)

    @provide
    def get_partner_strategy(
        self, directory: IdentityDirectory, settings: Settings
    ) -> PartnerProvisioningStrategy:
        """Provide partner provisioning strategy."""
        return PartnerProvisioningStrategy(directory=directory, settings=settings)
