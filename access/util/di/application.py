"""Application layer DI providers."""

from dishka import Scope, provide

from access.application.service import AccessInviteService
from access.application.usecase.invite import (
    AcceptInviteUseCase,
    CreateInviteUseCase,
    ListInvitesUseCase,
)
from access.config import Settings
from access.domain.repository import ChannelTypeClient, IdentityDirectory
from access.domain.service import (
    InviteAttributeCodec,
    InviteTokenCodec,
    InviteValidationService,
    ProvisioningStrategy,
)
from access.domain.value import InviteType
from access.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_create_invite_use_case(
        self,
        validation_service: InviteValidationService,
        token_codec: InviteTokenCodec,
        attribute_codec: InviteAttributeCodec,
        directory: IdentityDirectory,
        channel_type_client: ChannelTypeClient,
        settings: Settings,
    ) -> CreateInviteUseCase:
        """Provide create invite use case."""
        return CreateInviteUseCase(
            validation_service=validation_service,
            token_codec=token_codec,
            attribute_codec=attribute_codec,
            directory=directory,
            channel_type_client=channel_type_client,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_accept_invite_use_case(
        self,
        token_codec: InviteTokenCodec,
        attribute_codec: InviteAttributeCodec,
        directory: IdentityDirectory,
        strategies: dict[InviteType, ProvisioningStrategy],
    ) -> AcceptInviteUseCase:
        """Provide accept invite use case."""
        return AcceptInviteUseCase(
            token_codec=token_codec,
            attribute_codec=attribute_codec,
            directory=directory,
            strategies=strategies,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_invites_use_case(
        self,
        directory: IdentityDirectory,
        attribute_codec: InviteAttributeCodec,
        settings: Settings,
    ) -> ListInvitesUseCase:
        """Provide list invites use case."""
        return ListInvitesUseCase(
            directory=directory, attribute_codec=attribute_codec, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_access_invite_service(
        self,
        create_invite_use_case: CreateInviteUseCase,
        list_invites_use_case: ListInvitesUseCase,
        accept_invite_use_case: AcceptInviteUseCase,
    ) -> AccessInviteService:
        """Provide access invite facade."""
        return AccessInviteService(
            create_invite_use_case=create_invite_use_case,
            list_invites_use_case=list_invites_use_case,
            accept_invite_use_case=accept_invite_use_case,
        )
