"""Provisioning strategy registry provider."""

from dishka import Scope, provide

from access.domain.service import (
    PartnerProvisioningStrategy,
    ProvisioningStrategy,
    StaffProvisioningStrategy,
)
from access.domain.value import InviteType
from access.util.di.base import ProviderBase


class ProvisioningAggregatorProvider(ProviderBase):
    """Provider that aggregates the provisioning strategies into a registry."""

    scope = Scope.REQUEST

    @provide(scope=Scope.REQUEST)
    def get_strategies(
        self,
        staff_strategy: StaffProvisioningStrategy,
        partner_strategy: PartnerProvisioningStrategy,
    ) -> dict[InviteType, ProvisioningStrategy]:
        """Provide the strategy for each invite type.

        Args:
            staff_strategy: Staff provisioning strategy
            partner_strategy: Partner provisioning strategy

        Returns:
            Dictionary mapping InviteType to its strategy
        """
        strategies: dict[InviteType, ProvisioningStrategy] = {
            staff_strategy.invite_type: staff_strategy,
            partner_strategy.invite_type: partner_strategy,
        }

        missing = set(InviteType) - set(strategies)
        if missing:
            raise ValueError(f"No provisioning strategy for {sorted(missing)}")
        return strategies
