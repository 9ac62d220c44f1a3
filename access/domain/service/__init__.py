"""Domain services."""

from .attribute_codec import InviteAttributeCodec
from .base import Service
from .provisioning_service import (
    PartnerProvisioningStrategy,
    ProvisioningContext,
    ProvisioningResult,
    ProvisioningStrategy,
    StaffProvisioningStrategy,
)
from .token_codec import GeneratedToken, InviteTokenCodec, ParsedToken
from .validation_service import InviteValidationService

__all__ = [
    "GeneratedToken",
    "InviteAttributeCodec",
    "InviteTokenCodec",
    "InviteValidationService",
    "ParsedToken",
    "PartnerProvisioningStrategy",
    "ProvisioningContext",
    "ProvisioningResult",
    "ProvisioningStrategy",
    "Service",
    "StaffProvisioningStrategy",
]
