"""Entitlement rules and their registry."""

from ticket_provider.entitlement.ondc import (
    OndcProofOfPurchaseRule,
    build_default_registry,
)
from ticket_provider.entitlement.registry import (
    EntitlementCheckerRegistry,
    EntitlementRule,
    RegistryBuilder,
)

__all__ = [
    "EntitlementCheckerRegistry",
    "EntitlementRule",
    "RegistryBuilder",
    "OndcProofOfPurchaseRule",
    "build_default_registry",
]
