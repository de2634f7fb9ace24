"""ONDC proof-of-purchase entitlement rules.

Registered for the DSNP mainnet (provider namespace 1) and testnet
(namespace 13972) deployments. They differ only in the credential schema
they attach.
"""

import logging

from ticket_provider.entitlement.registry import (
    EntitlementCheckerRegistry,
    EntitlementRule,
)
from ticket_provider.models import EntitlementVerdict, InteractionClaim

log = logging.getLogger(__name__)

ONDC_PROOF_OF_PURCHASE = "OndcProofOfPurchase"

MAINNET_PROOF_OF_PURCHASE = f"dsnp://1#{ONDC_PROOF_OF_PURCHASE}"
TESTNET_PROOF_OF_PURCHASE = f"dsnp://13972#{ONDC_PROOF_OF_PURCHASE}"

MAINNET_SCHEMA_URL = "https://ondc.org/schema/interactions/ProofOfPurchase.json"
TESTNET_SCHEMA_URL = "https://ondc.org/schema/interactions/testnet/ProofOfPurchase.json"


class OndcProofOfPurchaseRule(EntitlementRule):
    """Entitles claims that carry order details in their reference.

    Only checks that reference.orderDetails is present and non-empty.
    Business validation of the order belongs in a subclass overriding
    evaluate(); corroboration with the order authority happens later.
    """

    name = "ondc-proof-of-purchase"

    def __init__(self, schema_url: str):
        self.schema_url = schema_url

    async def evaluate(self, claim: InteractionClaim) -> EntitlementVerdict:
        if not claim.reference.get("orderDetails"):
            log.debug(f"No orderDetails in reference for interaction {claim.interaction_id}")
            return EntitlementVerdict.deny()
        return EntitlementVerdict.grant(schema_url=self.schema_url, href=claim.href)

    def __repr__(self) -> str:
        return f"OndcProofOfPurchaseRule(schema_url={self.schema_url!r})"


def build_default_registry() -> EntitlementCheckerRegistry:
    """Registry with the ONDC mainnet and testnet proof-of-purchase rules."""
    return (
        EntitlementCheckerRegistry.builder()
        .register(MAINNET_PROOF_OF_PURCHASE, OndcProofOfPurchaseRule(MAINNET_SCHEMA_URL))
        .register(TESTNET_PROOF_OF_PURCHASE, OndcProofOfPurchaseRule(TESTNET_SCHEMA_URL))
        .freeze()
    )
