"""API models for the ticket provider.

Pydantic models for API requests and responses. JSON field names follow
the DSNP interaction API (camelCase).
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ticket_provider.models import InteractionClaim


# =============================================================================
# Request Models
# =============================================================================


class SubmitInteractionRequest(BaseModel):
    """Interaction claim submitted by a client."""

    model_config = ConfigDict(populate_by_name=True)

    attribute_set_type: str = Field(
        ...,
        alias="attributeSetType",
        description='Namespaced identifier, e.g. "dsnp://1#OndcProofOfPurchase"',
    )
    interaction_id: str = Field(..., alias="interactionId", description="Client interaction id")
    href: str = Field(..., description="URI of the canonical evidence")
    reference: dict[str, Any] = Field(
        default_factory=dict,
        description="Protocol data; ONDC claims carry orderDetails as a JSON string",
    )

    def to_claim(self) -> InteractionClaim:
        return InteractionClaim(
            attribute_set_type=self.attribute_set_type,
            interaction_id=self.interaction_id,
            href=self.href,
            reference=self.reference,
        )


# =============================================================================
# Response Models
# =============================================================================


class SubmitInteractionResponse(BaseModel):
    """Signed interaction ticket."""

    model_config = ConfigDict(populate_by_name=True)

    attribute_set_type: str = Field(..., alias="attributeSetType")
    ticket: dict[str, Any] = Field(..., description="Signed verifiable credential")


class AttributeSetTypesResponse(BaseModel):
    """Attribute-set-types with a registered entitlement checker."""

    model_config = ConfigDict(populate_by_name=True)

    attribute_set_types: list[str] = Field(..., alias="attributeSetTypes")


class VerificationMethodResponse(BaseModel):
    """Public key backing proof.verificationMethod on issued tickets."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str = "Ed25519VerificationKey2020"
    controller: str
    public_key_multibase: str = Field(..., alias="publicKeyMultibase")


class ErrorResponse(BaseModel):
    """Error response. Only the coarse outcome class is reported."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    ok: bool
    service: str = "ticket-provider"
    checkers_loaded: int = 0
