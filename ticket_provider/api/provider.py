"""Provider key endpoint.

Lets a consumer resolve proof.verificationMethod on an issued ticket back
to the provider's Ed25519 public key.
"""
from fastapi import APIRouter, Depends

from ticket_provider.api.models import VerificationMethodResponse
from ticket_provider.interaction import InteractionOrchestrator, get_orchestrator

router = APIRouter(prefix="/v1/provider", tags=["provider"])


@router.get("/keys", response_model=VerificationMethodResponse)
async def get_signing_key(
    orchestrator: InteractionOrchestrator = Depends(get_orchestrator),
) -> VerificationMethodResponse:
    verification_method = orchestrator.verification_method
    return VerificationMethodResponse(
        id=verification_method,
        controller=verification_method.split("#", 1)[0],
        public_key_multibase=orchestrator.signer.public_key_multibase,
    )
