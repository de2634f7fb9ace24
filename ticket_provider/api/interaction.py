"""Interaction submission endpoints.

POST /v1/interactions issues a signed interaction ticket. Failures are
reported only by coarse class (not_found, unauthorized, internal_error);
the internal reason is logged.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ticket_provider.api.models import (
    AttributeSetTypesResponse,
    ErrorResponse,
    SubmitInteractionRequest,
    SubmitInteractionResponse,
)
from ticket_provider.exceptions import OutcomeClass, TicketIssuanceError
from ticket_provider.interaction import InteractionOrchestrator, get_orchestrator

log = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/interactions", tags=["interactions"])


@router.post(
    "",
    operation_id="submitInteraction",
    response_model=SubmitInteractionResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Failed entitlement check"},
        404: {"model": ErrorResponse, "description": "No checker for attributeSetType"},
        500: {"model": ErrorResponse, "description": "Ticket could not be issued"},
    },
)
async def submit_interaction(
    body: SubmitInteractionRequest,
    orchestrator: InteractionOrchestrator = Depends(get_orchestrator),
):
    """Submit an interaction claim and receive a signed ticket.

    The claim is checked by the entitlement rule registered for its
    attributeSetType, then corroborated with the order authority, then
    issued as a W3C verifiable credential signed with the provider key.
    """
    try:
        result = await orchestrator.submit(body.to_claim())
    except TicketIssuanceError:
        # Rendered by the application's TicketIssuanceError handler
        raise
    except Exception as e:
        log.exception(f"Unexpected error issuing ticket: {type(e).__name__}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=OutcomeClass.INTERNAL_ERROR).model_dump(),
        )

    return SubmitInteractionResponse(
        attribute_set_type=result.attribute_set_type,
        ticket=result.ticket,
    )


@router.get("/types", response_model=AttributeSetTypesResponse)
async def list_attribute_set_types(
    orchestrator: InteractionOrchestrator = Depends(get_orchestrator),
):
    """List attribute-set-types this provider issues tickets for."""
    return AttributeSetTypesResponse(attribute_set_types=orchestrator.registry.types())
