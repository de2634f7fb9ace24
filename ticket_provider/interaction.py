"""Interaction ticket issuance pipeline.

Runs one claim through:

    Received -> Dispatched -> Evaluated -> Corroborated -> Built -> Signed

Each failure terminal raises its TicketIssuanceError subclass:

- NoSuchCheckerError: no rule for the attribute-set-type (not found)
- NotEntitledError: the rule denied the claim (unauthorized)
- MalformedClaimError: orderDetails missing or not JSON (internal error)
- OrderRejectedError: the order authority did not confirm (internal error)
- SigningError: signing failed (internal error)

The pipeline holds no per-request state; registry, order client and signer
are shared read-only across concurrent requests.
"""

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from ticket_provider.config import DSNP_URI_SCHEME, ProviderConfig
from ticket_provider.credential.builder import (
    build_unsigned_credential,
    extract_ticket_type,
)
from ticket_provider.credential.signer import (
    CredentialSigner,
    SigningKeyMaterial,
    verification_method_id,
)
from ticket_provider.entitlement.ondc import build_default_registry
from ticket_provider.entitlement.registry import EntitlementCheckerRegistry
from ticket_provider.exceptions import (
    MalformedClaimError,
    NotEntitledError,
    OrderRejectedError,
)
from ticket_provider.models import InteractionClaim, InteractionTicket
from ticket_provider.order.client import (
    OrderVerificationClient,
    OrderVerificationOutcome,
)

log = logging.getLogger(__name__)


def _is_empty(value: Any) -> bool:
    # Objects and arrays always count as order details, even when empty
    if isinstance(value, (dict, list)):
        return False
    return not value


def _reject_constant(name: str) -> Any:
    raise MalformedClaimError.invalid_order_details(f"non-standard constant {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise MalformedClaimError.invalid_order_details(f"number out of range: {text}")
    return value


class OrderVerifier(Protocol):
    async def verify(self, order_details: Any) -> OrderVerificationOutcome: ...


def parse_order_details(reference) -> Any:
    """Parse reference.orderDetails as JSON.

    Raises:
        MalformedClaimError: If orderDetails is absent, not a string,
            not strict JSON (NaN, Infinity and overflowing numbers are
            refused), or decodes to an empty value.
    """
    raw = reference.get("orderDetails")
    if raw is None:
        raise MalformedClaimError.missing_order_details()
    if not isinstance(raw, str):
        raise MalformedClaimError.invalid_order_details(
            f"expected a JSON string, got {type(raw).__name__}"
        )

    try:
        order_details = json.loads(
            raw, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except json.JSONDecodeError as e:
        raise MalformedClaimError.invalid_order_details(e.msg)
    except ValueError as e:
        # e.g. integers beyond the interpreter's digit limit
        raise MalformedClaimError.invalid_order_details(str(e))

    if _is_empty(order_details):
        raise MalformedClaimError.missing_order_details()
    return order_details


class InteractionOrchestrator:
    """Composes registry, order verification, credential building and signing."""

    def __init__(
        self,
        registry: EntitlementCheckerRegistry,
        order_client: OrderVerifier,
        signer: CredentialSigner,
        provider_id: str,
    ):
        self.registry = registry
        self.order_client = order_client
        self.signer = signer
        self.provider_id = provider_id
        self.verification_method = verification_method_id(
            f"{DSNP_URI_SCHEME}{provider_id}", signer.key_id
        )

    async def submit(
        self,
        claim: InteractionClaim,
        now: Optional[datetime] = None,
    ) -> InteractionTicket:
        """Issue a signed ticket for a claim.

        Args:
            claim: The interaction claim.
            now: Issuance time override (tests). Defaults to current UTC time.

        Returns:
            InteractionTicket with the signed credential.

        Raises:
            TicketIssuanceError: One subclass per failure terminal.
        """
        attribute_set_type = claim.attribute_set_type

        # Received -> Dispatched
        rule = self.registry.lookup(attribute_set_type)

        # Dispatched -> Evaluated
        verdict = await rule.evaluate(claim)
        if not verdict.entitled:
            raise NotEntitledError(attribute_set_type)

        # Evaluated -> Corroborated
        order_details = parse_order_details(claim.reference)
        outcome = await self.order_client.verify(order_details)
        if not outcome.verified:
            raise OrderRejectedError(outcome.reason or outcome.result.value)

        # Corroborated -> Built
        issued_at = now or datetime.now(timezone.utc)
        unsigned = build_unsigned_credential(
            verdict=verdict,
            claim=claim,
            ticket_type=extract_ticket_type(attribute_set_type),
            provider_id=self.provider_id,
            now=issued_at,
        )

        # Built -> Signed
        signed = self.signer.sign(unsigned, self.verification_method, now=issued_at)

        log.info(
            f"Issued {signed['type'][0]} ticket for interaction {claim.interaction_id}",
            extra={"attribute_set_type": attribute_set_type},
        )
        return InteractionTicket(attribute_set_type=attribute_set_type, ticket=signed)


def create_orchestrator(config: ProviderConfig) -> InteractionOrchestrator:
    """Wire the default pipeline from provider configuration.

    Raises:
        KeyMaterialError: If the signing key cannot be derived.
    """
    signer = CredentialSigner(
        SigningKeyMaterial(key_uri=config.signing_key_uri, key_id=config.signing_key_id)
    )
    return InteractionOrchestrator(
        registry=build_default_registry(),
        order_client=OrderVerificationClient(
            config.order_status_url, timeout=config.order_status_timeout
        ),
        signer=signer,
        provider_id=config.provider_id,
    )


# Module-level singleton
_orchestrator: Optional[InteractionOrchestrator] = None


def install_orchestrator(orchestrator: InteractionOrchestrator) -> None:
    """Install the process-wide orchestrator (startup)."""
    global _orchestrator
    _orchestrator = orchestrator


def get_orchestrator() -> InteractionOrchestrator:
    """Return the installed orchestrator.

    Raises:
        RuntimeError: If called before startup installed one.
    """
    if _orchestrator is None:
        raise RuntimeError("Interaction orchestrator not initialized")
    return _orchestrator


def reset_orchestrator() -> None:
    """Reset the singleton (for testing)."""
    global _orchestrator
    _orchestrator = None
