"""Order-verification client.

Corroborates a claimed purchase with the Beckn gateway client layer by
POSTing the order details to its /status endpoint. One attempt per
interaction, bounded by a timeout. Anything other than HTTP 200/201 is
a rejection, including every transport failure.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

log = logging.getLogger(__name__)

# Status codes the order authority uses to confirm an order
ACCEPTED_STATUS_CODES = frozenset({200, 201})


class OrderVerificationResult(Enum):
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class OrderVerificationOutcome:
    """Result of a corroboration call.

    Attributes:
        result: VERIFIED or REJECTED.
        status_code: HTTP status when a response arrived.
        reason: Diagnostic detail for logs.
    """

    result: OrderVerificationResult
    status_code: Optional[int] = None
    reason: str = ""

    @property
    def verified(self) -> bool:
        return self.result is OrderVerificationResult.VERIFIED


class OrderVerificationClient:
    """Single-shot client for the order-status endpoint."""

    def __init__(self, status_url: str, timeout: float = 10.0):
        """Initialize the client.

        Args:
            status_url: Full URL of the order-status endpoint.
            timeout: Overall per-request timeout in seconds.
        """
        self.status_url = status_url
        self.timeout = timeout

    async def verify(self, order_details: Any) -> OrderVerificationOutcome:
        """POST already-parsed order details to the status endpoint.

        Never raises for network or HTTP problems or an unencodable body;
        they become REJECTED.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.status_url, json=order_details)
        except httpx.TimeoutException:
            log.warning(f"Order status timeout after {self.timeout}s: {self.status_url}")
            return OrderVerificationOutcome(
                result=OrderVerificationResult.REJECTED,
                reason="timeout",
            )
        except httpx.HTTPError as e:
            log.warning(f"Order status request failed: {type(e).__name__}: {e}")
            return OrderVerificationOutcome(
                result=OrderVerificationResult.REJECTED,
                reason=f"transport error: {type(e).__name__}",
            )
        except (TypeError, ValueError) as e:
            # Body not encodable as strict JSON; nothing was sent
            log.warning(f"Order details not encodable: {type(e).__name__}: {e}")
            return OrderVerificationOutcome(
                result=OrderVerificationResult.REJECTED,
                reason="unencodable order details",
            )

        if response.status_code in ACCEPTED_STATUS_CODES:
            log.debug(f"Order status verified: HTTP {response.status_code}")
            return OrderVerificationOutcome(
                result=OrderVerificationResult.VERIFIED,
                status_code=response.status_code,
            )

        log.info(f"Order status rejected: HTTP {response.status_code}")
        return OrderVerificationOutcome(
            result=OrderVerificationResult.REJECTED,
            status_code=response.status_code,
            reason=f"HTTP {response.status_code}",
        )
