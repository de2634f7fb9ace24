"""Order corroboration against the external order authority."""

from ticket_provider.order.client import (
    OrderVerificationClient,
    OrderVerificationOutcome,
    OrderVerificationResult,
)

__all__ = [
    "OrderVerificationClient",
    "OrderVerificationOutcome",
    "OrderVerificationResult",
]
