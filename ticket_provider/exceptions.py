"""Ticket issuance exceptions.

Every failure terminal of the issuance pipeline has one exception type.
Each carries an internal error code (logged) and the HTTP status class it
maps to. Callers only ever see the coarse outcome class, never the message.
"""


class ErrorCode:
    """Internal error codes, logged but never returned to callers."""

    NO_SUCH_CHECKER = "NO_SUCH_CHECKER"
    NOT_ENTITLED = "NOT_ENTITLED"
    MALFORMED_CLAIM = "MALFORMED_CLAIM"
    ORDER_REJECTED = "ORDER_REJECTED"
    SIGNING_FAILED = "SIGNING_FAILED"


class OutcomeClass:
    """Externally observable outcome classes."""

    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INTERNAL_ERROR = "internal_error"


class TicketIssuanceError(Exception):
    """Base exception for ticket issuance failures.

    Attributes:
        code: Internal error code (ErrorCode constant).
        message: Internal detail for logs.
        status_code: HTTP status the outcome maps to.
        outcome: Coarse outcome class reported to the caller.
    """

    status_code: int = 500
    outcome: str = OutcomeClass.INTERNAL_ERROR

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class NoSuchCheckerError(TicketIssuanceError):
    """No entitlement rule is registered for the attribute-set-type."""

    status_code = 404
    outcome = OutcomeClass.NOT_FOUND

    def __init__(self, attribute_set_type: str):
        self.attribute_set_type = attribute_set_type
        super().__init__(
            ErrorCode.NO_SUCH_CHECKER,
            f"No entitlement checker for attributeSetType: {attribute_set_type}",
        )


class NotEntitledError(TicketIssuanceError):
    """The entitlement rule ran and denied the claim."""

    status_code = 401
    outcome = OutcomeClass.UNAUTHORIZED

    def __init__(self, attribute_set_type: str):
        self.attribute_set_type = attribute_set_type
        super().__init__(
            ErrorCode.NOT_ENTITLED,
            f"Failed entitlement check for attributeSetType: {attribute_set_type}",
        )


class MalformedClaimError(TicketIssuanceError):
    """The claim's embedded order data is missing or unparseable."""

    def __init__(self, reason: str):
        super().__init__(ErrorCode.MALFORMED_CLAIM, f"Malformed claim: {reason}")

    @classmethod
    def missing_order_details(cls) -> "MalformedClaimError":
        """Factory for absent orderDetails."""
        return cls("no order details found")

    @classmethod
    def invalid_order_details(cls, reason: str) -> "MalformedClaimError":
        """Factory for orderDetails that are not a JSON document."""
        return cls(f"orderDetails is not valid JSON: {reason}")


class OrderRejectedError(TicketIssuanceError):
    """The order-verification authority rejected or did not answer."""

    def __init__(self, detail: str):
        super().__init__(ErrorCode.ORDER_REJECTED, f"Invalid order: {detail}")


class SigningError(TicketIssuanceError):
    """Signing the credential failed. No partial document is produced."""

    def __init__(self, reason: str):
        super().__init__(ErrorCode.SIGNING_FAILED, f"Signing failed: {reason}")


class KeyMaterialError(Exception):
    """Signing key material is malformed. Fatal at startup."""

    pass
