"""Unsigned interaction-ticket construction.

Builds the W3C VC (data model v1) document for an entitled, corroborated
claim. Pure: no I/O and no error paths.
"""

from datetime import datetime, timezone
from typing import Optional

from ticket_provider.config import CREDENTIALS_CONTEXT_V1, DSNP_URI_SCHEME
from ticket_provider.models import EntitlementVerdict, InteractionClaim

VERIFIABLE_CREDENTIAL_TYPE = "VerifiableCredential"
CREDENTIAL_SCHEMA_TYPE = "VerifiableCredentialSchema2023"


def extract_ticket_type(attribute_set_type: str) -> str:
    """Return the ticket type named by an attribute-set-type.

    The ticket type is everything after the first "#". Without a "#" the
    whole identifier is the ticket type.

    Examples:
        >>> extract_ticket_type("dsnp://1#OndcProofOfPurchase")
        'OndcProofOfPurchase'
        >>> extract_ticket_type("OndcProofOfPurchase")
        'OndcProofOfPurchase'
    """
    _, sep, suffix = attribute_set_type.partition("#")
    return suffix if sep else attribute_set_type


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_unsigned_credential(
    verdict: EntitlementVerdict,
    claim: InteractionClaim,
    ticket_type: str,
    provider_id: str,
    now: Optional[datetime] = None,
) -> dict:
    """Build the unsigned ticket for an entitled claim.

    Args:
        verdict: Granting verdict; supplies schema_url and href.
        claim: The submitted claim; supplies interactionId.
        ticket_type: Domain ticket type (see extract_ticket_type).
        provider_id: Provider DSNP id, without the dsnp:// scheme.
        now: Issuance time. Defaults to the current UTC time.

    Returns:
        Unsigned credential as a JSON-compatible dict.
    """
    issuer = f"{DSNP_URI_SCHEME}{provider_id}"
    issued_at = now or datetime.now(timezone.utc)

    return {
        "@context": [
            CREDENTIALS_CONTEXT_V1,
            {"@vocab": f"{issuer}#"},
        ],
        "type": [ticket_type, VERIFIABLE_CREDENTIAL_TYPE],
        "issuer": issuer,
        "issuanceDate": format_timestamp(issued_at),
        "credentialSchema": {
            "type": CREDENTIAL_SCHEMA_TYPE,
            "id": verdict.schema_url,
        },
        "credentialSubject": {
            "interactionId": claim.interaction_id,
            "href": verdict.href,
        },
    }
