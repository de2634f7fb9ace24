"""Core data model for interaction ticket issuance."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class InteractionClaim:
    """A client's claim that an interaction took place.

    Attributes:
        attribute_set_type: Namespaced identifier "<namespace>#<ticketType>".
        interaction_id: Opaque client-supplied identifier.
        href: URI pointing at the canonical evidence.
        reference: Protocol-specific data; must contain orderDetails
            (a JSON-encoded string) for ONDC claims.
    """

    attribute_set_type: str
    interaction_id: str
    href: str
    reference: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only view so the claim cannot change once received
        object.__setattr__(self, "reference", MappingProxyType(dict(self.reference)))


@dataclass(frozen=True)
class EntitlementVerdict:
    """Result of an entitlement rule.

    A denied verdict only carries entitled=False.
    """

    entitled: bool
    schema_url: Optional[str] = None
    href: Optional[str] = None

    @classmethod
    def grant(cls, schema_url: str, href: str) -> "EntitlementVerdict":
        return cls(entitled=True, schema_url=schema_url, href=href)

    @classmethod
    def deny(cls) -> "EntitlementVerdict":
        return cls(entitled=False)


@dataclass(frozen=True)
class InteractionTicket:
    """Successful issuance: the signed credential and the type it was issued for."""

    attribute_set_type: str
    ticket: dict
