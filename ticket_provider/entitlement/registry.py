"""Entitlement checker registry.

Maps an attribute-set-type (e.g. "dsnp://1#OndcProofOfPurchase") to the
rule that decides whether a claim of that type may receive a ticket.

The registry is assembled once at startup through a builder and frozen
before any request is served. Lookups on the frozen registry are exact
string matches with no fallback rule.
"""

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Iterator, Mapping

from ticket_provider.exceptions import NoSuchCheckerError
from ticket_provider.models import EntitlementVerdict, InteractionClaim

log = logging.getLogger(__name__)


class EntitlementRule(ABC):
    """Strategy deciding whether a claim's evidence earns a ticket."""

    #: Short name used in logs
    name: str = "rule"

    @abstractmethod
    async def evaluate(self, claim: InteractionClaim) -> EntitlementVerdict:
        """Evaluate a claim.

        Must return the same verdict for the same claim unless the rule
        makes its own external calls.
        """


class EntitlementCheckerRegistry:
    """Read-only mapping of attribute-set-type to EntitlementRule.

    Build one with EntitlementCheckerRegistry.builder():

        >>> registry = (
        ...     EntitlementCheckerRegistry.builder()
        ...     .register("dsnp://1#OndcProofOfPurchase", rule)
        ...     .freeze()
        ... )
    """

    def __init__(self, rules: Mapping[str, EntitlementRule]):
        self._rules = MappingProxyType(dict(rules))

    @classmethod
    def builder(cls) -> "RegistryBuilder":
        return RegistryBuilder()

    def lookup(self, attribute_set_type: str) -> EntitlementRule:
        """Return the rule registered for attribute_set_type.

        Raises:
            NoSuchCheckerError: If nothing is registered under exactly this key.
        """
        rule = self._rules.get(attribute_set_type)
        if rule is None:
            raise NoSuchCheckerError(attribute_set_type)
        return rule

    def types(self) -> list[str]:
        """Registered attribute-set-types, sorted."""
        return sorted(self._rules)

    def __contains__(self, attribute_set_type: object) -> bool:
        return attribute_set_type in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)


class RegistryBuilder:
    """Collects registrations before the registry is frozen."""

    def __init__(self):
        self._rules: dict[str, EntitlementRule] = {}

    def register(self, attribute_set_type: str, rule: EntitlementRule) -> "RegistryBuilder":
        """Register a rule for one attribute-set-type.

        Raises:
            ValueError: If the type is empty or already registered.
        """
        if not attribute_set_type:
            raise ValueError("attribute_set_type must not be empty")
        if attribute_set_type in self._rules:
            raise ValueError(f"Entitlement checker already registered: {attribute_set_type}")
        self._rules[attribute_set_type] = rule
        log.debug(f"Registered entitlement checker {rule.name} for {attribute_set_type}")
        return self

    def freeze(self) -> EntitlementCheckerRegistry:
        return EntitlementCheckerRegistry(self._rules)
