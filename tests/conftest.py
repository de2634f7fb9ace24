"""Pytest fixtures for ticket provider tests."""
import json
import os
from typing import Any, AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport

from ticket_provider.credential.signer import CredentialSigner, SigningKeyMaterial
from ticket_provider.entitlement.ondc import build_default_registry
from ticket_provider.interaction import (
    InteractionOrchestrator,
    install_orchestrator,
    reset_orchestrator,
)
from ticket_provider.models import InteractionClaim
from ticket_provider.order.client import (
    ACCEPTED_STATUS_CODES,
    OrderVerificationOutcome,
    OrderVerificationResult,
)


# =============================================================================
# Test provider configuration
# =============================================================================

TEST_PROVIDER_ID = "13972"
TEST_KEY_URI = "//Alice"
TEST_KEY_ID = "1"
TEST_ISSUER = f"dsnp://{TEST_PROVIDER_ID}"
TEST_VERIFICATION_METHOD = f"{TEST_ISSUER}#{TEST_KEY_ID}"

MAINNET_TYPE = "dsnp://1#OndcProofOfPurchase"
TESTNET_TYPE = "dsnp://13972#OndcProofOfPurchase"

PROVIDER_ENV = {
    "PROVIDER_ID": TEST_PROVIDER_ID,
    "PROVIDER_CREDENTIAL_SIGNING_KEY_URI": TEST_KEY_URI,
    "PROVIDER_CREDENTIAL_SIGNING_KEY_ID": TEST_KEY_ID,
}


class FakeOrderClient:
    """Order client answering with a fixed HTTP status and recording calls."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.calls: list[Any] = []

    async def verify(self, order_details: Any) -> OrderVerificationOutcome:
        self.calls.append(order_details)
        if self.status_code in ACCEPTED_STATUS_CODES:
            return OrderVerificationOutcome(
                result=OrderVerificationResult.VERIFIED,
                status_code=self.status_code,
            )
        return OrderVerificationOutcome(
            result=OrderVerificationResult.REJECTED,
            status_code=self.status_code,
            reason=f"HTTP {self.status_code}",
        )


def make_claim(
    attribute_set_type: str = MAINNET_TYPE,
    interaction_id: str = "interaction-123",
    href: str = "https://store.example.com/orders/1",
    reference: dict | None = None,
) -> InteractionClaim:
    """Build a claim; reference defaults to a valid ONDC order."""
    if reference is None:
        reference = {"orderDetails": json.dumps({"order": 1})}
    return InteractionClaim(
        attribute_set_type=attribute_set_type,
        interaction_id=interaction_id,
        href=href,
        reference=reference,
    )


# =============================================================================
# Component fixtures
# =============================================================================

@pytest.fixture(scope="session")
def signer() -> CredentialSigner:
    """Signer for the test provider key."""
    return CredentialSigner(SigningKeyMaterial(key_uri=TEST_KEY_URI, key_id=TEST_KEY_ID))


@pytest.fixture
def order_client() -> FakeOrderClient:
    """Order client that verifies every order."""
    return FakeOrderClient(status_code=200)


@pytest.fixture
def orchestrator(signer: CredentialSigner, order_client: FakeOrderClient) -> InteractionOrchestrator:
    """Orchestrator with the default registry and a fake order client."""
    return InteractionOrchestrator(
        registry=build_default_registry(),
        order_client=order_client,
        signer=signer,
        provider_id=TEST_PROVIDER_ID,
    )


@pytest.fixture
def provider_env():
    """Set PROVIDER_* env vars for the duration of a test."""
    original = {name: os.environ.get(name) for name in PROVIDER_ENV}
    os.environ.update(PROVIDER_ENV)
    yield PROVIDER_ENV
    for name, value in original.items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value


@pytest.fixture
async def client(
    orchestrator: InteractionOrchestrator,
) -> AsyncGenerator[AsyncClient, None]:
    """Test client for API testing.

    ASGITransport does not run the lifespan, so the orchestrator fixture is
    installed directly in place of the one startup would build.
    """
    from ticket_provider.main import app

    reset_orchestrator()
    install_orchestrator(orchestrator)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as async_client:
        yield async_client

    reset_orchestrator()
