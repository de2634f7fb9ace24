"""Ticket provider configuration constants.

Environment-based configuration following a three-tier pattern:
- NORMATIVE: Fixed by the DSNP / W3C VC data model
- CONFIGURABLE: Defaults that can be overridden per deployment
- OPERATIONAL: Deployment-specific settings (env vars)

Provider identity and signing key material are required and have no
defaults. They are read once at startup by load_provider_config() and
passed explicitly to the components that need them.
"""
import os
from dataclasses import dataclass, field


# =============================================================================
# NORMATIVE CONSTANTS
# =============================================================================

# URI scheme prefixed to the provider id for issuer and @vocab
DSNP_URI_SCHEME: str = "dsnp://"

# W3C VC data model v1 base context
CREDENTIALS_CONTEXT_V1: str = "https://www.w3.org/2018/credentials/v1"

# Signing algorithm for interaction tickets (only Ed25519 is supported)
SIGNING_ALGORITHM: str = "ed25519"


# =============================================================================
# CONFIGURABLE DEFAULTS
# =============================================================================

# Beckn gateway client layer used to corroborate ONDC orders
DEFAULT_ORDER_STATUS_URL: str = "https://bap-gcl-staging.becknprotocol.io/status"

# Bounded wait for the corroboration call; a timeout counts as a rejection
DEFAULT_ORDER_STATUS_TIMEOUT: float = 10.0


# =============================================================================
# OPERATIONAL SETTINGS
# =============================================================================

# Read at call time: TICKET_LOG_LEVEL and TICKET_LOG_FILE by
# configure_logging(), TICKET_SERVICE_PORT by load_service_port()
DEFAULT_SERVICE_PORT: int = 8002


# =============================================================================
# PROVIDER IDENTITY
# =============================================================================

PROVIDER_ENV_VARS: tuple[str, ...] = (
    "PROVIDER_ID",
    "PROVIDER_CREDENTIAL_SIGNING_KEY_URI",
    "PROVIDER_CREDENTIAL_SIGNING_KEY_ID",
)


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class ProviderConfig:
    """Process-wide provider settings, immutable for the process lifetime.

    Attributes:
        provider_id: DSNP id of this provider (without the dsnp:// scheme).
        signing_key_uri: Secret URI the Ed25519 signing key is derived from.
        signing_key_id: Key identifier used as the verification method fragment.
        order_status_url: Order-verification endpoint.
        order_status_timeout: Per-request timeout for order verification (seconds).
    """

    provider_id: str
    signing_key_uri: str = field(repr=False)
    signing_key_id: str
    order_status_url: str = DEFAULT_ORDER_STATUS_URL
    order_status_timeout: float = DEFAULT_ORDER_STATUS_TIMEOUT

    @property
    def issuer(self) -> str:
        """Provider identity as a DSNP URI (credential issuer)."""
        return f"{DSNP_URI_SCHEME}{self.provider_id}"


def load_provider_config() -> ProviderConfig:
    """Load provider configuration from the environment.

    Reads the environment at call time so tests can set variables
    before startup.

    Returns:
        ProviderConfig populated from PROVIDER_* and TICKET_* variables.

    Raises:
        ConfigurationError: If any required variable is missing or empty,
            or the timeout is not a positive finite number.
    """
    missing = [name for name in PROVIDER_ENV_VARS if not os.getenv(name, "").strip()]
    if missing:
        raise ConfigurationError(
            f"Missing required provider configuration: {', '.join(missing)}"
        )

    raw_timeout = os.getenv("TICKET_ORDER_STATUS_TIMEOUT", str(DEFAULT_ORDER_STATUS_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(
            f"TICKET_ORDER_STATUS_TIMEOUT must be a number, got: {raw_timeout}"
        )
    if not 0 < timeout < float("inf"):
        raise ConfigurationError(
            "TICKET_ORDER_STATUS_TIMEOUT must be a positive finite number"
        )

    return ProviderConfig(
        provider_id=os.environ["PROVIDER_ID"].strip(),
        signing_key_uri=os.environ["PROVIDER_CREDENTIAL_SIGNING_KEY_URI"],
        signing_key_id=os.environ["PROVIDER_CREDENTIAL_SIGNING_KEY_ID"].strip(),
        order_status_url=os.getenv("TICKET_ORDER_STATUS_URL", DEFAULT_ORDER_STATUS_URL),
        order_status_timeout=timeout,
    )


def load_service_port() -> int:
    """Port the HTTP server binds to (TICKET_SERVICE_PORT).

    Raises:
        ConfigurationError: If the value is not a TCP port number.
    """
    raw_port = os.getenv("TICKET_SERVICE_PORT", str(DEFAULT_SERVICE_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigurationError(f"TICKET_SERVICE_PORT must be an integer, got: {raw_port}")
    if not 0 < port < 65536:
        raise ConfigurationError(f"TICKET_SERVICE_PORT out of range: {port}")
    return port
