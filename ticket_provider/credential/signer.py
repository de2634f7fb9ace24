"""Interaction ticket signing.

Attaches an Ed25519Signature2020-style proof to an unsigned credential.

Signing input is the canonical JSON of the credential with any ``proof``
removed: keys sorted, no insignificant whitespace, UTF-8. The signature is
encoded as a base58btc multibase ``proofValue``.

Signing is all-or-nothing: the caller receives either a complete signed
copy or a SigningError, and the unsigned document is never modified.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import pysodium

from ticket_provider.config import SIGNING_ALGORITHM
from ticket_provider.credential.builder import format_timestamp
from ticket_provider.credential.keyring import Ed25519Keypair, derive_keypair
from ticket_provider.credential.multibase import (
    decode_multibase,
    ed25519_public_key_multibase,
    encode_multibase,
)
from ticket_provider.exceptions import KeyMaterialError, SigningError

log = logging.getLogger(__name__)

PROOF_TYPE = "Ed25519Signature2020"
PROOF_PURPOSE = "assertionMethod"


@dataclass(frozen=True)
class SigningKeyMaterial:
    """Provider signing key configuration.

    Attributes:
        key_uri: Secret URI the keypair is derived from. Never logged.
        key_id: Key identifier; the verification method fragment.
        algorithm: Always "ed25519".
    """

    key_uri: str = field(repr=False)
    key_id: str
    algorithm: str = SIGNING_ALGORITHM


def verification_method_id(issuer: str, key_id: str) -> str:
    """Verification method for a provider key: ``<issuer>#<key_id>``."""
    return f"{issuer}#{key_id}"


def canonical_bytes(document: dict) -> bytes:
    """Canonical signing input: the document without ``proof``."""
    unsigned = {k: v for k, v in document.items() if k != "proof"}
    return json.dumps(
        unsigned,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


class CredentialSigner:
    """Signs credentials with the provider's Ed25519 key.

    The keypair is derived once in the constructor; invalid key material
    raises KeyMaterialError there so the process refuses to start.
    """

    def __init__(self, key_material: SigningKeyMaterial):
        if key_material.algorithm.lower() != SIGNING_ALGORITHM:
            raise KeyMaterialError(
                f"Unsupported signing algorithm: {key_material.algorithm}"
            )
        if not key_material.key_id:
            raise KeyMaterialError("Signing key id must not be empty")

        self._keypair: Ed25519Keypair = derive_keypair(key_material.key_uri)
        self.key_id = key_material.key_id
        log.info(f"Credential signer ready: key_id={self.key_id}")

    @property
    def public_key(self) -> bytes:
        return self._keypair.public_key

    @property
    def public_key_multibase(self) -> str:
        return ed25519_public_key_multibase(self._keypair.public_key)

    def sign(
        self,
        unsigned: dict,
        verification_method: str,
        now: Optional[datetime] = None,
    ) -> dict:
        """Return a signed copy of an unsigned credential.

        Args:
            unsigned: Credential without a proof block.
            verification_method: Value for proof.verificationMethod.
            now: Proof creation time. Defaults to the current UTC time.

        Raises:
            SigningError: If serialization or the signing primitive fails.
        """
        try:
            message = canonical_bytes(unsigned)
            signature = pysodium.crypto_sign_detached(message, self._keypair.secret_key)
        except Exception as e:
            log.error(f"Failed to sign credential: {type(e).__name__}")
            raise SigningError(f"{type(e).__name__}: {e}") from e

        signed = copy.deepcopy(unsigned)
        signed["proof"] = {
            "type": PROOF_TYPE,
            "created": format_timestamp(now or datetime.now(timezone.utc)),
            "verificationMethod": verification_method,
            "proofPurpose": PROOF_PURPOSE,
            "proofValue": encode_multibase(signature),
        }
        return signed


def verify_credential(signed: dict, public_key: bytes) -> bool:
    """Check a signed credential's proof against an Ed25519 public key."""
    proof = signed.get("proof")
    if not isinstance(proof, dict) or proof.get("type") != PROOF_TYPE:
        return False

    try:
        signature = decode_multibase(proof.get("proofValue", ""))
        # pysodium raises ValueError if the signature does not verify
        pysodium.crypto_sign_verify_detached(signature, canonical_bytes(signed), public_key)
        return True
    except ValueError:
        return False
