"""Credential construction and signing."""

from ticket_provider.credential.builder import (
    build_unsigned_credential,
    extract_ticket_type,
)
from ticket_provider.credential.signer import (
    CredentialSigner,
    SigningKeyMaterial,
    verification_method_id,
    verify_credential,
)

__all__ = [
    "build_unsigned_credential",
    "extract_ticket_type",
    "CredentialSigner",
    "SigningKeyMaterial",
    "verification_method_id",
    "verify_credential",
]
