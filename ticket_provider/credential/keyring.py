"""Deterministic Ed25519 key derivation from a secret URI.

The provider's signing key is configured as a Substrate-style secret URI:

    <phrase>[//hard-junction]...[///password]

Supported phrases:
- ``0x`` followed by 64 hex digits: the 32-byte seed itself
- a 12/15/18/21/24 word BIP39 mnemonic: its entropy stretched with
  PBKDF2-HMAC-SHA512 (salt "mnemonic" + password, 2048 rounds), first
  32 bytes (Substrate's mini-secret)
- any other phrase of at most 32 bytes: space-padded to 32 bytes
- empty phrase (e.g. "//Alice"): the well-known development phrase

Hard junctions follow Substrate's Ed25519 HDKD, so every supported URI
yields the same key as polkadot-js
`Keyring({type: "ed25519"}).addFromUri`. Soft junctions are not defined
for Ed25519 and are rejected.

The same URI always yields the same keypair, so the provider's public key
is stable across restarts.
"""

import hashlib
import re
from dataclasses import dataclass, field
from typing import Optional

import pysodium
from mnemonic import Mnemonic

from ticket_provider.exceptions import KeyMaterialError

DEV_PHRASE = "bottom drive obey lake curtain smoke basket hold race lonely fit walk"

SEED_BYTES = 32
MNEMONIC_WORD_COUNTS = frozenset({12, 15, 18, 21, 24})
PBKDF2_ROUNDS = 2048

SURI_PATTERN = re.compile(r"^(\w+(?: \w+)*)?((?://?[^/]+)*)(?:///(.*))?$")
JUNCTION_PATTERN = re.compile(r"/(/?)([^/]+)")
HEX_SEED_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
HEX_JUNCTION_PATTERN = re.compile(r"^0x(?:[0-9a-fA-F]{2})+$")

_BIP39 = Mnemonic("english")


@dataclass(frozen=True)
class Ed25519Keypair:
    """Ed25519 keypair in libsodium layout (64-byte secret key)."""

    public_key: bytes
    secret_key: bytes = field(repr=False)


@dataclass(frozen=True)
class SecretUri:
    """Parsed secret URI."""

    phrase: str
    junctions: tuple[tuple[bool, str], ...]  # (is_hard, value)
    password: Optional[str] = field(default=None, repr=False)


def parse_secret_uri(suri: str) -> SecretUri:
    """Split a secret URI into phrase, junction path and password.

    Raises:
        KeyMaterialError: If the URI is empty or does not match the grammar.
    """
    if not suri or not suri.strip():
        raise KeyMaterialError("Signing key URI is empty")

    match = SURI_PATTERN.match(suri.strip())
    if match is None:
        raise KeyMaterialError("Signing key URI is not a valid secret URI")

    phrase, path, password = match.group(1), match.group(2), match.group(3)
    junctions = tuple(
        (hard == "/", value) for hard, value in JUNCTION_PATTERN.findall(path or "")
    )
    return SecretUri(phrase=phrase or DEV_PHRASE, junctions=junctions, password=password)


def _compact_length(n: int) -> bytes:
    """SCALE compact encoding of a length prefix."""
    if n < 1 << 6:
        return bytes([n << 2])
    if n < 1 << 14:
        return ((n << 2) | 0b01).to_bytes(2, "little")
    if n < 1 << 30:
        return ((n << 2) | 0b10).to_bytes(4, "little")
    raise KeyMaterialError("Junction too long")


def _scale_str(value: str) -> bytes:
    data = value.encode("utf-8")
    return _compact_length(len(data)) + data


def _blake2_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def _chain_code(junction: str) -> bytes:
    """32-byte chain code for a junction.

    Numbers become u64 LE, ``0x`` hex becomes its raw bytes, anything else
    a SCALE string. Codes over 32 bytes are hashed, shorter ones zero-padded.
    """
    if junction.isascii() and junction.isdigit():
        index = int(junction)
        if index >= 1 << 64:
            raise KeyMaterialError("Numeric junction exceeds 64 bits")
        data = index.to_bytes(8, "little")
    elif HEX_JUNCTION_PATTERN.match(junction):
        data = bytes.fromhex(junction[2:])
    else:
        data = _scale_str(junction)

    if len(data) > SEED_BYTES:
        return _blake2_256(data)
    return data.ljust(SEED_BYTES, b"\x00")


_HDKD_PREFIX = _scale_str("Ed25519HDKD")


def _derive_hard(seed: bytes, junction: str) -> bytes:
    return _blake2_256(_HDKD_PREFIX + seed + _chain_code(junction))


def mini_secret_from_mnemonic(phrase: str, password: Optional[str] = None) -> bytes:
    """Substrate mini-secret for a BIP39 mnemonic.

    Unlike a BIP39 wallet seed, the PBKDF2 input is the mnemonic's entropy,
    not its text.

    Raises:
        KeyMaterialError: If the phrase is not a valid English BIP39 mnemonic.
    """
    if not _BIP39.check(phrase):
        raise KeyMaterialError("Signing key phrase is not a valid BIP39 mnemonic")
    entropy = bytes(_BIP39.to_entropy(phrase))
    salt = f"mnemonic{password or ''}".encode("utf-8")
    return hashlib.pbkdf2_hmac("sha512", entropy, salt, PBKDF2_ROUNDS)[:SEED_BYTES]


def _seed_from_phrase(phrase: str, password: Optional[str]) -> bytes:
    if HEX_SEED_PATTERN.match(phrase):
        return bytes.fromhex(phrase[2:])

    if len(phrase.split(" ")) in MNEMONIC_WORD_COUNTS:
        return mini_secret_from_mnemonic(phrase, password)

    raw = phrase.encode("utf-8")
    if len(raw) > SEED_BYTES:
        raise KeyMaterialError(
            "Signing key phrase must be a hex seed, a mnemonic, or at most 32 bytes"
        )
    return raw.ljust(SEED_BYTES, b" ")


def derive_seed(suri: str) -> bytes:
    """Derive the 32-byte Ed25519 seed named by a secret URI."""
    parsed = parse_secret_uri(suri)
    seed = _seed_from_phrase(parsed.phrase, parsed.password)

    for is_hard, junction in parsed.junctions:
        if not is_hard:
            raise KeyMaterialError("Soft derivation paths are not allowed on ed25519")
        seed = _derive_hard(seed, junction)

    return seed


def derive_keypair(suri: str) -> Ed25519Keypair:
    """Derive the Ed25519 keypair named by a secret URI.

    Raises:
        KeyMaterialError: If the URI cannot be turned into a seed.
    """
    seed = derive_seed(suri)
    try:
        public_key, secret_key = pysodium.crypto_sign_seed_keypair(seed)
    except ValueError as e:
        raise KeyMaterialError(f"Could not derive Ed25519 keypair: {e}") from e
    return Ed25519Keypair(public_key=public_key, secret_key=secret_key)
