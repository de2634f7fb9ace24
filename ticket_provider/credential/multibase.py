"""Multibase base58btc encoding for proof values and public keys."""

B58_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
B58_MAP = {c: i for i, c in enumerate(B58_ALPHABET)}

# Multibase prefix for base58btc
BASE58BTC_PREFIX = "z"

# Multicodec varint prefix for ed25519-pub
ED25519_PUB_MULTICODEC = bytes([0xED, 0x01])


def b58encode(b: bytes) -> str:
    """Base58btc-encode bytes; each leading zero byte becomes a leading "1"."""
    n_pad = 0
    for c in b:
        if c == 0:
            n_pad += 1
        else:
            break
    num = int.from_bytes(b, "big")
    out = bytearray()
    while num > 0:
        num, rem = divmod(num, 58)
        out.append(B58_ALPHABET[rem])
    out.extend(B58_ALPHABET[0] for _ in range(n_pad))
    out.reverse()
    return out.decode("ascii")


def b58decode(s: str) -> bytes:
    """Decode base58btc text; raises ValueError on characters outside the alphabet."""
    s_bytes = s.encode("ascii")
    num = 0
    for c in s_bytes:
        if c not in B58_MAP:
            raise ValueError("Invalid base58 character")
        num = num * 58 + B58_MAP[c]
    n_pad = 0
    for c in s_bytes:
        if c == B58_ALPHABET[0]:
            n_pad += 1
        else:
            break
    full = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * n_pad + full


def encode_multibase(data: bytes) -> str:
    """Multibase base58btc form ("z" prefix)."""
    return BASE58BTC_PREFIX + b58encode(data)


def decode_multibase(value: str) -> bytes:
    """Decode a base58btc multibase string.

    Raises:
        ValueError: If the prefix is not base58btc or the body is invalid.
    """
    if not value.startswith(BASE58BTC_PREFIX):
        raise ValueError("Only base58btc (z) multibase values are supported")
    return b58decode(value[1:])


def ed25519_public_key_multibase(public_key: bytes) -> str:
    """publicKeyMultibase form of a raw Ed25519 public key."""
    if len(public_key) != 32:
        raise ValueError(f"Ed25519 public key must be 32 bytes, got {len(public_key)}")
    return encode_multibase(ED25519_PUB_MULTICODEC + public_key)
