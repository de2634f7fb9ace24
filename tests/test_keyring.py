"""Tests for secret URI key derivation."""

import hashlib

import pysodium
import pytest

from ticket_provider.credential.keyring import (
    DEV_PHRASE,
    _chain_code,
    _compact_length,
    _derive_hard,
    derive_keypair,
    derive_seed,
    mini_secret_from_mnemonic,
    parse_secret_uri,
)
from ticket_provider.exceptions import KeyMaterialError

HEX_SEED = "0x" + "11" * 32

# BIP39 reference mnemonic for all-zero 128-bit entropy
ZERO_ENTROPY_MNEMONIC = " ".join(["abandon"] * 11 + ["about"])

# polkadot-js Keyring({type: "ed25519"}) development accounts
ALICE_ED25519_PUBLIC_KEY = "88dc3417d5058ec4b4503e0c12ea1a0a89be200fe98922423d4334014fa6b0ee"
BOB_ED25519_PUBLIC_KEY = "d17c2d7823ebf260fd138f2d7e27d114c0145d968b5ff5006125f2414fadae69"


class TestParseSecretUri:
    """Tests for secret URI parsing."""

    def test_dev_uri_uses_dev_phrase(self):
        parsed = parse_secret_uri("//Alice")

        assert parsed.phrase == DEV_PHRASE
        assert parsed.junctions == ((True, "Alice"),)
        assert parsed.password is None

    def test_phrase_path_and_password(self):
        parsed = parse_secret_uri(f"{HEX_SEED}//dsnp//1/soft///secret")

        assert parsed.phrase == HEX_SEED
        assert parsed.junctions == ((True, "dsnp"), (True, "1"), (False, "soft"))
        assert parsed.password == "secret"

    def test_password_hidden_from_repr(self):
        assert "secret" not in repr(parse_secret_uri("//Alice///secret"))

    @pytest.mark.parametrize("suri", ["", "   ", "bad-phrase", "//"])
    def test_invalid_uri_raises(self, suri):
        with pytest.raises(KeyMaterialError):
            parse_secret_uri(suri)


class TestScaleEncoding:
    """Tests for the SCALE pieces used by hard derivation."""

    def test_compact_length_single_byte(self):
        assert _compact_length(0) == b"\x00"
        assert _compact_length(5) == bytes([20])
        assert _compact_length(63) == bytes([252])

    def test_compact_length_two_bytes(self):
        assert _compact_length(64) == b"\x01\x01"

    def test_string_chain_code(self):
        assert _chain_code("Alice") == bytes([20]) + b"Alice" + b"\x00" * 26

    def test_numeric_chain_code(self):
        assert _chain_code("1") == b"\x01" + b"\x00" * 31
        assert _chain_code("256") == b"\x00\x01" + b"\x00" * 30

    def test_hex_chain_code(self):
        assert _chain_code("0x0102") == b"\x01\x02" + b"\x00" * 30

    def test_long_chain_code_is_hashed(self):
        junction = "x" * 40
        expected = hashlib.blake2b(bytes([160]) + junction.encode(), digest_size=32).digest()

        assert _chain_code(junction) == expected


class TestDeriveSeed:
    """Tests for seed derivation."""

    def test_hex_seed_is_used_directly(self):
        assert derive_seed(HEX_SEED) == bytes.fromhex("11" * 32)

    def test_hard_junction_matches_hdkd(self):
        seed = bytes.fromhex("11" * 32)
        prefix = bytes([44]) + b"Ed25519HDKD"
        expected = hashlib.blake2b(
            prefix + seed + _chain_code("Alice"), digest_size=32
        ).digest()

        assert derive_seed(f"{HEX_SEED}//Alice") == expected

    def test_short_phrase_is_space_padded(self):
        assert derive_seed("provider") == b"provider" + b" " * 24

    def test_mnemonic_password_changes_seed(self):
        assert derive_seed(DEV_PHRASE) != derive_seed(f"{DEV_PHRASE}///pw")

    def test_soft_junction_rejected(self):
        with pytest.raises(KeyMaterialError, match="Soft derivation"):
            derive_seed("//Alice/soft")

    def test_long_non_mnemonic_phrase_rejected(self):
        with pytest.raises(KeyMaterialError):
            derive_seed("a" * 33)


class TestDeriveKeypair:
    """Tests for keypair derivation."""

    def test_hex_seed_matches_libsodium(self):
        expected_pk, _ = pysodium.crypto_sign_seed_keypair(bytes.fromhex("11" * 32))

        keypair = derive_keypair(HEX_SEED)

        assert keypair.public_key == expected_pk
        assert len(keypair.secret_key) == 64

    def test_deterministic(self):
        assert derive_keypair("//Alice") == derive_keypair("//Alice")

    def test_different_paths_different_keys(self):
        keys = {
            derive_keypair(uri).public_key
            for uri in ("//Alice", "//Bob", "//Alice//1", f"{HEX_SEED}//Alice", HEX_SEED)
        }
        assert len(keys) == 5

    def test_secret_key_hidden_from_repr(self):
        keypair = derive_keypair("//Alice")

        assert keypair.secret_key.hex() not in repr(keypair)


class TestMnemonic:
    """Tests for Substrate mini-secret derivation from BIP39 mnemonics."""

    def test_mini_secret_stretches_entropy(self):
        expected = hashlib.pbkdf2_hmac("sha512", b"\x00" * 16, b"mnemonic", 2048)[:32]

        assert mini_secret_from_mnemonic(ZERO_ENTROPY_MNEMONIC) == expected

    def test_mini_secret_is_not_the_bip39_wallet_seed(self):
        wallet_seed = hashlib.pbkdf2_hmac(
            "sha512", ZERO_ENTROPY_MNEMONIC.encode(), b"mnemonic", 2048
        )[:32]

        assert mini_secret_from_mnemonic(ZERO_ENTROPY_MNEMONIC) != wallet_seed

    def test_password_salts_mini_secret(self):
        expected = hashlib.pbkdf2_hmac("sha512", b"\x00" * 16, b"mnemonicSubstrate", 2048)[:32]

        assert derive_seed(f"{ZERO_ENTROPY_MNEMONIC}///Substrate") == expected

    def test_hard_path_with_password(self):
        mini_secret = mini_secret_from_mnemonic(ZERO_ENTROPY_MNEMONIC, "pw")
        expected = _derive_hard(_derive_hard(mini_secret, "dsnp"), "1")

        assert derive_seed(f"{ZERO_ENTROPY_MNEMONIC}//dsnp//1///pw") == expected

    def test_invalid_mnemonic_rejected(self):
        with pytest.raises(KeyMaterialError, match="BIP39"):
            derive_seed(" ".join(["notaword"] * 12))

    def test_bad_checksum_rejected(self):
        with pytest.raises(KeyMaterialError):
            derive_seed(" ".join(["abandon"] * 12))


class TestKnownVectors:
    """Keys must match the ones polkadot-js derives for the same URI."""

    def test_alice(self):
        assert derive_keypair("//Alice").public_key.hex() == ALICE_ED25519_PUBLIC_KEY

    def test_bob(self):
        assert derive_keypair("//Bob").public_key.hex() == BOB_ED25519_PUBLIC_KEY

    def test_explicit_dev_phrase(self):
        keypair = derive_keypair(f"{DEV_PHRASE}//Alice")

        assert keypair.public_key.hex() == ALICE_ED25519_PUBLIC_KEY
