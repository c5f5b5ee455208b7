"""Tests for smartid.core.hashing — hash inputs and verification codes."""

from __future__ import annotations

import base64
import hashlib

import pytest

from smartid.core.hashing import (
    HashAlgorithm,
    PrecomputedHash,
    RawPayload,
    calculate_verification_code,
    generate_authentication_hash,
)
from smartid.errors import BuilderValidationError, InvalidInputError

SHA256_HASH_B64 = "0nbgC2fVdLVQFZJdBbmG7oPoElpCYsQMtrY0c0wKYRg="
SHA512_AUTH_HASH_B64 = (
    "K74MSLkafRuKZ1Ooucvh2xa4Q3nz+R/hFWIShN96SPHNcem+uQ6mFMe9kkJQqp5EaoZnJeaFpl310TmlzRgNyQ=="
)

# ── HashAlgorithm ────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("algorithm", "size", "sig_name"),
    [
        (HashAlgorithm.SHA256, 32, "sha256WithRSAEncryption"),
        (HashAlgorithm.SHA384, 48, "sha384WithRSAEncryption"),
        (HashAlgorithm.SHA512, 64, "sha512WithRSAEncryption"),
    ],
)
def test_algorithm_properties(algorithm, size, sig_name):
    assert algorithm.digest_size == size
    assert algorithm.signature_algorithm == sig_name
    assert len(algorithm.digest(b"abc")) == size


@pytest.mark.parametrize("name", ["SHA256", "sha256", "SHA-256", "sha-256"])
def test_algorithm_from_name(name):
    assert HashAlgorithm.from_name(name) is HashAlgorithm.SHA256


def test_algorithm_from_name_unknown():
    with pytest.raises(InvalidInputError, match="Unsupported hash algorithm"):
        HashAlgorithm.from_name("MD5")


# ── Verification code ────────────────────────────────────────────────


def test_verification_code_for_raw_payload_default_sha512():
    payload = RawPayload(b"Hello World!")
    assert payload.algorithm is HashAlgorithm.SHA512
    assert payload.verification_code == "4664"


def test_verification_code_for_sha256_hash():
    h = PrecomputedHash.from_base64(HashAlgorithm.SHA256, SHA256_HASH_B64)
    assert h.verification_code == "1796"


def test_verification_code_for_sha512_hash():
    h = PrecomputedHash.from_base64(HashAlgorithm.SHA512, SHA512_AUTH_HASH_B64)
    assert h.verification_code == "4430"


def test_verification_code_is_zero_padded():
    # SHA-256 of b"116": its verification code value is 64
    digest = hashlib.sha256(b"116").digest()
    assert calculate_verification_code(digest) == "0064"


def test_verification_code_is_deterministic():
    digest = hashlib.sha512(b"deterministic").digest()
    codes = {calculate_verification_code(digest) for _ in range(5)}
    assert len(codes) == 1
    (code,) = codes
    assert len(code) == 4
    assert code.isdigit()


def test_verification_code_matches_definition():
    digest = hashlib.sha384(b"any data").digest()
    vc_digest = hashlib.sha256(digest).digest()
    expected = int.from_bytes(vc_digest[-2:], "big") % 10000
    assert calculate_verification_code(digest) == f"{expected:04d}"


def test_verification_code_empty_digest():
    with pytest.raises(InvalidInputError):
        calculate_verification_code(b"")


# ── PrecomputedHash ──────────────────────────────────────────────────


def test_precomputed_hash_roundtrips_base64():
    h = PrecomputedHash.from_base64(HashAlgorithm.SHA256, SHA256_HASH_B64)
    assert h.digest_b64 == SHA256_HASH_B64
    assert len(h.digest) == 32


@pytest.mark.parametrize(
    ("algorithm", "size"),
    [
        (HashAlgorithm.SHA256, 31),
        (HashAlgorithm.SHA256, 64),
        (HashAlgorithm.SHA384, 32),
        (HashAlgorithm.SHA512, 0),
    ],
    ids=["short", "long", "sha384-wrong", "empty"],
)
def test_precomputed_hash_wrong_size(algorithm, size):
    with pytest.raises(InvalidInputError, match="digest"):
        PrecomputedHash(algorithm, b"\x01" * size)


def test_precomputed_hash_rejects_trailing_quote():
    """A stray trailing quote in base64 is a typo, not tolerated input."""
    with pytest.raises(InvalidInputError, match="Invalid base64"):
        PrecomputedHash.from_base64(HashAlgorithm.SHA512, SHA512_AUTH_HASH_B64 + '"')


def test_precomputed_hash_rejects_garbage():
    with pytest.raises(InvalidInputError):
        PrecomputedHash.from_base64(HashAlgorithm.SHA256, "not base64!")


def test_precomputed_hash_requires_enum():
    with pytest.raises(InvalidInputError, match="HashAlgorithm"):
        PrecomputedHash("SHA256", b"\x00" * 32)  # type: ignore[arg-type]


def test_invalid_input_is_caught_as_builder_error():
    with pytest.raises(BuilderValidationError):
        PrecomputedHash(HashAlgorithm.SHA256, b"\x00")


# ── RawPayload ───────────────────────────────────────────────────────


def test_raw_payload_hashes_with_chosen_algorithm():
    payload = RawPayload(b"data", HashAlgorithm.SHA256)
    assert payload.digest == hashlib.sha256(b"data").digest()
    assert payload.digest_b64 == base64.b64encode(hashlib.sha256(b"data").digest()).decode()


def test_raw_payload_empty():
    with pytest.raises(InvalidInputError, match="empty"):
        RawPayload(b"")


def test_raw_payload_to_precomputed():
    payload = RawPayload(b"Hello World!")
    h = payload.to_precomputed()
    assert h.algorithm is HashAlgorithm.SHA512
    assert h.digest == payload.digest
    assert h.verification_code == payload.verification_code


# ── generate_authentication_hash ─────────────────────────────────────


def test_generate_authentication_hash_default_sha512():
    h = generate_authentication_hash()
    assert h.algorithm is HashAlgorithm.SHA512
    assert len(h.digest) == 64


def test_generate_authentication_hash_is_random():
    assert generate_authentication_hash().digest != generate_authentication_hash().digest


def test_generate_authentication_hash_custom_algorithm():
    h = generate_authentication_hash(HashAlgorithm.SHA384)
    assert len(h.digest) == 48
