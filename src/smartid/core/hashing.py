"""
Hash material for signature and authentication requests.

A request is signed over a digest, never over the raw data: callers pass
either a :class:`RawPayload` (hashed here) or a :class:`PrecomputedHash`.
Both normalize to an ``(algorithm, digest)`` pair, from which the
verification code shown to the user is derived.
"""

from __future__ import annotations

__all__ = [
    "HashAlgorithm",
    "HashableInput",
    "PrecomputedHash",
    "RawPayload",
    "calculate_verification_code",
    "generate_authentication_hash",
]

import base64
import binascii
import enum
import hashlib
import secrets
from dataclasses import dataclass, field

from ..constants import VERIFICATION_CODE_MODULUS
from ..errors import InvalidInputError


class HashAlgorithm(enum.Enum):
    """Digest algorithms accepted by the service."""

    SHA256 = ("SHA256", "sha256", 32)
    SHA384 = ("SHA384", "sha384", 48)
    SHA512 = ("SHA512", "sha512", 64)

    def __init__(self, wire_name: str, hashlib_name: str, digest_size: int) -> None:
        self.wire_name = wire_name
        self.hashlib_name = hashlib_name
        self.digest_size = digest_size

    @property
    def signature_algorithm(self) -> str:
        """Signature algorithm name reported for this digest, e.g. ``sha512WithRSAEncryption``."""
        return f"{self.hashlib_name}WithRSAEncryption"

    def digest(self, data: bytes) -> bytes:
        return hashlib.new(self.hashlib_name, data).digest()

    @classmethod
    def from_name(cls, name: str) -> HashAlgorithm:
        """Look up an algorithm by wire name (``"SHA256"``, ``"sha-256"``, ...)."""
        key = name.upper().replace("-", "")
        for algorithm in cls:
            if algorithm.wire_name == key:
                return algorithm
        raise InvalidInputError(f"Unsupported hash algorithm: {name!r}")


def calculate_verification_code(digest: bytes) -> str:
    """
    Derive the 4-digit verification code for a digest.

    The digest is hashed once more with SHA-256; the last two bytes of
    that, read as an unsigned big-endian integer modulo 10000, give the
    code. The result is left-padded with zeros.

    Args:
        digest: The digest that will be signed.

    Returns:
        A 4-character numeric string, e.g. ``"0064"``.

    Raises:
        InvalidInputError: If the digest is empty.
    """
    if not digest:
        raise InvalidInputError("Cannot calculate a verification code for an empty digest.")
    vc_digest = hashlib.sha256(digest).digest()
    code = int.from_bytes(vc_digest[-2:], "big") % VERIFICATION_CODE_MODULUS
    return f"{code:04d}"


@dataclass(frozen=True)
class PrecomputedHash:
    """A digest computed by the caller.

    Attributes:
        algorithm: Algorithm the digest was computed with.
        digest: Raw digest bytes; length must match ``algorithm``.
    """

    algorithm: HashAlgorithm
    digest: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.algorithm, HashAlgorithm):
            raise InvalidInputError(f"Expected a HashAlgorithm, got {self.algorithm!r}")
        if len(self.digest) != self.algorithm.digest_size:
            raise InvalidInputError(
                f"Expected {self.algorithm.digest_size}-byte {self.algorithm.wire_name} "
                f"digest, got {len(self.digest)} bytes."
            )

    @classmethod
    def from_base64(cls, algorithm: HashAlgorithm, digest_b64: str) -> PrecomputedHash:
        """Build from a base64-encoded digest.

        Decoding is strict: stray characters (quotes, whitespace inside
        the value) are rejected rather than silently dropped.
        """
        try:
            digest = base64.b64decode(digest_b64.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidInputError(f"Invalid base64 digest: {e}") from e
        return cls(algorithm, digest)

    @property
    def digest_b64(self) -> str:
        return base64.b64encode(self.digest).decode("ascii")

    @property
    def verification_code(self) -> str:
        return calculate_verification_code(self.digest)


@dataclass(frozen=True)
class RawPayload:
    """Data to be hashed locally before signing.

    Attributes:
        data: The bytes to sign. Must not be empty.
        algorithm: Digest algorithm (SHA-512 unless overridden).
    """

    data: bytes = field(repr=False)
    algorithm: HashAlgorithm = HashAlgorithm.SHA512

    def __post_init__(self) -> None:
        if not self.data:
            raise InvalidInputError("Cannot sign empty data.")
        if not isinstance(self.algorithm, HashAlgorithm):
            raise InvalidInputError(f"Expected a HashAlgorithm, got {self.algorithm!r}")

    @property
    def digest(self) -> bytes:
        return self.algorithm.digest(self.data)

    @property
    def digest_b64(self) -> str:
        return base64.b64encode(self.digest).decode("ascii")

    @property
    def verification_code(self) -> str:
        return calculate_verification_code(self.digest)

    def to_precomputed(self) -> PrecomputedHash:
        return PrecomputedHash(self.algorithm, self.digest)


HashableInput = RawPayload | PrecomputedHash


def generate_authentication_hash(algorithm: HashAlgorithm = HashAlgorithm.SHA512) -> PrecomputedHash:
    """Create a fresh random challenge for an authentication request."""
    return PrecomputedHash(algorithm, algorithm.digest(secrets.token_bytes(64)))
