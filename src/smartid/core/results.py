"""Typed outcomes of the three Smart-ID operations."""

from __future__ import annotations

__all__ = ["AuthenticationResult", "CertificateResult", "SignatureResult"]

import base64
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CertificateResult:
    """Outcome of a certificate choice.

    Attributes:
        certificate: DER-encoded signing certificate.
        document_number: Document number to address follow-up signature
            requests to.
        level: Certificate level reported by the service.
    """

    certificate: bytes = field(repr=False)
    document_number: str
    level: str | None = None

    @property
    def certificate_b64(self) -> str:
        return base64.b64encode(self.certificate).decode("ascii")


@dataclass(frozen=True)
class SignatureResult:
    """Outcome of a signature request.

    Attributes:
        value: Raw signature bytes.
        algorithm_name: e.g. ``sha256WithRSAEncryption``.
    """

    value: bytes = field(repr=False)
    algorithm_name: str

    @property
    def value_b64(self) -> str:
        return base64.b64encode(self.value).decode("ascii")


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of an authentication request.

    The signature is returned as-is; verifying it against
    ``signed_hash_b64`` and the certificate's trust chain is up to the
    caller.
    """

    signed_hash_b64: str
    signature_value_b64: str = field(repr=False)
    algorithm_name: str
    certificate: bytes = field(repr=False)
    end_result: str
    certificate_level: str | None = None
    document_number: str | None = None

    @property
    def signature_value(self) -> bytes:
        return base64.b64decode(self.signature_value_b64)
