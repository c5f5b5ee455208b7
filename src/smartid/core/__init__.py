"""Core request, polling, and result logic."""

from __future__ import annotations

from .hashing import (
    HashAlgorithm,
    HashableInput,
    PrecomputedHash,
    RawPayload,
    calculate_verification_code,
    generate_authentication_hash,
)
from .identity import DocumentNumber, IdentitySelector, NationalIdentity
from .operations import AuthenticationRequest, CertificateRequest, SignatureRequest
from .poller import SessionHandle, SessionPoller
from .requests import OperationKind, OperationRequest, RequestBuilder
from .results import AuthenticationResult, CertificateResult, SignatureResult

__all__ = [
    "AuthenticationRequest",
    "AuthenticationResult",
    "CertificateRequest",
    "CertificateResult",
    "DocumentNumber",
    "HashAlgorithm",
    "HashableInput",
    "IdentitySelector",
    "NationalIdentity",
    "OperationKind",
    "OperationRequest",
    "PrecomputedHash",
    "RawPayload",
    "RequestBuilder",
    "SessionHandle",
    "SessionPoller",
    "SignatureRequest",
    "SignatureResult",
    "calculate_verification_code",
    "generate_authentication_hash",
]
