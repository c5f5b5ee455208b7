"""
smartid — Python client for the Smart-ID relying-party REST API.

Fetches a user's certificate, requests signatures, and runs
authentication challenges. Each operation is executed on the user's
Smart-ID app; this library submits the request and polls the session
until the user has answered.
"""

from __future__ import annotations

from .api import SmartIdClient
from .config import ClientConfig, NetworkConfig, load_client_config
from .constants import __version__
from .core import (
    AuthenticationRequest,
    AuthenticationResult,
    CertificateRequest,
    CertificateResult,
    DocumentNumber,
    HashAlgorithm,
    NationalIdentity,
    PrecomputedHash,
    RawPayload,
    SignatureRequest,
    SignatureResult,
    calculate_verification_code,
    generate_authentication_hash,
)
from .errors import (
    AccountNotFoundError,
    BuilderValidationError,
    CertificateError,
    CertificateNotFoundError,
    ClientTooOldError,
    ConfigError,
    DocumentUnusableError,
    InvalidInputError,
    RequestForbiddenError,
    ServiceError,
    ServiceMaintenanceError,
    SessionEndError,
    SessionTimeoutError,
    SmartIdError,
    TransportError,
    UnexpectedResponseError,
    UserRefusedError,
    WrongVerificationCodeError,
)

__all__ = [
    "AccountNotFoundError",
    "AuthenticationRequest",
    "AuthenticationResult",
    "BuilderValidationError",
    "CertificateError",
    "CertificateNotFoundError",
    "CertificateRequest",
    "CertificateResult",
    "ClientConfig",
    "ClientTooOldError",
    "ConfigError",
    "DocumentNumber",
    "DocumentUnusableError",
    "HashAlgorithm",
    "InvalidInputError",
    "NationalIdentity",
    "NetworkConfig",
    "PrecomputedHash",
    "RawPayload",
    "RequestForbiddenError",
    "ServiceError",
    "ServiceMaintenanceError",
    "SessionEndError",
    "SessionTimeoutError",
    "SignatureRequest",
    "SignatureResult",
    "SmartIdClient",
    "SmartIdError",
    "TransportError",
    "UnexpectedResponseError",
    "UserRefusedError",
    "WrongVerificationCodeError",
    "__version__",
    "calculate_verification_code",
    "generate_authentication_hash",
    "load_client_config",
]
