"""Smart-ID client error types."""

from __future__ import annotations

from typing import Any

__all__ = [
    "AccountNotFoundError",
    "BuilderValidationError",
    "CertificateError",
    "CertificateNotFoundError",
    "ClientTooOldError",
    "ConfigError",
    "DocumentUnusableError",
    "InvalidInputError",
    "RequestForbiddenError",
    "ServiceError",
    "ServiceMaintenanceError",
    "SessionEndError",
    "SessionTimeoutError",
    "SmartIdError",
    "TransportError",
    "UnexpectedResponseError",
    "UserRefusedError",
    "WrongVerificationCodeError",
]


class SmartIdError(Exception):
    """Base error for Smart-ID operations."""


# ── Local errors (never reach the network) ───────────────────────────


class BuilderValidationError(SmartIdError):
    """An operation request was assembled incorrectly."""


class InvalidInputError(BuilderValidationError):
    """Hash material is empty, malformed, or the wrong size for its algorithm."""


class ConfigError(SmartIdError):
    """Configuration validation error."""


class CertificateError(SmartIdError):
    """Certificate parsing or field extraction error."""


# ── Transport ────────────────────────────────────────────────────────


class TransportError(SmartIdError):
    """Network or timeout failure below the HTTP layer.

    Args:
        message: Human-readable error description.
        retryable: Whether this error is transient.
            True for timeouts and dropped connections;
            False for refused redirects, bad URLs, etc.
    """

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable

    def __reduce__(self) -> tuple[type[TransportError], tuple[str], dict[str, bool]]:
        """Preserve retryable flag across pickle/unpickle."""
        return (type(self), (str(self),), {"retryable": self.retryable})

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.retryable = state.get("retryable", False)


# ── HTTP status errors ───────────────────────────────────────────────


class ServiceError(SmartIdError):
    """The service rejected a request with a documented HTTP status."""

    status: int | None = None


class AccountNotFoundError(ServiceError):
    """No Smart-ID account matches the identity selector (HTTP 404)."""

    status = 404


class CertificateNotFoundError(AccountNotFoundError):
    """No certificate matches the certificate-choice request (HTTP 404)."""


class RequestForbiddenError(ServiceError):
    """Relying party is not allowed to make this request (HTTP 403)."""

    status = 403


class ClientTooOldError(ServiceError):
    """The service no longer supports this client's API version (HTTP 480)."""

    status = 480


class ServiceMaintenanceError(ServiceError):
    """The service is under maintenance (HTTP 580)."""

    status = 580


# ── Terminal session errors ──────────────────────────────────────────


class SessionEndError(SmartIdError):
    """A session completed with a non-OK end result.

    Args:
        message: Human-readable error description.
        end_result: The ``result.endResult`` code reported by the service.
    """

    end_result = ""

    def __init__(self, message: str, *, end_result: str | None = None) -> None:
        super().__init__(message)
        if end_result is not None:
            self.end_result = end_result

    def __reduce__(self) -> tuple[type[SessionEndError], tuple[str], dict[str, str]]:
        return (type(self), (str(self),), {"end_result": self.end_result})

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.end_result = state.get("end_result", type(self).end_result)


class UserRefusedError(SessionEndError):
    """The user declined the operation on their device."""

    end_result = "USER_REFUSED"


class SessionTimeoutError(SessionEndError):
    """The user did not respond before the server-side session expired."""

    end_result = "TIMEOUT"


class DocumentUnusableError(SessionEndError):
    """The user's Smart-ID document cannot be used for this operation."""

    end_result = "DOCUMENT_UNUSABLE"


class WrongVerificationCodeError(SessionEndError):
    """The user picked the wrong verification code on their device."""

    end_result = "WRONG_VC"


# ── Catch-all ────────────────────────────────────────────────────────


class UnexpectedResponseError(SmartIdError):
    """The service answered with something this client cannot classify.

    Args:
        message: Human-readable error description.
        status: HTTP status code, if the failure came from an HTTP response.
        body: Raw (possibly truncated) response body for diagnostics.
    """

    def __init__(self, message: str, *, status: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body
