"""
Response parsing and error classification for the Smart-ID session API.

Two independent signals are mapped onto one failure taxonomy:

- the HTTP status of a submit or status call (:func:`raise_for_status`);
- the ``result.endResult`` of a completed session (:func:`raise_for_end_result`).

Nothing here retries or sleeps; each function either returns parsed data
or raises exactly one typed error.
"""

from __future__ import annotations

__all__ = [
    "SessionCertificate",
    "SessionSignature",
    "SessionState",
    "SessionStatus",
    "parse_session_id",
    "parse_session_status",
    "raise_for_end_result",
    "raise_for_status",
]

import base64
import binascii
import enum
import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..constants import (
    HTTP_CLIENT_TOO_OLD,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_SERVICE_MAINTENANCE,
    RESPONSE_PREVIEW_LENGTH,
)
from ..errors import (
    AccountNotFoundError,
    ClientTooOldError,
    DocumentUnusableError,
    RequestForbiddenError,
    ServiceError,
    ServiceMaintenanceError,
    SessionEndError,
    SessionTimeoutError,
    UnexpectedResponseError,
    UserRefusedError,
    WrongVerificationCodeError,
)

if TYPE_CHECKING:
    from .protocol import HttpResponse

_logger = logging.getLogger(__name__)

END_RESULT_OK = "OK"

_STATUS_ERRORS: dict[int, tuple[type[ServiceError], str]] = {
    HTTP_FORBIDDEN: (RequestForbiddenError, "Relying party is not allowed to make this request"),
    HTTP_CLIENT_TOO_OLD: (ClientTooOldError, "Client API version is no longer supported"),
    HTTP_SERVICE_MAINTENANCE: (ServiceMaintenanceError, "Smart-ID service is under maintenance"),
}

_END_RESULT_ERRORS: dict[str, tuple[type[SessionEndError], str]] = {
    "USER_REFUSED": (UserRefusedError, "User refused the operation"),
    "TIMEOUT": (SessionTimeoutError, "User did not respond in time"),
    "DOCUMENT_UNUSABLE": (DocumentUnusableError, "Smart-ID document is unusable"),
    "WRONG_VC": (WrongVerificationCodeError, "User selected the wrong verification code"),
}


class SessionState(enum.Enum):
    RUNNING = "RUNNING"
    COMPLETE = "COMPLETE"


@dataclass(frozen=True)
class SessionCertificate:
    """Certificate returned in a completed session."""

    value: bytes = field(repr=False)
    level: str | None = None


@dataclass(frozen=True)
class SessionSignature:
    """Signature returned in a completed session."""

    value: bytes = field(repr=False)
    algorithm: str | None = None

    @property
    def value_b64(self) -> str:
        return base64.b64encode(self.value).decode("ascii")


@dataclass(frozen=True)
class SessionStatus:
    """One parsed session status response.

    Only ``state`` is meaningful for a RUNNING session; the remaining
    fields are filled from a COMPLETE one.
    """

    state: SessionState
    end_result: str | None = None
    document_number: str | None = None
    certificate: SessionCertificate | None = None
    signature: SessionSignature | None = None
    signed_hash_b64: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.state is SessionState.COMPLETE


def _preview(response: HttpResponse) -> str:
    return response.text()[:RESPONSE_PREVIEW_LENGTH]


def raise_for_status(
    response: HttpResponse,
    *,
    not_found: type[AccountNotFoundError] = AccountNotFoundError,
) -> None:
    """
    Raise the typed error for a non-2xx response; return for 2xx.

    Args:
        response: The HTTP response to check.
        not_found: Error raised for 404. Certificate choice passes
            :class:`~smartid.errors.CertificateNotFoundError`.

    Raises:
        AccountNotFoundError: 404.
        RequestForbiddenError: 403.
        ClientTooOldError: 480.
        ServiceMaintenanceError: 580.
        UnexpectedResponseError: Any other non-2xx status.
    """
    if response.ok:
        return

    status = response.status
    if status == HTTP_NOT_FOUND:
        _logger.warning("Account or certificate not found (HTTP 404)")
        raise not_found("No Smart-ID account or certificate matches the identity selector.")

    mapped = _STATUS_ERRORS.get(status)
    if mapped is not None:
        error_cls, message = mapped
        _logger.warning("%s (HTTP %d)", message, status)
        raise error_cls(f"{message} (HTTP {status}).")

    body = _preview(response)
    _logger.error("Unexpected HTTP %d from Smart-ID service: %s", status, body)
    raise UnexpectedResponseError(
        f"Unexpected HTTP status {status} from Smart-ID service.",
        status=status,
        body=body,
    )


def _load_json(response: HttpResponse) -> dict[str, Any]:
    try:
        data = json.loads(response.body)
    except (ValueError, UnicodeDecodeError) as e:
        raise UnexpectedResponseError(
            f"Invalid JSON response: {e}", status=response.status, body=_preview(response)
        ) from e
    if not isinstance(data, dict):
        raise UnexpectedResponseError(
            "Expected a JSON object in the response.",
            status=response.status,
            body=_preview(response),
        )
    return data


def _decode_b64(value: object, what: str) -> bytes:
    if not isinstance(value, str) or not value:
        raise UnexpectedResponseError(f"Missing {what} value in session status.")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UnexpectedResponseError(f"Invalid base64 {what} in session status: {e}") from e


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) and value else None


def parse_session_id(response: HttpResponse) -> str:
    """
    Extract ``sessionID`` from a successful submit response.

    Raises:
        UnexpectedResponseError: If the body is not JSON or has no session id.
    """
    data = _load_json(response)
    session_id = data.get("sessionID")
    if not isinstance(session_id, str) or not session_id:
        raise UnexpectedResponseError(
            "Submit response carries no sessionID.",
            status=response.status,
            body=_preview(response),
        )
    return session_id


def parse_session_status(response: HttpResponse) -> SessionStatus:
    """
    Parse a session status body.

    Certificate and signature values are base64-decoded here so that a
    corrupt payload fails as UnexpectedResponseError before any result
    object is built.

    Raises:
        UnexpectedResponseError: On malformed JSON, an unknown state,
            a COMPLETE state without ``result.endResult``, or invalid base64.
    """
    data = _load_json(response)

    raw_state = data.get("state")
    try:
        state = SessionState(raw_state)
    except ValueError as e:
        raise UnexpectedResponseError(
            f"Unknown session state: {raw_state!r}",
            status=response.status,
            body=_preview(response),
        ) from e

    if state is SessionState.RUNNING:
        return SessionStatus(state=state)

    result = data.get("result")
    if not isinstance(result, dict) or not _optional_str(result, "endResult"):
        raise UnexpectedResponseError(
            "Completed session carries no result.endResult.",
            status=response.status,
            body=_preview(response),
        )

    certificate = None
    cert_data = data.get("cert")
    if isinstance(cert_data, dict):
        certificate = SessionCertificate(
            value=_decode_b64(cert_data.get("value"), "certificate"),
            level=_optional_str(cert_data, "certificateLevel"),
        )

    signature = None
    sig_data = data.get("signature")
    if isinstance(sig_data, dict):
        signature = SessionSignature(
            value=_decode_b64(sig_data.get("value"), "signature"),
            algorithm=_optional_str(sig_data, "algorithm"),
        )

    status = SessionStatus(
        state=state,
        end_result=result["endResult"],
        document_number=_optional_str(result, "documentNumber"),
        certificate=certificate,
        signature=signature,
        signed_hash_b64=_optional_str(data, "signedHashInBase64"),
    )
    _logger.debug(
        "Parsed session status: end_result=%s, has_cert=%s, has_signature=%s",
        status.end_result,
        certificate is not None,
        signature is not None,
    )
    return status


def raise_for_end_result(status: SessionStatus) -> None:
    """
    Raise the typed error for a non-OK terminal session; return for OK.

    Raises:
        UserRefusedError: USER_REFUSED.
        SessionTimeoutError: TIMEOUT.
        DocumentUnusableError: DOCUMENT_UNUSABLE.
        WrongVerificationCodeError: WRONG_VC.
        UnexpectedResponseError: Any other end result, or a session
            that is not complete.
    """
    if not status.is_complete:
        raise UnexpectedResponseError("Session is not complete yet.")

    end_result = status.end_result or ""
    if end_result == END_RESULT_OK:
        return

    mapped = _END_RESULT_ERRORS.get(end_result)
    if mapped is not None:
        error_cls, message = mapped
        _logger.warning("Session ended with %s: %s", end_result, message)
        raise error_cls(f"{message} ({end_result}).", end_result=end_result)

    _logger.error("Session ended with unknown result %r", end_result)
    raise UnexpectedResponseError(f"Unknown session end result: {end_result!r}")
