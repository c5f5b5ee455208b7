"""
Operation facades: certificate choice, signature, and authentication.

Each facade is a :class:`~.requests.RequestBuilder` with a terminal call
(:meth:`CertificateRequest.fetch`, :meth:`SignatureRequest.sign`,
:meth:`AuthenticationRequest.authenticate`) that builds the request,
runs it through a :class:`~.poller.SessionPoller`, and maps the completed
session onto a typed result.

Example::

    result = (
        CertificateRequest(config)
        .with_document_number("PNOEE-31111111111")
        .with_certificate_level("ADVANCED")
        .fetch()
    )
"""

from __future__ import annotations

__all__ = ["AuthenticationRequest", "CertificateRequest", "SignatureRequest"]

import logging
import time
from typing import TYPE_CHECKING, TypeVar, cast

from ..constants import CERTIFICATE_LEVELS
from ..errors import CertificateError, UnexpectedResponseError
from ..network.rest_transport import RestSessionTransport
from .cert_info import document_number_from_certificate
from .hashing import HashAlgorithm, PrecomputedHash, RawPayload
from .poller import SessionPoller
from .requests import OperationKind, RequestBuilder
from .results import AuthenticationResult, CertificateResult, SignatureResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..config import ClientConfig
    from ..network.parsers import SessionCertificate, SessionStatus
    from ..network.protocol import SessionTransport
    from .hashing import HashableInput
    from .requests import OperationRequest

_H = TypeVar("_H", bound="_HashedRequest")

_logger = logging.getLogger(__name__)


def _require_certificate(status: SessionStatus) -> SessionCertificate:
    if status.certificate is None:
        raise UnexpectedResponseError("Completed session carries no certificate.")
    return status.certificate


def _check_certificate_level(requested: str, returned: str | None) -> None:
    """Reject a certificate weaker than the level that was asked for."""
    if returned is None:
        return
    if returned not in CERTIFICATE_LEVELS:
        _logger.warning("Service returned unknown certificate level %r", returned)
        return
    if CERTIFICATE_LEVELS.index(returned) < CERTIFICATE_LEVELS.index(requested):
        raise UnexpectedResponseError(
            f"Service returned a {returned} certificate, {requested} was requested."
        )


class _SessionOperation(RequestBuilder):
    """Builder plus the machinery to run the built request."""

    def __init__(
        self,
        config: ClientConfig,
        transport: SessionTransport | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(config)
        self._transport = transport
        self._sleep = sleep

    def _make_poller(self) -> SessionPoller:
        transport = self._transport
        if transport is None:
            transport = RestSessionTransport(self.config.host_url, self.config.network)
        return SessionPoller(
            transport,
            poll_sleep=self.config.poll_sleep,
            socket_open_time=self.config.socket_open_time,
            submit_timeout=self.config.network.timeout,
            sleep=self._sleep,
        )

    def _execute(self) -> tuple[OperationRequest, SessionStatus]:
        request = self.build()
        status = self._make_poller().run(request)
        return request, status


class CertificateRequest(_SessionOperation):
    """Ask the user to pick the certificate (and document) to sign with."""

    kind = OperationKind.CERTIFICATE_CHOICE

    def fetch(self) -> CertificateResult:
        """
        Run the certificate choice and return the chosen certificate.

        Raises:
            BuilderValidationError: If the request is incomplete or conflicting.
            CertificateNotFoundError: No matching account/certificate (404).
            SessionEndError: The user refused, timed out, etc.
            ServiceError: Other documented HTTP failures.
            UnexpectedResponseError: The response could not be classified.
            TransportError: On connection failures and timeouts.
        """
        request, status = self._execute()
        cert = _require_certificate(status)
        _check_certificate_level(request.certificate_level, cert.level)

        document_number = status.document_number
        if document_number is None:
            try:
                document_number = document_number_from_certificate(cert.value)
            except CertificateError as e:
                raise UnexpectedResponseError(
                    f"Session carries no document number and the certificate has none: {e}"
                ) from e

        _logger.info("Certificate choice complete for document %s", document_number)
        return CertificateResult(
            certificate=cert.value,
            document_number=document_number,
            level=cert.level,
        )


class _HashedRequest(_SessionOperation):
    """Shared setters for operations that sign a digest."""

    def with_data(self: _H, data: bytes, algorithm: HashAlgorithm = HashAlgorithm.SHA512) -> _H:
        """Sign ``data``, hashed locally with ``algorithm``."""
        return self.with_hashable(RawPayload(data, algorithm))

    def with_hash(self: _H, algorithm: HashAlgorithm, digest_b64: str) -> _H:
        """Sign a precomputed base64 digest."""
        return self.with_hashable(PrecomputedHash.from_base64(algorithm, digest_b64))

    def with_hashable(self: _H, hashable: HashableInput) -> _H:
        self._hash_inputs.append(hashable)
        return self

    def with_display_text(self: _H, text: str) -> _H:
        self._display_text = text
        return self


class SignatureRequest(_HashedRequest):
    """Ask the user to sign a digest with a known document."""

    kind = OperationKind.SIGNATURE

    def sign(self) -> SignatureResult:
        """
        Run the signature session and return the signature value.

        Raises:
            BuilderValidationError: If the request is incomplete or conflicting.
            AccountNotFoundError: No matching account (404).
            SessionEndError: The user refused, timed out, etc.
            ServiceError: Other documented HTTP failures.
            UnexpectedResponseError: The response could not be classified.
            TransportError: On connection failures and timeouts.
        """
        request, status = self._execute()
        if status.signature is None:
            raise UnexpectedResponseError("Completed signature session carries no signature.")

        algorithm_name = status.signature.algorithm
        if algorithm_name is None and request.hash_algorithm is not None:
            algorithm_name = request.hash_algorithm.signature_algorithm

        _logger.info("Signature complete: %d bytes, %s", len(status.signature.value), algorithm_name)
        return SignatureResult(value=status.signature.value, algorithm_name=algorithm_name or "")


class AuthenticationRequest(_HashedRequest):
    """Challenge the user to sign a random hash, proving control of their account."""

    kind = OperationKind.AUTHENTICATION

    def authenticate(self) -> AuthenticationResult:
        """
        Run the authentication session.

        The returned signature is not verified here; callers check it
        against ``signed_hash_b64`` and the certificate.

        Raises:
            BuilderValidationError: If the request is incomplete or conflicting.
            AccountNotFoundError: No matching account (404).
            SessionEndError: The user refused, timed out, etc.
            ServiceError: Other documented HTTP failures.
            UnexpectedResponseError: The response could not be classified.
            TransportError: On connection failures and timeouts.
        """
        request, status = self._execute()
        cert = _require_certificate(status)
        if status.signature is None:
            raise UnexpectedResponseError("Completed authentication session carries no signature.")
        _check_certificate_level(request.certificate_level, cert.level)

        hashable = cast("HashableInput", request.hashable)
        signed_hash_b64 = status.signed_hash_b64 or hashable.digest_b64
        algorithm_name = status.signature.algorithm or hashable.algorithm.signature_algorithm

        _logger.info("Authentication complete for document %s", status.document_number)
        return AuthenticationResult(
            signed_hash_b64=signed_hash_b64,
            signature_value_b64=status.signature.value_b64,
            algorithm_name=algorithm_name,
            certificate=cert.value,
            end_result=status.end_result or "",
            certificate_level=cert.level,
            document_number=status.document_number,
        )
