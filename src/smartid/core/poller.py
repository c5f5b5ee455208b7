"""
Session poller: submit a request, then query its session until it ends.

One :meth:`SessionPoller.run` call is one state machine:

    SUBMITTED -> POLLING -> SUCCEEDED | FAILED | TIMED_OUT

- SUBMITTED: the request is POSTed; a non-2xx status fails immediately.
- POLLING: ``GET session/{id}?timeoutMs=...`` is repeated, sleeping
  ``poll_sleep`` seconds after each RUNNING answer.
- SUCCEEDED: COMPLETE with endResult OK; the status is returned.
- FAILED: COMPLETE with any other endResult, or an error status.
- TIMED_OUT: a status query exceeded its transport timeout
  (:class:`~smartid.errors.TransportError`, distinct from a server-side
  session TIMEOUT).

Status queries are strictly sequential and the loop has no client-side
poll limit: the server always ends a session eventually.
"""

from __future__ import annotations

__all__ = ["SessionHandle", "SessionPoller"]

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..constants import (
    DEFAULT_POLL_SLEEP,
    DEFAULT_SOCKET_OPEN_TIME,
    DEFAULT_TIMEOUT_HTTP,
    POLL_TIMEOUT_MARGIN,
)
from ..errors import AccountNotFoundError, CertificateNotFoundError
from ..network.parsers import (
    parse_session_id,
    parse_session_status,
    raise_for_end_result,
    raise_for_status,
)
from .requests import OperationKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..network.parsers import SessionStatus
    from ..network.protocol import SessionTransport
    from .requests import OperationRequest

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionHandle:
    """Server-side session created by one submitted request."""

    session_id: str
    kind: OperationKind

    @property
    def path(self) -> str:
        return f"session/{self.session_id}"


def _not_found_error(kind: OperationKind) -> type[AccountNotFoundError]:
    if kind is OperationKind.CERTIFICATE_CHOICE:
        return CertificateNotFoundError
    return AccountNotFoundError


class SessionPoller:
    """Drives one request through submission and status polling.

    Args:
        transport: SessionTransport used for both calls.
        poll_sleep: Seconds to sleep between RUNNING responses.
        socket_open_time: Seconds the server may hold each status query open.
        submit_timeout: Transport timeout for the submit call, in seconds.
        sleep: Sleep function; injectable for tests.
    """

    def __init__(
        self,
        transport: SessionTransport,
        *,
        poll_sleep: float = DEFAULT_POLL_SLEEP,
        socket_open_time: float = DEFAULT_SOCKET_OPEN_TIME,
        submit_timeout: float = DEFAULT_TIMEOUT_HTTP,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.transport = transport
        self.poll_sleep = poll_sleep
        self.socket_open_time = socket_open_time
        self.submit_timeout = submit_timeout
        self._sleep = sleep

    def submit(self, request: OperationRequest) -> SessionHandle:
        """POST the request and return the new session's handle.

        Raises:
            ServiceError: The service rejected the request by status code.
            UnexpectedResponseError: Unknown status or no session id.
            TransportError: The request never got an answer.
        """
        _logger.info("Submitting %s request to %s", request.kind.value, request.path)
        response = self.transport.post_json(request.path, request.to_payload(), self.submit_timeout)
        raise_for_status(response, not_found=_not_found_error(request.kind))
        handle = SessionHandle(parse_session_id(response), request.kind)
        _logger.debug("Session %s created for %s", handle.session_id, request.kind.value)
        return handle

    def query(self, handle: SessionHandle) -> SessionStatus:
        """Issue one long-poll status query."""
        params = {"timeoutMs": str(int(self.socket_open_time * 1000))}
        response = self.transport.get_json(
            handle.path, params, self.socket_open_time + POLL_TIMEOUT_MARGIN
        )
        raise_for_status(response, not_found=_not_found_error(handle.kind))
        return parse_session_status(response)

    def poll(self, handle: SessionHandle) -> SessionStatus:
        """Query the session until it completes.

        Returns:
            The COMPLETE status with endResult OK.

        Raises:
            SessionEndError: The session completed with a non-OK result.
            ServiceError: A status query was rejected by status code.
            UnexpectedResponseError: A status response could not be classified.
            TransportError: A status query timed out or failed to connect.
        """
        queries = 0
        while True:
            status = self.query(handle)
            queries += 1
            if status.is_complete:
                break
            _logger.debug(
                "Session %s still running (query %d), sleeping %gs",
                handle.session_id,
                queries,
                self.poll_sleep,
            )
            self._sleep(self.poll_sleep)

        _logger.debug(
            "Session %s complete after %d queries: %s",
            handle.session_id,
            queries,
            status.end_result,
        )
        raise_for_end_result(status)
        return status

    def run(self, request: OperationRequest) -> SessionStatus:
        """Submit ``request`` and poll its session to a successful end."""
        return self.poll(self.submit(request))
