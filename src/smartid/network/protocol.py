"""
Transport protocol abstraction for the Smart-ID session API.

The session poller depends on this protocol, not on a concrete HTTP
client, so tests and callers can inject their own transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class HttpResponse:
    """Status and body of one HTTP exchange.

    Non-2xx responses are returned, not raised, so the error classifier
    can map them to typed failures.
    """

    status: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class SessionTransport(Protocol):
    """Protocol for talking to the Smart-ID REST service.

    Implementations resolve ``path`` against their base URL and add any
    configured headers.
    """

    def post_json(self, path: str, payload: dict[str, Any], timeout: float) -> HttpResponse:
        """
        POST a JSON body to a session-creating endpoint.

        Args:
            path: Resource path relative to the base URL,
                e.g. ``"signature/document/PNOEE-31111111111"``.
            payload: JSON-serializable request body.
            timeout: Request timeout in seconds.

        Returns:
            The HTTP response, whatever its status.

        Raises:
            TransportError: On connection failures and timeouts.
        """
        ...

    def get_json(
        self, path: str, params: dict[str, str] | None, timeout: float
    ) -> HttpResponse:
        """
        GET a JSON resource (session status).

        Args:
            path: Resource path relative to the base URL.
            params: Query string parameters.
            timeout: Request timeout in seconds.

        Returns:
            The HTTP response, whatever its status.

        Raises:
            TransportError: On connection failures and timeouts.
        """
        ...
