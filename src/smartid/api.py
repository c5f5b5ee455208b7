"""High-level client entry point.

:class:`SmartIdClient` holds an immutable
:class:`~smartid.config.ClientConfig` and hands out one fresh operation
facade per call. It keeps no session state, so a single client can run
any number of operations, sequentially or from several threads.

For lower-level control, build an
:class:`~smartid.core.requests.OperationRequest` yourself and run it
through :class:`~smartid.core.poller.SessionPoller` with any
:class:`~smartid.network.protocol.SessionTransport`.
"""

from __future__ import annotations

__all__ = ["SmartIdClient"]

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING

from .config import ClientConfig, NetworkConfig, load_client_config
from .core.operations import AuthenticationRequest, CertificateRequest, SignatureRequest

if TYPE_CHECKING:
    from collections.abc import Callable

    from .network.protocol import SessionTransport

_logger = logging.getLogger(__name__)


class SmartIdClient:
    """Entry point for certificate choice, signing, and authentication.

    Args:
        config: Fully resolved configuration.
        transport: Optional SessionTransport shared by all operations;
            by default each operation creates a RestSessionTransport
            from ``config``.
        sleep: Sleep function used between status queries.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: SessionTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_env(cls, **overrides: object) -> SmartIdClient:
        """Create a client from environment variables and keyword overrides.

        See :func:`smartid.config.load_client_config` for the variables read.
        """
        return cls(load_client_config(**overrides))  # type: ignore[arg-type]

    def with_poll_sleep(self, seconds: float) -> SmartIdClient:
        """Return a client that waits ``seconds`` between status queries."""
        return self._replace_config(poll_sleep=seconds)

    def with_socket_open_time(self, seconds: float) -> SmartIdClient:
        """Return a client whose status queries ask the server to hold ``seconds``."""
        return self._replace_config(socket_open_time=seconds)

    def with_network(self, network: NetworkConfig) -> SmartIdClient:
        """Return a client using ``network`` for headers and timeouts."""
        return self._replace_config(network=network)

    def _replace_config(self, **changes: object) -> SmartIdClient:
        config = replace(self.config, **changes)  # type: ignore[arg-type]
        return SmartIdClient(config, transport=self._transport, sleep=self._sleep)

    def get_certificate(self) -> CertificateRequest:
        """Start a certificate-choice request."""
        return CertificateRequest(self.config, self._transport, sleep=self._sleep)

    def create_signature(self) -> SignatureRequest:
        """Start a signature request."""
        return SignatureRequest(self.config, self._transport, sleep=self._sleep)

    def create_authentication(self) -> AuthenticationRequest:
        """Start an authentication request."""
        return AuthenticationRequest(self.config, self._transport, sleep=self._sleep)
