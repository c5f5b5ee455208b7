"""
Client configuration for the Smart-ID library.

A :class:`ClientConfig` is an immutable value holding the relying-party
identity, the service URL, polling parameters, and a
:class:`NetworkConfig`. It is passed into each operation; nothing here
is global or mutated after construction.

:func:`load_client_config` resolves values from explicit arguments and
environment variables, in that order.
"""

from __future__ import annotations

__all__ = [
    "ClientConfig",
    "NetworkConfig",
    "load_client_config",
]

import logging
import math
import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..constants import (
    DEFAULT_POLL_SLEEP,
    DEFAULT_SOCKET_OPEN_TIME,
    DEFAULT_TIMEOUT_HTTP,
    ENV_POLL_SLEEP,
    ENV_RP_NAME,
    ENV_RP_UUID,
    ENV_SOCKET_OPEN_TIME,
    ENV_URL,
    MAX_POLL_SLEEP,
    MAX_SOCKET_OPEN_TIME,
    MIN_POLL_SLEEP,
    MIN_SOCKET_OPEN_TIME,
)
from ..errors import ConfigError, TransportError
from ..network.transport import require_secure_url

if TYPE_CHECKING:
    from collections.abc import Mapping

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkConfig:
    """Per-operation transport settings.

    Attributes:
        headers: Extra HTTP headers sent with every request
            (e.g. a tracing or API-gateway header).
        timeout: Timeout in seconds for session-creating POST requests.
            Status queries derive their timeout from the socket-open time.
    """

    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    timeout: float = DEFAULT_TIMEOUT_HTTP

    def __post_init__(self) -> None:
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ConfigError(f"Network timeout must be positive, got {self.timeout}")
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def with_headers(self, **headers: str) -> NetworkConfig:
        """Return a copy with additional headers merged in."""
        return replace(self, headers={**self.headers, **headers})


@dataclass(frozen=True)
class ClientConfig:
    """Everything an operation needs besides its own request fields.

    Attributes:
        relying_party_uuid: Relying-party UUID issued by the service operator.
        relying_party_name: Relying-party name shown to the user.
        host_url: Service base URL, e.g. ``https://rp-api.smart-id.com/v1``.
        poll_sleep: Seconds to wait between two RUNNING status responses.
        socket_open_time: Seconds the server may hold a status request open.
        network: Transport settings.
    """

    relying_party_uuid: str
    relying_party_name: str
    host_url: str
    poll_sleep: float = DEFAULT_POLL_SLEEP
    socket_open_time: float = DEFAULT_SOCKET_OPEN_TIME
    network: NetworkConfig = field(default_factory=NetworkConfig)

    def __post_init__(self) -> None:
        if not self.relying_party_uuid:
            raise ConfigError("Relying party UUID is required.")
        if not self.relying_party_name:
            raise ConfigError("Relying party name is required.")
        if not self.host_url:
            raise ConfigError("Service URL is required.")
        if not math.isfinite(self.poll_sleep) or self.poll_sleep < 0:
            raise ConfigError(
                f"Poll sleep must be a finite non-negative number, got {self.poll_sleep}"
            )
        if not math.isfinite(self.socket_open_time) or self.socket_open_time <= 0:
            raise ConfigError(
                f"Socket open time must be a finite positive number, got {self.socket_open_time}"
            )

        try:
            require_secure_url(self.host_url)
        except TransportError as e:
            raise ConfigError(str(e)) from e
        object.__setattr__(self, "host_url", self.host_url.rstrip("/"))

    @property
    def socket_open_millis(self) -> int:
        return int(self.socket_open_time * 1000)


def _env_seconds(name: str, default: float, minimum: float, maximum: float) -> float:
    """Read a seconds value from the environment, falling back on bad input."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        _logger.warning("Invalid %s value %r, using default", name, raw)
        return default
    if not math.isfinite(value) or value < minimum or value > maximum:
        _logger.warning(
            "%s=%s out of range [%s, %s], using default", name, raw, minimum, maximum
        )
        return default
    return value


def load_client_config(
    *,
    relying_party_uuid: str | None = None,
    relying_party_name: str | None = None,
    host_url: str | None = None,
    poll_sleep: float | None = None,
    socket_open_time: float | None = None,
    network: NetworkConfig | None = None,
) -> ClientConfig:
    """
    Resolve a ClientConfig.

    Priority: explicit argument > environment variable > built-in default.

    Environment variables:
        SMARTID_URL, SMARTID_RELYING_PARTY_UUID, SMARTID_RELYING_PARTY_NAME,
        SMARTID_POLL_SLEEP, SMARTID_SOCKET_OPEN_TIME (seconds).

    Raises:
        ConfigError: If the URL, UUID or name cannot be resolved, or a
            resolved value is invalid.
    """
    url = host_url or os.environ.get(ENV_URL, "").strip()
    uuid = relying_party_uuid or os.environ.get(ENV_RP_UUID, "").strip()
    name = relying_party_name or os.environ.get(ENV_RP_NAME, "").strip()

    missing = [
        env
        for env, value in ((ENV_URL, url), (ENV_RP_UUID, uuid), (ENV_RP_NAME, name))
        if not value
    ]
    if missing:
        raise ConfigError(
            f"Smart-ID client is not configured. Pass the values explicitly "
            f"or set {', '.join(missing)}."
        )

    if poll_sleep is None:
        poll_sleep = _env_seconds(
            ENV_POLL_SLEEP, DEFAULT_POLL_SLEEP, MIN_POLL_SLEEP, MAX_POLL_SLEEP
        )
    if socket_open_time is None:
        socket_open_time = _env_seconds(
            ENV_SOCKET_OPEN_TIME,
            DEFAULT_SOCKET_OPEN_TIME,
            MIN_SOCKET_OPEN_TIME,
            MAX_SOCKET_OPEN_TIME,
        )

    config = ClientConfig(
        relying_party_uuid=uuid,
        relying_party_name=name,
        host_url=url,
        poll_sleep=poll_sleep,
        socket_open_time=socket_open_time,
        network=network or NetworkConfig(),
    )
    _logger.debug(
        "Resolved client config: url=%s, poll_sleep=%gs, socket_open_time=%gs",
        config.host_url,
        config.poll_sleep,
        config.socket_open_time,
    )
    return config
