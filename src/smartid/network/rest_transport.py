"""
REST/JSON session transport.

Implements the SessionTransport protocol on top of :mod:`.transport`.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from ..constants import __version__
from .transport import http_get, http_post, require_secure_url

if TYPE_CHECKING:
    from ..config import NetworkConfig
    from .protocol import HttpResponse

_logger = logging.getLogger(__name__)

_BASE_HEADERS = {
    "Accept": "application/json",
    "User-Agent": f"smartid-client/{__version__}",
}


class RestSessionTransport:
    """JSON-over-HTTPS implementation of SessionTransport.

    Each instance is bound to one base URL and one set of headers; it
    holds no other state and is safe to share between operations.
    """

    def __init__(self, base_url: str, network: NetworkConfig | None = None) -> None:
        """
        Initialize the REST transport.

        Args:
            base_url: Service base URL (e.g. ``https://rp-api.smart-id.com/v1``).
            network: Extra headers and default timeout.
        """
        require_secure_url(base_url)
        self.base_url = base_url.rstrip("/")
        self.headers: dict[str, str] = dict(_BASE_HEADERS)
        if network is not None:
            self.headers.update(network.headers)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def post_json(self, path: str, payload: dict[str, Any], timeout: float) -> HttpResponse:
        """POST ``payload`` as JSON to ``path``."""
        body = json.dumps(payload).encode("utf-8")
        _logger.debug("Submitting JSON to %s: %d bytes", path, len(body))
        headers = {**self.headers, "Content-Type": "application/json; charset=utf-8"}
        return http_post(self._url(path), body, headers=headers, timeout=timeout)

    def get_json(
        self, path: str, params: dict[str, str] | None, timeout: float
    ) -> HttpResponse:
        """GET ``path`` with an optional query string."""
        url = self._url(path)
        if params:
            url = f"{url}?{urlencode(params)}"
        return http_get(url, headers=self.headers, timeout=timeout)
