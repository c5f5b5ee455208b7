"""
HTTP transport for the Smart-ID REST service.

Plain ``urllib.request`` with two safety rails:

- redirects from HTTPS to HTTP are refused;
- response bodies are read with a size limit.

Non-2xx responses are returned as :class:`HttpResponse` values rather
than raised: the service encodes meaning in status codes (403, 404, 480,
580) and classifying them is the parser's job, not the transport's.

Public API:
- http_get / http_post for HTTP requests
- require_secure_url for base-URL validation
"""

from __future__ import annotations

__all__ = ["http_get", "http_post", "require_secure_url"]

import logging
import urllib.error
import urllib.request
from typing import TYPE_CHECKING, Protocol
from urllib.parse import urlparse

from ..constants import BYTES_PER_MB, DEFAULT_TIMEOUT_HTTP, MAX_RESPONSE_SIZE, RECV_BUFFER_SIZE
from ..errors import TransportError
from .protocol import HttpResponse

if TYPE_CHECKING:
    import http.client

_logger = logging.getLogger(__name__)

_LOOPBACK_HOSTS = frozenset(("localhost", "127.0.0.1", "::1"))


def require_secure_url(url: str) -> None:
    """Reject URLs that would send relying-party data over plaintext.

    ``http://`` is tolerated only for loopback hosts (local test servers).

    Raises:
        TransportError: If the URL is not https (or loopback http), or
            has no hostname.
    """
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    host = parsed.hostname
    if not host:
        raise TransportError(f"Cannot extract hostname from URL: {url}")
    if scheme == "https":
        return
    if scheme == "http" and host in _LOOPBACK_HOSTS:
        return
    raise TransportError(
        f"Only HTTPS URLs are allowed (got {scheme}://{host}). "
        "Relying-party requests must not be sent over unencrypted connections."
    )


class _Readable(Protocol):
    def read(self, amt: int = ...) -> bytes: ...


def _read_with_limit(response: _Readable, url: str) -> bytes:
    """Read an HTTP response body with size limit to prevent memory exhaustion."""
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = response.read(RECV_BUFFER_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > MAX_RESPONSE_SIZE:
            raise TransportError(
                f"Response from {url} exceeds {MAX_RESPONSE_SIZE // BYTES_PER_MB} MB limit"
            )
        chunks.append(chunk)
    return b"".join(chunks)


class _SafeRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler that refuses HTTPS to HTTP downgrades."""

    def redirect_request(  # type: ignore[override]  # urllib stubs use incompatible signature
        self,
        req: urllib.request.Request,
        fp: http.client.HTTPResponse,
        code: int,
        msg: str,
        headers: http.client.HTTPMessage,
        newurl: str,
    ) -> urllib.request.Request | None:
        parsed_orig = urlparse(req.full_url)
        parsed_new = urlparse(newurl)
        if parsed_orig.scheme == "https" and parsed_new.scheme == "http":
            raise TransportError(f"Refused redirect from HTTPS to HTTP: {newurl}")
        return super().redirect_request(req, fp, code, msg, headers, newurl)


_safe_opener = urllib.request.build_opener(_SafeRedirectHandler)


def _safe_urlopen(request: urllib.request.Request, *, timeout: float) -> http.client.HTTPResponse:
    """Open a Request with safe redirect handling.

    Thin wrapper to simplify testing.
    """
    return _safe_opener.open(request, timeout=timeout)


def _send(request: urllib.request.Request, timeout: float) -> HttpResponse:
    """Send a prepared request and return its status and body."""
    url = request.full_url
    try:
        with _safe_urlopen(request, timeout=timeout) as response:
            body = _read_with_limit(response, url)
            return HttpResponse(status=response.status, body=body)
    except urllib.error.HTTPError as exc:
        # Non-2xx: hand the status to the classifier instead of failing here
        try:
            body = _read_with_limit(exc, url)
        except OSError:
            body = b""
        finally:
            exc.close()
        _logger.debug("%s %s -> HTTP %d", request.get_method(), url, exc.code)
        return HttpResponse(status=exc.code, body=body)
    except urllib.error.URLError as exc:
        if isinstance(exc.reason, TimeoutError):
            raise TransportError(
                f"Connection timed out after {timeout:g}s: {url}",
                retryable=True,
            ) from exc
        raise TransportError(f"HTTP request failed: {url}: {exc.reason}") from exc
    except TimeoutError as exc:
        raise TransportError(
            f"Connection timed out after {timeout:g}s: {url}",
            retryable=True,
        ) from exc
    except OSError as exc:
        raise TransportError(f"Connection failed: {url}: {exc}", retryable=True) from exc


def http_get(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_HTTP,
) -> HttpResponse:
    """
    Send an HTTP GET.

    Args:
        url: Target URL, query string included.
        headers: Additional HTTP headers.
        timeout: Socket timeout in seconds.

    Returns:
        HttpResponse for any status code the server answered with.

    Raises:
        TransportError: On connection failures, timeouts, or refused redirects.
    """
    require_secure_url(url)
    _logger.debug("GET %s (timeout=%gs)", url, timeout)
    request = urllib.request.Request(url, method="GET", headers=headers or {})  # noqa: S310 -- URL scheme validated by require_secure_url
    response = _send(request, timeout)
    _logger.debug("GET %s -> %d, %d bytes", url, response.status, len(response.body))
    return response


def http_post(
    url: str,
    body: bytes,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_HTTP,
) -> HttpResponse:
    """
    Send an HTTP POST.

    Args:
        url: Target URL.
        body: Request body bytes.
        headers: Additional HTTP headers.
        timeout: Socket timeout in seconds.

    Returns:
        HttpResponse for any status code the server answered with.

    Raises:
        TransportError: On connection failures, timeouts, or refused redirects.
    """
    require_secure_url(url)
    _logger.debug("POST %s (timeout=%gs, %d bytes)", url, timeout, len(body))
    request = urllib.request.Request(url, data=body, method="POST", headers=headers or {})  # noqa: S310 -- URL scheme validated by require_secure_url
    response = _send(request, timeout)
    _logger.debug("POST %s -> %d, %d bytes", url, response.status, len(response.body))
    return response
