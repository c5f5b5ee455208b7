"""
Library-wide constants for the Smart-ID client.

Timeouts, polling intervals, field limits and environment variable
names are centralized here.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("smartid-client")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.3.0"

__all__ = [
    "BYTES_PER_MB",
    "CERTIFICATE_LEVELS",
    "DEFAULT_CERTIFICATE_LEVEL",
    "DEFAULT_POLL_SLEEP",
    "DEFAULT_SOCKET_OPEN_TIME",
    "DEFAULT_TIMEOUT_HTTP",
    "ENV_POLL_SLEEP",
    "ENV_RP_NAME",
    "ENV_RP_UUID",
    "ENV_SOCKET_OPEN_TIME",
    "ENV_URL",
    "HTTP_CLIENT_TOO_OLD",
    "HTTP_FORBIDDEN",
    "HTTP_NOT_FOUND",
    "HTTP_SERVICE_MAINTENANCE",
    "MAX_DISPLAY_TEXT_LENGTH",
    "MAX_NONCE_LENGTH",
    "MAX_POLL_SLEEP",
    "MAX_RESPONSE_SIZE",
    "MAX_SOCKET_OPEN_TIME",
    "MIN_POLL_SLEEP",
    "MIN_SOCKET_OPEN_TIME",
    "NONCE_PATTERN",
    "POLL_TIMEOUT_MARGIN",
    "RECV_BUFFER_SIZE",
    "RESPONSE_PREVIEW_LENGTH",
    "VERIFICATION_CODE_MODULUS",
    "__version__",
]

# ── Timeout values (seconds) ──────────────────────────────────────────

# Timeout for session-creating POST requests
DEFAULT_TIMEOUT_HTTP = 30

# How long the server may hold a session status request open
DEFAULT_SOCKET_OPEN_TIME = 30.0

# Client-side pause between two RUNNING status responses
DEFAULT_POLL_SLEEP = 1.0

# Added to the socket-open time to get the read timeout of a status query,
# so the server always answers before the client gives up
POLL_TIMEOUT_MARGIN = 5

MIN_POLL_SLEEP = 0.0
MAX_POLL_SLEEP = 60.0
MIN_SOCKET_OPEN_TIME = 1.0
MAX_SOCKET_OPEN_TIME = 120.0


# ── Size limits (bytes) ───────────────────────────────────────────────

BYTES_PER_MB = 1024 * 1024

# Session responses carry at most a certificate and a signature
MAX_RESPONSE_SIZE = 1 * BYTES_PER_MB

RECV_BUFFER_SIZE = 8192

# Response body truncation length for error messages (characters)
RESPONSE_PREVIEW_LENGTH = 300


# ── Protocol constants ────────────────────────────────────────────────

CERTIFICATE_LEVELS = ("ADVANCED", "QUALIFIED")
DEFAULT_CERTIFICATE_LEVEL = "QUALIFIED"

MAX_NONCE_LENGTH = 30
NONCE_PATTERN = r"[A-Za-z0-9_-]+"

MAX_DISPLAY_TEXT_LENGTH = 60

VERIFICATION_CODE_MODULUS = 10000

HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_CLIENT_TOO_OLD = 480
HTTP_SERVICE_MAINTENANCE = 580


# ── Environment variable names ──────────────────────────────────────

ENV_URL = "SMARTID_URL"
ENV_RP_UUID = "SMARTID_RELYING_PARTY_UUID"
ENV_RP_NAME = "SMARTID_RELYING_PARTY_NAME"
ENV_POLL_SLEEP = "SMARTID_POLL_SLEEP"
ENV_SOCKET_OPEN_TIME = "SMARTID_SOCKET_OPEN_TIME"
