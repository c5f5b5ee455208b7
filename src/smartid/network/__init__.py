"""Network transport and Smart-ID REST protocol layer."""

from __future__ import annotations

from .protocol import HttpResponse, SessionTransport
from .rest_transport import RestSessionTransport

__all__ = ["HttpResponse", "RestSessionTransport", "SessionTransport"]
