"""Client configuration: relying party, service URL, polling and network settings."""

from __future__ import annotations

from .config import ClientConfig, NetworkConfig, load_client_config

__all__ = ["ClientConfig", "NetworkConfig", "load_client_config"]
