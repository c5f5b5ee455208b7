"""Tests for smartid.api — SmartIdClient entry point."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

import smartid
from smartid.api import SmartIdClient
from smartid.config import NetworkConfig
from smartid.errors import ConfigError
from smartid.core.operations import AuthenticationRequest, CertificateRequest, SignatureRequest

SESSION_ID = "97f5058e-e308-4c83-ac14-7712b0eb9d86"


def test_public_api_exports():
    for name in smartid.__all__:
        assert hasattr(smartid, name), name


def test_factories_return_fresh_builders(config, transport):
    client = SmartIdClient(config, transport=transport)
    assert isinstance(client.get_certificate(), CertificateRequest)
    assert isinstance(client.create_signature(), SignatureRequest)
    assert isinstance(client.create_authentication(), AuthenticationRequest)
    assert client.get_certificate() is not client.get_certificate()


def test_with_poll_sleep_returns_new_client(config, transport):
    client = SmartIdClient(config, transport=transport)
    slower = client.with_poll_sleep(3.0)
    assert slower is not client
    assert slower.config.poll_sleep == 3.0
    assert client.config.poll_sleep == 0.0


def test_with_socket_open_time(config):
    client = SmartIdClient(config).with_socket_open_time(10.0)
    assert client.config.socket_open_time == 10.0
    assert client.config.socket_open_millis == 10000


def test_with_non_finite_timing_rejected(config):
    client = SmartIdClient(config)
    with pytest.raises(ConfigError, match="Poll sleep"):
        client.with_poll_sleep(float("nan"))
    with pytest.raises(ConfigError, match="Socket open time"):
        client.with_socket_open_time(float("inf"))


def test_with_network(config):
    network = NetworkConfig(headers={"X-Trace": "1"})
    client = SmartIdClient(config).with_network(network)
    assert client.config.network is network


def test_from_env():
    env = {
        "SMARTID_URL": "https://sid.example.com/v1",
        "SMARTID_RELYING_PARTY_UUID": "de305d54-75b4-431b-adb2-eb6b9e546014",
        "SMARTID_RELYING_PARTY_NAME": "BANK123",
    }
    with patch.dict("os.environ", env):
        client = SmartIdClient.from_env(poll_sleep=0.5)
    assert client.config.relying_party_name == "BANK123"
    assert client.config.poll_sleep == 0.5


def test_end_to_end_certificate_then_signature(
    config, transport, running_status, complete_status, signature_b64
):
    sleep = MagicMock()
    client = SmartIdClient(config, transport=transport, sleep=sleep)

    transport.queue_post(200, {"sessionID": SESSION_ID})
    transport.queue_get(200, running_status)
    transport.queue_get(200, complete_status())
    certificate = (
        client.get_certificate()
        .with_country_code("EE")
        .with_national_identity_number("31111111111")
        .with_certificate_level("ADVANCED")
        .fetch()
    )

    transport.queue_post(200, {"sessionID": SESSION_ID})
    transport.queue_get(200, complete_status(signature=True))
    signature = (
        client.create_signature()
        .with_document_number(certificate.document_number)
        .with_data(b"Hello World!")
        .sign()
    )

    assert certificate.document_number == "PNOEE-31111111111"
    assert signature.value_b64 == signature_b64
    assert [c[1] for c in transport.post_calls] == [
        "certificatechoice/pno/EE/31111111111",
        "signature/document/PNOEE-31111111111",
    ]
    assert sleep.call_count == 1
