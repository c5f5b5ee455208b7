"""Shared test fixtures for the Smart-ID client test suite."""

from __future__ import annotations

import base64
import json

import pytest

from smartid.config import ClientConfig
from smartid.network.protocol import HttpResponse

# Self-signed test certificate, subject:
# C=EE, O=AS Sertifitseerimiskeskus, OU=SIGNATURE, CN=TESTNUMBER,OK,
# SN=TESTNUMBER, GN=OK, serialNumber=PNOEE-31111111111
TEST_CERT_B64 = (
    "MIIDFjCCAn+gAwIBAgIUATs6rldg8rmtFEEHaCnxIXYOHukwDQYJKoZIhvcNAQELBQAwgZsx"
    "CzAJBgNVBAYTAkVFMSIwIAYDVQQKDBlBUyBTZXJ0aWZpdHNlZXJpbWlza2Vza3VzMRIwEAYD"
    "VQQLDAlTSUdOQVRVUkUxFjAUBgNVBAMMDVRFU1ROVU1CRVIsT0sxEzARBgNVBAQMClRFU1RO"
    "VU1CRVIxCzAJBgNVBCoMAk9LMRowGAYDVQQFExFQTk9FRS0zMTExMTExMTExMTAgFw0yNjEw"
    "MTkwOTM1NDNaGA8yMTI2MDkyNTA5MzU0M1owgZsxCzAJBgNVBAYTAkVFMSIwIAYDVQQKDBlB"
    "UyBTZXJ0aWZpdHNlZXJpbWlza2Vza3VzMRIwEAYDVQQLDAlTSUdOQVRVUkUxFjAUBgNVBAMM"
    "DVRFU1ROVU1CRVIsT0sxEzARBgNVBAQMClRFU1ROVU1CRVIxCzAJBgNVBCoMAk9LMRowGAYD"
    "VQQFExFQTk9FRS0zMTExMTExMTExMTCBnzANBgkqhkiG9w0BAQEFAAOBjQAwgYkCgYEA0Zmd"
    "ttmkSQM58CQ+L+QUqTurhKF6OaI+fPhN2qtNHrwDw2dmS4KZvZqzlUzFXlPEa1CBKrPSj6NM"
    "PT6MGYY2t0Z2UTPsSIjw022SGKVZ4CCNewHLTFfnUJdIBd+hcCeP/kTPHfAsMqeoha4oy1qq"
    "c+H6u0bYF/Ay0Cm5kLosW48CAwEAAaNTMFEwHQYDVR0OBBYEFL0Aq40esMTeRmbhyVOct0mX"
    "i5yAMB8GA1UdIwQYMBaAFL0Aq40esMTeRmbhyVOct0mXi5yAMA8GA1UdEwEB/wQFMAMBAf8w"
    "DQYJKoZIhvcNAQELBQADgYEAro66F6lVOJboc1pd1YM/bun5LrRdCU6h5FjQf5/JYNm1eVJB"
    "b3uZs2dOFnvPpkd7bo67uEPh5uBfcLx40VPP7umZfL2LaYITgaqENrvHTwfETE0J3CWjtwUX"
    "uqo/Us4LSHFV3olqqck/E8GqWUzfklzl0zz7QVSNIKb73k9ofZE="
)

SIGNATURE_B64 = "luvjsi1+1iLN9yfDFEh/BE8hXo1oQg=="

RP_UUID = "de305d54-75b4-431b-adb2-eb6b9e546014"
RP_NAME = "BANK123"
HOST_URL = "https://sid.example.com/v1"


class ScriptedTransport:
    """SessionTransport double that replays queued responses in order.

    Queued items are HttpResponse objects or exceptions to raise.
    Every call is recorded in ``calls`` as (method, path, body_or_params, timeout).
    """

    def __init__(self) -> None:
        self.post_queue: list[HttpResponse | Exception] = []
        self.get_queue: list[HttpResponse | Exception] = []
        self.calls: list[tuple[str, str, object, float]] = []

    @staticmethod
    def _response(status: int, payload: object) -> HttpResponse:
        if isinstance(payload, bytes):
            return HttpResponse(status, payload)
        return HttpResponse(status, json.dumps(payload).encode("utf-8"))

    def queue_post(self, status: int, payload: object = None) -> None:
        self.post_queue.append(self._response(status, payload if payload is not None else {}))

    def queue_get(self, status: int, payload: object = None) -> None:
        self.get_queue.append(self._response(status, payload if payload is not None else {}))

    def queue_get_error(self, exc: Exception) -> None:
        self.get_queue.append(exc)

    @staticmethod
    def _next(queue: list[HttpResponse | Exception]) -> HttpResponse:
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post_json(self, path, payload, timeout):
        self.calls.append(("POST", path, payload, timeout))
        return self._next(self.post_queue)

    def get_json(self, path, params, timeout):
        self.calls.append(("GET", path, params, timeout))
        return self._next(self.get_queue)

    @property
    def get_calls(self):
        return [c for c in self.calls if c[0] == "GET"]

    @property
    def post_calls(self):
        return [c for c in self.calls if c[0] == "POST"]


def _complete_status(
    end_result="OK",
    *,
    document_number="PNOEE-31111111111",
    cert=True,
    cert_level="QUALIFIED",
    signature=False,
    algorithm="sha256WithRSAEncryption",
):
    payload: dict[str, object] = {"state": "COMPLETE", "result": {"endResult": end_result}}
    if document_number is not None:
        payload["result"]["documentNumber"] = document_number  # type: ignore[index]
    if cert:
        payload["cert"] = {"value": TEST_CERT_B64, "certificateLevel": cert_level}
    if signature:
        payload["signature"] = {"value": SIGNATURE_B64, "algorithm": algorithm}
    return payload


@pytest.fixture
def cert_b64():
    return TEST_CERT_B64


@pytest.fixture
def cert_der():
    return base64.b64decode(TEST_CERT_B64)


@pytest.fixture
def signature_b64():
    return SIGNATURE_B64


@pytest.fixture
def config():
    """Client config with zero poll sleep, pointing at a fake host."""
    return ClientConfig(
        relying_party_uuid=RP_UUID,
        relying_party_name=RP_NAME,
        host_url=HOST_URL,
        poll_sleep=0.0,
    )


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def complete_status():
    """Factory for COMPLETE session status payloads."""
    return _complete_status


@pytest.fixture
def running_status():
    return {"state": "RUNNING"}
