# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""
Subject field extraction from Smart-ID certificates.

Smart-ID puts the document's identifier into the subject's
``serialNumber`` attribute (e.g. ``PNOEE-31111111111``). That value is
the fallback document number when a session status omits
``result.documentNumber``. No chain or trust validation happens here.
"""

from __future__ import annotations

__all__ = ["document_number_from_certificate", "extract_cert_info"]

import datetime
import logging

from asn1crypto import x509 as asn1_x509

from ..errors import CertificateError

_logger = logging.getLogger(__name__)

# OIDs for the subject fields Smart-ID certificates carry
_OID_CN = "2.5.4.3"
_OID_SERIAL_NUMBER = "2.5.4.5"
_OID_COUNTRY = "2.5.4.6"
_OID_GIVEN_NAME = "2.5.4.42"
_OID_SURNAME = "2.5.4.4"


def _load_certificate(cert_der: bytes) -> asn1_x509.Certificate:
    try:
        cert = asn1_x509.Certificate.load(cert_der)
        # Force parsing now; asn1crypto loads lazily
        _ = cert.subject.native
    except (ValueError, TypeError, OSError) as e:
        raise CertificateError(f"Failed to parse X.509 certificate: {e}") from e
    return cert


def _warn_if_outside_validity(cert: asn1_x509.Certificate) -> None:
    try:
        not_before = cert.not_valid_before
        not_after = cert.not_valid_after
        now = datetime.datetime.now(datetime.timezone.utc)
        if not_before and now < not_before:
            _logger.warning("Certificate is not yet valid (notBefore: %s)", not_before)
        elif not_after and now > not_after:
            _logger.warning("Certificate has expired (notAfter: %s)", not_after)
    except (KeyError, TypeError, ValueError) as e:
        _logger.debug("Cannot check certificate validity dates: %s", e)


def extract_cert_info(cert_der: bytes) -> dict[str, str | None]:
    """
    Extract subject fields from a DER-encoded X.509 certificate.

    Args:
        cert_der: Raw DER certificate bytes.

    Returns:
        dict with keys: name (CN), given_name, surname, serial_number,
        country, dn (full subject, human-friendly).

    Raises:
        CertificateError: If the bytes are not a parseable certificate.
    """
    cert = _load_certificate(cert_der)
    _warn_if_outside_validity(cert)

    fields: dict[str, str | None] = {
        "name": None,
        "given_name": None,
        "surname": None,
        "serial_number": None,
        "country": None,
    }
    oid_map = {
        _OID_CN: "name",
        _OID_GIVEN_NAME: "given_name",
        _OID_SURNAME: "surname",
        _OID_SERIAL_NUMBER: "serial_number",
        _OID_COUNTRY: "country",
    }

    for rdn in cert.subject.chosen:
        for attr in rdn:
            oid = attr["type"].dotted
            if oid in oid_map:
                fields[oid_map[oid]] = attr["value"].native

    fields["dn"] = cert.subject.human_friendly
    return fields


def document_number_from_certificate(cert_der: bytes) -> str:
    """
    Read the document number from the certificate subject's serialNumber.

    Raises:
        CertificateError: If the certificate cannot be parsed or has no
            subject serialNumber.
    """
    serial = extract_cert_info(cert_der)["serial_number"]
    if not serial:
        raise CertificateError("Certificate subject has no serialNumber.")
    return serial
