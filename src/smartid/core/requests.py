"""
Operation requests and the validating builder they are assembled with.

An :class:`OperationRequest` is the immutable, already-validated body of
one certificate-choice, signature, or authentication call. Builders
(:class:`RequestBuilder` and the facades in :mod:`.operations`) collect
fields through ``with_*`` setters and resolve them into exactly one
identity selector and at most one hash input in :meth:`RequestBuilder.build`.
"""

from __future__ import annotations

__all__ = ["OperationKind", "OperationRequest", "RequestBuilder"]

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from ..constants import (
    CERTIFICATE_LEVELS,
    DEFAULT_CERTIFICATE_LEVEL,
    MAX_DISPLAY_TEXT_LENGTH,
    MAX_NONCE_LENGTH,
    NONCE_PATTERN,
)
from ..errors import BuilderValidationError
from .hashing import HashAlgorithm, PrecomputedHash, RawPayload
from .identity import DocumentNumber, NationalIdentity

if TYPE_CHECKING:
    from ..config import ClientConfig
    from .hashing import HashableInput
    from .identity import IdentitySelector

_B = TypeVar("_B", bound="RequestBuilder")

_logger = logging.getLogger(__name__)

_NONCE_RE = re.compile(NONCE_PATTERN)


class OperationKind(enum.Enum):
    """The three session-creating operations, valued by their URL segment."""

    CERTIFICATE_CHOICE = "certificatechoice"
    SIGNATURE = "signature"
    AUTHENTICATION = "authentication"

    @property
    def requires_hash(self) -> bool:
        return self is not OperationKind.CERTIFICATE_CHOICE


def _validate_nonce(nonce: str) -> None:
    if not 0 < len(nonce) <= MAX_NONCE_LENGTH:
        raise BuilderValidationError(
            f"Nonce must be 1-{MAX_NONCE_LENGTH} characters, got {len(nonce)}."
        )
    if not _NONCE_RE.fullmatch(nonce):
        raise BuilderValidationError(
            "Nonce may only contain letters, digits, '-' and '_'."
        )


def _validate_display_text(text: str) -> None:
    if not 0 < len(text) <= MAX_DISPLAY_TEXT_LENGTH:
        raise BuilderValidationError(
            f"Display text must be 1-{MAX_DISPLAY_TEXT_LENGTH} characters, got {len(text)}."
        )


@dataclass(frozen=True)
class OperationRequest:
    """A validated request, ready to be submitted.

    Attributes:
        kind: Which operation this request starts.
        selector: The identity the request is addressed to.
        relying_party_uuid: Relying-party identifier issued by the service.
        relying_party_name: Relying-party display name.
        certificate_level: Required certificate level.
        hashable: Hash material; required for signature and
            authentication, forbidden for certificate choice.
        nonce: Optional replay-protection token.
        display_text: Optional text shown on the user's device.
    """

    kind: OperationKind
    selector: IdentitySelector
    relying_party_uuid: str
    relying_party_name: str
    certificate_level: str = DEFAULT_CERTIFICATE_LEVEL
    hashable: HashableInput | None = field(default=None, repr=False)
    nonce: str | None = None
    display_text: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.selector, (DocumentNumber, NationalIdentity)):
            raise BuilderValidationError(f"Unsupported identity selector: {self.selector!r}")
        if not self.relying_party_uuid:
            raise BuilderValidationError("Relying party UUID must be set.")
        if not self.relying_party_name:
            raise BuilderValidationError("Relying party name must be set.")
        if self.certificate_level not in CERTIFICATE_LEVELS:
            raise BuilderValidationError(
                f"Certificate level must be one of {', '.join(CERTIFICATE_LEVELS)}, "
                f"got {self.certificate_level!r}."
            )

        if self.kind.requires_hash:
            if not isinstance(self.hashable, (RawPayload, PrecomputedHash)):
                raise BuilderValidationError(f"A {self.kind.value} request needs a hash to sign.")
        elif self.hashable is not None:
            raise BuilderValidationError("A certificate choice request carries no hash.")

        if self.kind is OperationKind.SIGNATURE and not isinstance(self.selector, DocumentNumber):
            raise BuilderValidationError("Signature requests must be addressed by document number.")
        if self.kind is OperationKind.CERTIFICATE_CHOICE and self.display_text is not None:
            raise BuilderValidationError("A certificate choice request carries no display text.")

        if self.nonce is not None:
            _validate_nonce(self.nonce)
        if self.display_text is not None:
            _validate_display_text(self.display_text)

    @property
    def path(self) -> str:
        """Resource path relative to the service base URL."""
        return f"{self.kind.value}/{self.selector.path}"

    @property
    def hash_algorithm(self) -> HashAlgorithm | None:
        return self.hashable.algorithm if self.hashable is not None else None

    def to_payload(self) -> dict[str, str]:
        """Build the JSON request body."""
        payload = {
            "relyingPartyUUID": self.relying_party_uuid,
            "relyingPartyName": self.relying_party_name,
            "certificateLevel": self.certificate_level,
        }
        if self.hashable is not None:
            payload["hash"] = self.hashable.digest_b64
            payload["hashType"] = self.hashable.algorithm.wire_name
        if self.nonce is not None:
            payload["nonce"] = self.nonce
        if self.display_text is not None:
            payload["displayText"] = self.display_text
        return payload


class RequestBuilder:
    """Fluent assembly of an :class:`OperationRequest`.

    Setters only record values; :meth:`build` checks that exactly one
    identity selector and (for hashed operations) exactly one hash input
    were given, then returns the immutable request.
    """

    kind: OperationKind = OperationKind.CERTIFICATE_CHOICE

    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self._document_number: str | None = None
        self._country_code: str | None = None
        self._national_identity_number: str | None = None
        self._national_identity: NationalIdentity | None = None
        self._certificate_level: str | None = None
        self._nonce: str | None = None
        self._display_text: str | None = None
        self._hash_inputs: list[HashableInput] = []

    # ── Identity selectors ──────────────────────────────────────────

    def with_document_number(self: _B, document_number: str) -> _B:
        self._document_number = document_number
        return self

    def with_country_code(self: _B, country_code: str) -> _B:
        self._country_code = country_code
        return self

    def with_national_identity_number(self: _B, identity_number: str) -> _B:
        self._national_identity_number = identity_number
        return self

    def with_national_identity(self: _B, identity: NationalIdentity) -> _B:
        self._national_identity = identity
        return self

    # ── Options ─────────────────────────────────────────────────────

    def with_certificate_level(self: _B, level: str) -> _B:
        self._certificate_level = level
        return self

    def with_nonce(self: _B, nonce: str) -> _B:
        self._nonce = nonce
        return self

    # ── Resolution ──────────────────────────────────────────────────

    def _resolve_selector(self) -> IdentitySelector:
        has_pair = self._country_code is not None or self._national_identity_number is not None
        chosen = [
            name
            for name, is_set in (
                ("document number", self._document_number is not None),
                ("country code + national identity number", has_pair),
                ("national identity", self._national_identity is not None),
            )
            if is_set
        ]
        if not chosen:
            raise BuilderValidationError(
                "Either a document number, a country code with national identity number, "
                "or a national identity must be set."
            )
        if len(chosen) > 1:
            raise BuilderValidationError(
                f"Only one identity selector may be set, got: {', '.join(chosen)}."
            )

        if self._document_number is not None:
            return DocumentNumber(self._document_number)
        if self._national_identity is not None:
            return self._national_identity
        if self._country_code is None or self._national_identity_number is None:
            raise BuilderValidationError(
                "Country code and national identity number must be set together."
            )
        return NationalIdentity(self._country_code, self._national_identity_number)

    def _resolve_hash(self) -> HashableInput | None:
        if not self.kind.requires_hash:
            return None
        if not self._hash_inputs:
            raise BuilderValidationError(f"A {self.kind.value} request needs a hash to sign.")
        if len(self._hash_inputs) > 1:
            raise BuilderValidationError("Only one of raw data or a precomputed hash may be set.")
        return self._hash_inputs[0]

    def build(self) -> OperationRequest:
        """Validate the collected fields and return an immutable request.

        Raises:
            BuilderValidationError: If the fields are incomplete, conflict,
                or break a length/charset rule.
        """
        level = self._certificate_level
        request = OperationRequest(
            kind=self.kind,
            selector=self._resolve_selector(),
            relying_party_uuid=self.config.relying_party_uuid,
            relying_party_name=self.config.relying_party_name,
            certificate_level=level if level is not None else DEFAULT_CERTIFICATE_LEVEL,
            hashable=self._resolve_hash(),
            nonce=self._nonce,
            display_text=self._display_text,
        )
        _logger.debug("Built %s request for %s", request.kind.value, request.path)
        return request
