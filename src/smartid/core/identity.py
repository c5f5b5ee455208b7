"""Identity selectors: who an operation is addressed to."""

from __future__ import annotations

__all__ = ["DocumentNumber", "IdentitySelector", "NationalIdentity"]

import re
from dataclasses import dataclass
from urllib.parse import quote

from ..errors import BuilderValidationError

_COUNTRY_CODE_PATTERN = re.compile(r"[A-Z]{2}")


@dataclass(frozen=True)
class DocumentNumber:
    """A Smart-ID document number, e.g. ``PNOEE-31111111111``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise BuilderValidationError("Document number must not be empty.")

    @property
    def path(self) -> str:
        return f"document/{quote(self.value, safe='')}"


@dataclass(frozen=True)
class NationalIdentity:
    """A country code plus national identity number (personal code)."""

    country_code: str
    identity_number: str

    def __post_init__(self) -> None:
        if not self.country_code or not _COUNTRY_CODE_PATTERN.fullmatch(self.country_code):
            raise BuilderValidationError(
                f"Country code must be two uppercase letters, got {self.country_code!r}."
            )
        if not self.identity_number or not self.identity_number.strip():
            raise BuilderValidationError("National identity number must not be empty.")

    @property
    def path(self) -> str:
        return f"pno/{self.country_code}/{quote(self.identity_number, safe='')}"


IdentitySelector = DocumentNumber | NationalIdentity
