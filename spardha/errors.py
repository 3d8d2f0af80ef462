"""Registration error kinds and domain exceptions."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class ErrorKind(Enum):
    """Validation / domain error kinds."""

    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FORMAT             = "INVALID_FORMAT"
    INVALID_SPORT              = "INVALID_SPORT"
    PARTNER_MISMATCH           = "PARTNER_MISMATCH"
    DUPLICATE_EMAIL            = "DUPLICATE_EMAIL"
    MALFORMED_PARTNER_ENCODING = "MALFORMED_PARTNER_ENCODING"
    NOT_FOUND                  = "NOT_FOUND"


# User-visible messages shared by every path that can detect the condition
DUPLICATE_EMAIL_MESSAGE  = "A registration with this email already exists."
PARTNER_MISMATCH_MESSAGE = (
    "Each selected partner sport must have exactly one corresponding partner name."
)


@dataclass(frozen=True)
class FieldError:
    """A single failed check on one submission field."""

    kind: ErrorKind
    message: str


ErrorSet = Dict[str, FieldError]


def messages(errors: ErrorSet) -> Dict[str, str]:
    """Project an error set onto field → human-readable message."""
    return {name: err.message for name, err in errors.items()}


@dataclass(frozen=True)
class RegistrationError(Exception):
    """Base domain error with kind and user-safe message."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"

    def as_errors(self, field_name: str) -> ErrorSet:
        return {field_name: FieldError(self.kind, self.message)}


class MalformedPartnerEncodingError(RegistrationError):
    """Raised when a serialized partner entry cannot be decoded."""

    def __init__(self, raw: str) -> None:
        super().__init__(
            kind=ErrorKind.MALFORMED_PARTNER_ENCODING,
            message="Partner entry could not be decoded",
        )
        self.raw = raw


class DuplicateEmailError(RegistrationError):
    """Raised when the store rejects a write for an already-registered email."""

    def __init__(self, email: str) -> None:
        super().__init__(
            kind=ErrorKind.DUPLICATE_EMAIL,
            message=DUPLICATE_EMAIL_MESSAGE,
        )
        self.email = email


class RegistrationNotFoundError(RegistrationError):
    """Raised when an administrative operation targets a missing registration."""

    def __init__(self, registration_id: int) -> None:
        super().__init__(
            kind=ErrorKind.NOT_FOUND,
            message="Registration not found",
        )
        self.registration_id = registration_id


class InvalidFieldError(RegistrationError):
    """Raised when an administrative update carries an invalid value."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(kind=ErrorKind.INVALID_FORMAT, message=message)
        self.field_name = field_name
