"""
Registration validation — Pydantic v2 field rules plus the cross-field
sport / partner checks.

Every check runs on every submission so the caller receives the complete
error set in one pass. Field-level rules live on RegistrationData; the
sport and partner rules are plain functions over the normalized selection.
"""
from __future__ import annotations

import re
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from spardha.catalog import CATALOG, SportCatalog
from spardha.errors import (
    PARTNER_MISMATCH_MESSAGE,
    ErrorKind,
    ErrorSet,
    FieldError,
)
from spardha.normalizer import PartnerEntry, SportSelection

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MAX_LEN    = 100
COURSE_MAX_LEN  = 100
EMAIL_MAX_LEN   = 255
PARTNER_MAX_LEN = 100
NOTES_MAX_LEN   = 1000
YEAR_MIN, YEAR_MAX = 1, 4

PERSONAL_FIELDS = ("name", "email", "course", "year", "gender", "notes")

REQUIRED_MESSAGES = {
    "name":   "Name is required",
    "email":  "Email is required",
    "course": "Course is required",
    "year":   "Year is required",
    "gender": "Gender is required",
    "sports": "At least one sport must be selected",
}

# Fallback messages for Pydantic's built-in type errors
FORMAT_MESSAGES = {
    "name":   "Name must be text",
    "email":  "Please enter a valid email address",
    "course": "Course must be text",
    "year":   "Year must be a whole number between 1 and 4",
    "gender": "Gender must be either boy or girl",
    "notes":  "Notes must be text",
}


def _missing(field_name: str) -> PydanticCustomError:
    return PydanticCustomError("missing_field", REQUIRED_MESSAGES[field_name])


def _invalid(message: str) -> PydanticCustomError:
    return PydanticCustomError("invalid_format", message)


def normalize_email(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


class RegistrationData(BaseModel):
    """
    Personal details of a registration, validated before writing to DB.

    Attributes
    ----------
    name    : Registrant name (1–100 chars, trimmed)
    email   : Contact email (trimmed, lower-cased, local@domain.tld)
    course  : Course of study (1–100 chars, trimmed)
    year    : Year of study (1–4)
    gender  : "boy" or "girl"
    notes   : Optional free text (≤1000 chars)
    """

    name:   str
    email:  str
    course: str
    year:   int
    gender: Literal["boy", "girl"]
    notes:  Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise _missing("name")
        if len(v) > NAME_MAX_LEN:
            raise _invalid("Name cannot be more than 100 characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = normalize_email(v)
        if not v:
            raise _missing("email")
        if len(v) > EMAIL_MAX_LEN or not EMAIL_RE.match(v):
            raise _invalid("Please enter a valid email address")
        return v

    @field_validator("course")
    @classmethod
    def validate_course(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise _missing("course")
        if len(v) > COURSE_MAX_LEN:
            raise _invalid("Course cannot be more than 100 characters")
        return v

    @field_validator("year", mode="before")
    @classmethod
    def strip_year(cls, v: Any) -> Any:
        # Form clients send the year as text; booleans are not years
        if isinstance(v, bool):
            raise _invalid(FORMAT_MESSAGES["year"])
        return v.strip() if isinstance(v, str) else v

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        if v < YEAR_MIN:
            raise _invalid("Year must be at least 1")
        if v > YEAR_MAX:
            raise _invalid("Year must be at most 4")
        return v

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if len(v) > NOTES_MAX_LEN:
            raise _invalid("Notes cannot exceed 1000 characters")
        return v or None


@dataclass(frozen=True)
class ValidatedRegistration:
    """A fully-checked registration, ready to be persisted."""

    name:              str
    email:             str
    course:            str
    year:              int
    gender:            str
    sports:            Tuple[str, ...]
    partners:          Tuple[PartnerEntry, ...]
    notes:             Optional[str]
    status:            str
    registration_date: datetime
    last_updated:      datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ── Field checks ──────────────────────────────────────────────────────────────

def _present(value: Any) -> bool:
    return value is not None and not (isinstance(value, str) and value == "")


def check_personal_fields(raw: Mapping) -> Tuple[Optional[RegistrationData], ErrorSet]:
    """Run the RegistrationData model and translate Pydantic errors into an ErrorSet."""
    payload = {k: raw[k] for k in PERSONAL_FIELDS if k in raw and _present(raw[k])}
    try:
        return RegistrationData(**payload), {}
    except ValidationError as exc:
        errors: ErrorSet = {}
        for err in exc.errors():
            field_name = str(err["loc"][0]) if err["loc"] else "__all__"
            if field_name in errors:
                continue
            errors[field_name] = _translate(field_name, err)
        return None, errors


def _translate(field_name: str, err: dict) -> FieldError:
    kind_name = err["type"]
    if kind_name == "missing":
        return FieldError(
            ErrorKind.MISSING_FIELD,
            REQUIRED_MESSAGES.get(field_name, f"{field_name.capitalize()} is required"),
        )
    if kind_name == "missing_field":
        return FieldError(ErrorKind.MISSING_FIELD, err["msg"])
    if kind_name == "invalid_format":
        return FieldError(ErrorKind.INVALID_FORMAT, err["msg"])
    return FieldError(
        ErrorKind.INVALID_FORMAT,
        FORMAT_MESSAGES.get(field_name, err["msg"]),
    )


def check_sports(
    sports: Sequence[str],
    catalog: SportCatalog = CATALOG,
) -> Optional[FieldError]:
    if not sports:
        return FieldError(ErrorKind.MISSING_FIELD, REQUIRED_MESSAGES["sports"])
    unknown = [s for s in sports if not catalog.is_valid_sport(s)]
    if unknown:
        return FieldError(
            ErrorKind.INVALID_SPORT,
            f"One or more selected sports are invalid: {', '.join(unknown)}",
        )
    return None


def check_partners(
    sports: Sequence[str],
    partners: Sequence[PartnerEntry],
    catalog: SportCatalog = CATALOG,
) -> Optional[FieldError]:
    """
    Every partner-requiring selected sport must have exactly one partner
    entry, and there must be no entries for any other sport.
    """
    required = {s for s in sports if catalog.requires_partner(s)}
    counts = Counter(p.sport for p in partners)
    if len(partners) != len(required) or any(counts[s] != 1 for s in required):
        return FieldError(ErrorKind.PARTNER_MISMATCH, PARTNER_MISMATCH_MESSAGE)
    if any(len(p.name) > PARTNER_MAX_LEN for p in partners):
        return FieldError(ErrorKind.INVALID_FORMAT, "Partner name is too long")
    return None


def validate_draft(
    raw: Mapping,
    selection: SportSelection,
    catalog: SportCatalog = CATALOG,
    status: str = "pending",
) -> Tuple[Optional[ValidatedRegistration], ErrorSet]:
    """
    Validate a normalized draft. Returns (registration, {}) on success or
    (None, errors) with every violated field.
    """
    data, errors = check_personal_fields(raw)

    sports_error = check_sports(selection.sports, catalog)
    if sports_error:
        errors["sports"] = sports_error

    partners_error = check_partners(selection.sports, selection.partners, catalog)
    if partners_error:
        errors["partners"] = partners_error

    if errors or data is None:
        return None, errors

    now = utcnow()
    return ValidatedRegistration(
        name=data.name,
        email=data.email,
        course=data.course,
        year=data.year,
        gender=data.gender,
        sports=tuple(dict.fromkeys(selection.sports)),
        partners=selection.partners,
        notes=data.notes,
        status=status,
        registration_date=now,
        last_updated=now,
    ), {}
