"""
Registration service — normalization, validation and all database
operations for registrations.

All functions receive an AsyncSession parameter and are intentionally
pure async functions (no class coupling) for easy unit testing.

Entry points
------------
normalize_and_validate  raw payload → (ValidatedRegistration | None, errors)
submit_registration     normalize_and_validate + write (submission path)
update_registration     full re-validation of an admin edit
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spardha.catalog import CATALOG, SportCatalog
from spardha.errors import (
    DUPLICATE_EMAIL_MESSAGE,
    DuplicateEmailError,
    ErrorKind,
    ErrorSet,
    FieldError,
    InvalidFieldError,
    MalformedPartnerEncodingError,
    RegistrationNotFoundError,
)
from spardha.models.models import (
    Registration,
    RegistrationPartner,
    RegistrationSport,
    RegistrationStatus,
)
from spardha.normalizer import PartnerEntry, normalize_selection
from spardha.validators import (
    NOTES_MAX_LEN,
    ValidatedRegistration,
    normalize_email,
    utcnow,
    validate_draft,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationFilters:
    """Admin list / export filters. None means "any"."""

    sport:         Optional[str] = None
    year:          Optional[int] = None
    gender:        Optional[str] = None
    status:        Optional[str] = None
    partner_sport: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any((self.sport, self.year, self.gender, self.status, self.partner_sport))

    def describe(self, catalog: SportCatalog = CATALOG) -> str:
        """One-line human summary, e.g. "Sport: Badminton Doubles  Year: 2"."""
        parts = []
        if self.sport:
            parts.append(f"Sport: {catalog.label(self.sport)}")
        if self.year:
            parts.append(f"Year: {self.year}")
        if self.gender:
            parts.append(f"Gender: {self.gender}")
        if self.status:
            parts.append(f"Status: {self.status}")
        if self.partner_sport:
            parts.append(f"Partner: {catalog.label(self.partner_sport)}")
        return "  ".join(parts)


def _with_relations(q):
    return q.options(
        selectinload(Registration.sports),
        selectinload(Registration.partners),
    )


# ── Lookups ───────────────────────────────────────────────────────────────────

async def find_by_email(session: AsyncSession, email: str) -> Optional[Registration]:
    email = normalize_email(email)
    if not email:
        return None
    result = await session.execute(
        _with_relations(select(Registration).where(Registration.email == email))
    )
    return result.scalar_one_or_none()


async def get_registration(
    session: AsyncSession,
    registration_id: int,
) -> Optional[Registration]:
    result = await session.execute(
        _with_relations(select(Registration).where(Registration.id == registration_id))
    )
    return result.scalar_one_or_none()


async def list_registrations(
    session: AsyncSession,
    filters: Optional[RegistrationFilters] = None,
) -> List[Registration]:
    """Registrations matching the filters, newest first."""
    q = _with_relations(select(Registration)).order_by(
        Registration.registration_date.desc(), Registration.id.desc()
    )
    if filters:
        if filters.sport:
            q = q.where(Registration.sports.any(RegistrationSport.sport == filters.sport))
        if filters.partner_sport:
            q = q.where(
                Registration.partners.any(RegistrationPartner.sport == filters.partner_sport)
            )
        if filters.year:
            q = q.where(Registration.year == filters.year)
        if filters.gender:
            q = q.where(Registration.gender == filters.gender)
        if filters.status:
            q = q.where(Registration.status == filters.status)
    result = await session.execute(q)
    return list(result.scalars().all())


async def count_registrations(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Registration.id)))
    return result.scalar_one()


# ── Normalize + validate ──────────────────────────────────────────────────────

async def normalize_and_validate(
    session: AsyncSession,
    raw: Any,
    catalog: SportCatalog = CATALOG,
    exclude_id: Optional[int] = None,
) -> Tuple[Optional[ValidatedRegistration], ErrorSet]:
    """
    Normalize a raw submission and run every validation check, including
    the email-uniqueness lookup. `exclude_id` skips the registration being
    edited when checking uniqueness.
    """
    if not isinstance(raw, Mapping):
        return None, {
            "submission": FieldError(
                ErrorKind.INVALID_FORMAT, "Registration data must be a set of named fields"
            )
        }

    try:
        selection = normalize_selection(raw)
    except MalformedPartnerEncodingError as exc:
        logger.info("Rejected submission with undecodable partner entry")
        return None, exc.as_errors("partners")

    validated, errors = validate_draft(raw, selection, catalog)

    if "email" not in errors:
        existing = await find_by_email(session, raw.get("email"))
        if existing is not None and existing.id != exclude_id:
            errors["email"] = FieldError(ErrorKind.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)

    if errors:
        return None, errors
    return validated, {}


# ── Writes ────────────────────────────────────────────────────────────────────

def _sport_rows(sports: Tuple[str, ...]) -> List[RegistrationSport]:
    return [RegistrationSport(sport=s, position=i) for i, s in enumerate(sports)]


def _partner_rows(partners: Tuple[PartnerEntry, ...]) -> List[RegistrationPartner]:
    return [RegistrationPartner(sport=p.sport, name=p.name) for p in partners]


async def create_registration(
    session: AsyncSession,
    validated: ValidatedRegistration,
) -> Registration:
    """
    Persist a validated registration.

    Raises
    ------
    DuplicateEmailError
        The UNIQUE(email) constraint rejected the write (a concurrent
        submission with the same email won the race).
    """
    reg = Registration(
        name=validated.name,
        email=validated.email,
        course=validated.course,
        year=validated.year,
        gender=validated.gender,
        notes=validated.notes,
        status=validated.status,
        registration_date=validated.registration_date,
        last_updated=validated.last_updated,
        sports=_sport_rows(validated.sports),
        partners=_partner_rows(validated.partners),
    )
    session.add(reg)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateEmailError(validated.email) from exc
    return reg


async def submit_registration(
    session: AsyncSession,
    raw: Any,
    catalog: SportCatalog = CATALOG,
) -> Tuple[Optional[Registration], ErrorSet]:
    """
    Submission path: normalize, validate and write.
    Returns (registration, {}) on success or (None, errors).
    """
    validated, errors = await normalize_and_validate(session, raw, catalog)
    if errors:
        logger.info("Registration rejected: %s", ", ".join(sorted(errors)))
        return None, errors

    try:
        reg = await create_registration(session, validated)
    except DuplicateEmailError as exc:
        logger.info("Registration rejected at write time: duplicate email")
        return None, exc.as_errors("email")

    logger.info("Registration #%d created (%d sports)", reg.id, len(validated.sports))
    return reg, {}


def registration_payload(reg: Registration) -> Dict[str, Any]:
    """Current values in the submission shape; the starting point of an admin edit."""
    return {
        "name":     reg.name,
        "email":    reg.email,
        "course":   reg.course,
        "year":     reg.year,
        "gender":   reg.gender,
        "notes":    reg.notes or "",
        "sports":   reg.sport_ids,
        "partners": [{"sport": p.sport, "name": p.name} for p in reg.partners],
    }


async def _require(session: AsyncSession, registration_id: int) -> Registration:
    reg = await get_registration(session, registration_id)
    if reg is None:
        raise RegistrationNotFoundError(registration_id)
    return reg


async def update_registration(
    session: AsyncSession,
    registration_id: int,
    raw: Any,
    catalog: SportCatalog = CATALOG,
) -> Tuple[Optional[Registration], ErrorSet]:
    """
    Administrative edit: the payload is normalized and validated exactly like
    a new submission. Status and registration date are kept.

    Raises
    ------
    RegistrationNotFoundError
    """
    reg = await _require(session, registration_id)
    validated, errors = await normalize_and_validate(
        session, raw, catalog, exclude_id=registration_id
    )
    if errors:
        return None, errors

    reg.name   = validated.name
    reg.email  = validated.email
    reg.course = validated.course
    reg.year   = validated.year
    reg.gender = validated.gender
    reg.notes  = validated.notes
    reg.last_updated = utcnow()

    # Flush removals before inserting replacements: (registration_id, sport) is unique
    reg.sports.clear()
    reg.partners.clear()
    try:
        await session.flush()
        reg.sports.extend(_sport_rows(validated.sports))
        reg.partners.extend(_partner_rows(validated.partners))
        await session.flush()
    except IntegrityError:
        await session.rollback()
        return None, DuplicateEmailError(validated.email).as_errors("email")

    logger.info("Registration #%d updated", registration_id)
    return reg, {}


async def set_registration_status(
    session: AsyncSession,
    registration_id: int,
    status: str,
) -> Registration:
    if status not in RegistrationStatus.ALL:
        raise InvalidFieldError("status", f"Unknown status: {status}")
    reg = await _require(session, registration_id)
    reg.status = status
    reg.last_updated = utcnow()
    await session.flush()
    logger.info("Registration #%d status → %s", registration_id, status)
    return reg


async def set_registration_notes(
    session: AsyncSession,
    registration_id: int,
    notes: Optional[str],
) -> Registration:
    notes = notes.strip() if notes else ""
    if len(notes) > NOTES_MAX_LEN:
        raise InvalidFieldError("notes", "Notes cannot exceed 1000 characters")
    reg = await _require(session, registration_id)
    reg.notes = notes or None
    reg.last_updated = utcnow()
    await session.flush()
    return reg


async def delete_registration(session: AsyncSession, registration_id: int) -> bool:
    """Delete a registration with its sports and partners. False if it did not exist."""
    reg = await get_registration(session, registration_id)
    if reg is None:
        return False
    await session.delete(reg)
    await session.flush()
    logger.info("Registration #%d deleted", registration_id)
    return True
