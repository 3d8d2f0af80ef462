"""
Integration tests — registration store via registration_service.

Each test function receives a fresh in-memory SQLite database through the
`async_session` fixture defined in conftest.py.  The concurrent-duplicate
test uses `session_factory` (file-backed) so two sessions share one database.

Coverage:
  - normalize_and_validate: non-mapping payload, malformed partner encoding,
    duplicate-email pre-check
  - submit_registration: persisted shape, sport order, partners, repeated sports
  - Duplicate email: pre-check path and write-time constraint path report
    the same error
  - list_registrations filters, count_registrations
  - update_registration (incl. registration_payload round trip),
    set_registration_status, set_registration_notes
  - delete_registration with cascading sports / partners
"""
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from spardha.errors import (
    DUPLICATE_EMAIL_MESSAGE,
    DuplicateEmailError,
    ErrorKind,
    InvalidFieldError,
    RegistrationNotFoundError,
)
from spardha.models.models import RegistrationPartner, RegistrationSport, RegistrationStatus
from spardha.services.registration_service import (
    RegistrationFilters,
    count_registrations,
    create_registration,
    delete_registration,
    find_by_email,
    get_registration,
    list_registrations,
    normalize_and_validate,
    registration_payload,
    set_registration_notes,
    set_registration_status,
    submit_registration,
    update_registration,
)


# ─────────────────────────── Helpers ──────────────────────────────────────────

async def _submit(session, payload):
    reg, errors = await submit_registration(session, payload)
    assert errors == {}, errors
    await session.commit()
    return reg


async def _seed(session, make_payload):
    """Three registrations across years, genders and sports."""
    a = await _submit(session, make_payload(
        name="Asha", email="asha@example.com", year="2", gender="girl",
        sports=["cricket", "badminton-doubles"],
        partners=[{"sport": "badminton-doubles", "name": "Meera"}],
    ))
    b = await _submit(session, make_payload(
        name="Bharat", email="bharat@example.com", year="1", gender="boy",
        sports=["cricket", "100m"], partners=[],
    ))
    c = await _submit(session, make_payload(
        name="Chitra", email="chitra@example.com", year="2", gender="girl",
        sports=["chess-singles"], partners=[],
    ))
    return a, b, c


# ─────────────────────────── normalize_and_validate ───────────────────────────

class TestNormalizeAndValidate:

    async def test_non_mapping_payload(self, async_session) -> None:
        reg, errors = await normalize_and_validate(async_session, ["not", "a", "record"])
        assert reg is None
        assert errors["submission"].kind is ErrorKind.INVALID_FORMAT

    async def test_malformed_partner_encoding_aborts(self, async_session, make_payload) -> None:
        reg, errors = await normalize_and_validate(
            async_session,
            make_payload(name="", partners=['{"sport": "badminton-doubles"']),
        )
        assert reg is None
        assert list(errors) == ["partners"]
        assert errors["partners"].kind is ErrorKind.MALFORMED_PARTNER_ENCODING

    async def test_valid_payload(self, async_session, make_payload) -> None:
        reg, errors = await normalize_and_validate(async_session, make_payload())
        assert errors == {}
        assert reg.email == "asha@example.com"

    async def test_duplicate_email_precheck(self, async_session, make_payload) -> None:
        await _submit(async_session, make_payload())
        reg, errors = await normalize_and_validate(
            async_session, make_payload(email="  ASHA@example.com ")
        )
        assert reg is None
        assert errors["email"].kind is ErrorKind.DUPLICATE_EMAIL
        assert errors["email"].message == DUPLICATE_EMAIL_MESSAGE

    async def test_duplicate_reported_with_other_errors(self, async_session, make_payload) -> None:
        await _submit(async_session, make_payload())
        _, errors = await normalize_and_validate(
            async_session, make_payload(year="9", sports=["hockey"], partners=[])
        )
        assert set(errors) == {"email", "year", "sports"}


# ─────────────────────────── Submission ───────────────────────────────────────

class TestSubmit:

    async def test_submit_persists_registration(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload(
            sports=["relay", "badminton-doubles", "cricket"],
            partners={"badminton-doubles": {"name": " Meera "}},
            notes="  vegetarian lunch  ",
        ))
        assert reg.id is not None
        assert reg.status == RegistrationStatus.PENDING
        assert reg.notes == "vegetarian lunch"

        fetched = await get_registration(async_session, reg.id)
        assert fetched.sport_ids == ["relay", "badminton-doubles", "cricket"]
        assert fetched.partner_for("badminton-doubles") == "Meera"
        assert fetched.partner_for("cricket") is None

    async def test_submit_rejects_invalid(self, async_session, make_payload) -> None:
        reg, errors = await submit_registration(
            async_session, make_payload(sports=["badminton-doubles"], partners=[])
        )
        assert reg is None
        assert errors["partners"].kind is ErrorKind.PARTNER_MISMATCH
        assert await count_registrations(async_session) == 0

    async def test_find_by_email_is_case_insensitive(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        found = await find_by_email(async_session, " Asha@Example.com")
        assert found.id == reg.id
        assert await find_by_email(async_session, "") is None
        assert await find_by_email(async_session, "nobody@example.com") is None

    async def test_second_submission_same_email(self, async_session, make_payload) -> None:
        await _submit(async_session, make_payload())
        reg, errors = await submit_registration(async_session, make_payload(name="Other"))
        assert reg is None
        assert errors["email"].kind is ErrorKind.DUPLICATE_EMAIL
        assert await count_registrations(async_session) == 1

    async def test_repeated_sports_stored_once(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload(
            sports=["cricket", "badminton-doubles", "cricket", " cricket "],
        ))
        fetched = await get_registration(async_session, reg.id)
        assert fetched.sport_ids == ["cricket", "badminton-doubles"]
        rows = await async_session.scalar(
            select(func.count()).select_from(RegistrationSport)
            .where(RegistrationSport.registration_id == reg.id)
        )
        assert rows == 2


# ─────────────────────────── Write-time uniqueness ────────────────────────────

class TestConcurrentDuplicate:

    async def test_constraint_rejects_losing_write(self, session_factory, make_payload) -> None:
        """Both submissions pass the pre-check; the store rejects the second write."""
        payload = make_payload()
        async with session_factory() as s1, session_factory() as s2:
            v1, e1 = await normalize_and_validate(s1, payload)
            v2, e2 = await normalize_and_validate(s2, payload)
            assert e1 == {} and e2 == {}

            await create_registration(s1, v1)
            await s1.commit()

            with pytest.raises(DuplicateEmailError) as exc_info:
                await create_registration(s2, v2)

        assert exc_info.value.kind is ErrorKind.DUPLICATE_EMAIL
        assert exc_info.value.message == DUPLICATE_EMAIL_MESSAGE
        assert exc_info.value.as_errors("email")["email"].message == DUPLICATE_EMAIL_MESSAGE

        async with session_factory() as s3:
            assert await count_registrations(s3) == 1


# ─────────────────────────── Listing ──────────────────────────────────────────

class TestList:

    async def test_list_all_newest_first(self, async_session, make_payload) -> None:
        a, b, c = await _seed(async_session, make_payload)
        regs = await list_registrations(async_session)
        assert [r.id for r in regs] == [c.id, b.id, a.id]
        assert await count_registrations(async_session) == 3

    async def test_filter_by_sport(self, async_session, make_payload) -> None:
        a, b, _ = await _seed(async_session, make_payload)
        regs = await list_registrations(async_session, RegistrationFilters(sport="cricket"))
        assert {r.id for r in regs} == {a.id, b.id}

    async def test_filter_by_year_and_gender(self, async_session, make_payload) -> None:
        a, _, c = await _seed(async_session, make_payload)
        regs = await list_registrations(
            async_session, RegistrationFilters(year=2, gender="girl")
        )
        assert {r.id for r in regs} == {a.id, c.id}

    async def test_filter_by_partner_sport(self, async_session, make_payload) -> None:
        a, _, _ = await _seed(async_session, make_payload)
        regs = await list_registrations(
            async_session, RegistrationFilters(partner_sport="badminton-doubles")
        )
        assert [r.id for r in regs] == [a.id]

    async def test_filter_by_status(self, async_session, make_payload) -> None:
        _, b, _ = await _seed(async_session, make_payload)
        await set_registration_status(async_session, b.id, RegistrationStatus.APPROVED)
        regs = await list_registrations(
            async_session, RegistrationFilters(status=RegistrationStatus.APPROVED)
        )
        assert [r.id for r in regs] == [b.id]

    def test_filters_describe(self) -> None:
        filters = RegistrationFilters(sport="badminton-doubles", year=2)
        assert not filters.is_empty
        assert filters.describe() == "Sport: Badminton Doubles  Year: 2"
        assert RegistrationFilters().is_empty


# ─────────────────────────── Admin edits ──────────────────────────────────────

class TestUpdate:

    async def test_update_replaces_fields_and_selection(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        created_at = reg.registration_date

        updated, errors = await update_registration(async_session, reg.id, make_payload(
            name="Asha V.", year="3",
            sports=["badminton-doubles", "carrom-doubles"],
            partners=[
                {"sport": "badminton-doubles", "name": "Meera"},
                {"sport": "carrom-doubles", "name": "Ravi"},
            ],
        ))
        await async_session.commit()
        assert errors == {}
        assert updated.name == "Asha V."
        assert updated.year == 3
        assert updated.registration_date == created_at
        assert updated.last_updated >= created_at

        fetched = await get_registration(async_session, reg.id)
        assert fetched.sport_ids == ["badminton-doubles", "carrom-doubles"]
        assert fetched.partner_for("carrom-doubles") == "Ravi"

    async def test_update_keeps_own_email(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        _, errors = await update_registration(async_session, reg.id, make_payload(course="MSc"))
        assert errors == {}

    async def test_update_to_taken_email(self, async_session, make_payload) -> None:
        a, b, _ = await _seed(async_session, make_payload)
        updated, errors = await update_registration(
            async_session, b.id, make_payload(email=a.email)
        )
        assert updated is None
        assert errors["email"].kind is ErrorKind.DUPLICATE_EMAIL

    async def test_update_validates_like_submission(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        _, errors = await update_registration(
            async_session, reg.id, make_payload(sports=["cricket"], partners=[
                {"sport": "cricket", "name": "X"},
            ])
        )
        assert errors["partners"].kind is ErrorKind.PARTNER_MISMATCH

    async def test_update_missing(self, async_session, make_payload) -> None:
        with pytest.raises(RegistrationNotFoundError):
            await update_registration(async_session, 999, make_payload())

    async def test_payload_of_registration_resubmits_cleanly(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload(notes="late arrival"))
        fetched = await get_registration(async_session, reg.id)

        payload = registration_payload(fetched)
        assert payload["sports"] == ["cricket", "badminton-doubles"]
        assert payload["partners"] == [{"sport": "badminton-doubles", "name": "Meera"}]
        assert payload["year"] == 2

        payload["course"] = "MSc Physics"
        updated, errors = await update_registration(async_session, reg.id, payload)
        await async_session.commit()
        assert errors == {}
        assert updated.course == "MSc Physics"
        assert updated.notes == "late arrival"
        assert updated.sport_ids == ["cricket", "badminton-doubles"]
        assert updated.partner_for("badminton-doubles") == "Meera"


class TestStatusAndNotes:

    async def test_set_status(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        updated = await set_registration_status(
            async_session, reg.id, RegistrationStatus.WAITLISTED
        )
        assert updated.status == RegistrationStatus.WAITLISTED

    async def test_set_unknown_status(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        with pytest.raises(InvalidFieldError) as exc_info:
            await set_registration_status(async_session, reg.id, "archived")
        assert exc_info.value.field_name == "status"

    async def test_set_status_missing(self, async_session) -> None:
        with pytest.raises(RegistrationNotFoundError):
            await set_registration_status(async_session, 42, RegistrationStatus.APPROVED)

    async def test_set_and_clear_notes(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        updated = await set_registration_notes(async_session, reg.id, "  Needs a locker ")
        assert updated.notes == "Needs a locker"
        cleared = await set_registration_notes(async_session, reg.id, None)
        assert cleared.notes is None

    async def test_notes_too_long(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        with pytest.raises(InvalidFieldError):
            await set_registration_notes(async_session, reg.id, "n" * 1001)


# ─────────────────────────── Delete ───────────────────────────────────────────

class TestDelete:

    async def test_delete_cascades(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        assert await delete_registration(async_session, reg.id) is True
        await async_session.commit()

        assert await get_registration(async_session, reg.id) is None
        sports = await async_session.execute(select(func.count(RegistrationSport.id)))
        partners = await async_session.execute(select(func.count(RegistrationPartner.id)))
        assert sports.scalar_one() == 0
        assert partners.scalar_one() == 0

    async def test_delete_missing(self, async_session) -> None:
        assert await delete_registration(async_session, 12345) is False

    async def test_email_reusable_after_delete(self, async_session, make_payload) -> None:
        reg = await _submit(async_session, make_payload())
        await delete_registration(async_session, reg.id)
        await async_session.commit()
        again, errors = await submit_registration(async_session, make_payload())
        assert errors == {}
        assert again.id is not None
