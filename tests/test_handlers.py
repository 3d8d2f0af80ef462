"""
Handler tests — aiogram handlers called directly with mocked Telegram objects.

Coverage:
  - Form submission: HTML replies with escaped user text, emails with
    underscores, registration committed before the confirmation is sent
  - Error list and detail card escaping
  - Admin edit: prompt with the current data, JSON edit applied, invalid
    JSON / validation errors keep the edit open, vanished registration
"""
from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from spardha.errors import ErrorKind, FieldError
from spardha.handlers.admin.panel import (
    cq_registration_edit,
    format_registration_detail,
    msg_registration_edit,
)
from spardha.handlers.registration import format_errors_text, msg_web_app_data
from spardha.keyboards import RegistrationCb
from spardha.services.registration_service import (
    find_by_email,
    get_registration,
    submit_registration,
)
from spardha.states import AdminEditStates

ADMIN_ID = 123456789
TRICKY_NAME = "Tom <b>& Jerry"


# ─────────────────────────── Helpers ──────────────────────────────────────────

def _form_message(payload: dict) -> AsyncMock:
    message = AsyncMock()
    message.from_user.id = 42
    message.web_app_data.data = json.dumps(payload)
    return message


def _text_message(text: str) -> AsyncMock:
    message = AsyncMock()
    message.from_user.id = ADMIN_ID
    message.text = text
    return message


@pytest.fixture
def state() -> FSMContext:
    return FSMContext(
        storage=MemoryStorage(),
        key=StorageKey(bot_id=1, chat_id=ADMIN_ID, user_id=ADMIN_ID),
    )


async def _stored(session, make_payload, **overrides):
    reg, errors = await submit_registration(session, make_payload(**overrides))
    assert errors == {}, errors
    await session.commit()
    return await get_registration(session, reg.id)


# ─────────────────────────── Form submission ──────────────────────────────────

class TestWebAppSubmission:

    async def test_reply_is_html_with_escaped_values(self, session_factory, make_payload) -> None:
        message = _form_message(make_payload(name=TRICKY_NAME, email="john_doe@example.com"))
        async with session_factory() as session:
            await msg_web_app_data(message, session)

        summary = message.answer.call_args_list[-1]
        text = summary.args[0]
        assert summary.kwargs["parse_mode"] == ParseMode.HTML
        assert "Tom &lt;b&gt;&amp; Jerry" in text
        assert TRICKY_NAME not in text
        assert "john_doe@example.com" in text

        async with session_factory() as fresh:
            stored = await find_by_email(fresh, "john_doe@example.com")
        assert stored is not None
        assert stored.name == TRICKY_NAME

    async def test_registration_survives_failed_reply(self, session_factory, make_payload) -> None:
        message = _form_message(make_payload(email="late_reply@example.com"))
        message.answer.side_effect = [None, RuntimeError("Telegram unavailable")]

        async with session_factory() as session:
            with pytest.raises(RuntimeError):
                await msg_web_app_data(message, session)
            await session.rollback()

        async with session_factory() as fresh:
            assert await find_by_email(fresh, "late_reply@example.com") is not None

    async def test_errors_sent_as_html(self, session_factory, make_payload) -> None:
        message = _form_message(make_payload(sports=["<b>x"], partners=[]))
        async with session_factory() as session:
            await msg_web_app_data(message, session)

        reply = message.answer.call_args
        assert reply.kwargs["parse_mode"] == ParseMode.HTML
        assert "&lt;b&gt;x" in reply.args[0]

    async def test_undecodable_form_data(self, async_session) -> None:
        message = AsyncMock()
        message.web_app_data.data = "{not json"
        await msg_web_app_data(message, async_session)
        assert "could not be read" in message.answer.call_args.args[0]


# ─────────────────────────── Texts ────────────────────────────────────────────

class TestTexts:

    def test_error_messages_are_escaped(self) -> None:
        text = format_errors_text({
            "sports": FieldError(ErrorKind.INVALID_SPORT, "One or more selected sports are invalid: <b>x"),
        })
        assert "invalid: &lt;b&gt;x" in text
        assert "<b>Sports:</b>" in text

    async def test_detail_card_escapes_user_values(self, async_session, make_payload) -> None:
        r = await _stored(
            async_session, make_payload,
            name=TRICKY_NAME, course="B.Sc <Hons>", notes="*bring* _kit_ & <shoes>",
            partners=[{"sport": "badminton-doubles", "name": "M<e>era"}],
        )
        text = format_registration_detail(r)
        assert "<b>Tom &lt;b&gt;&amp; Jerry</b>" in text
        assert "B.Sc &lt;Hons&gt;" in text
        assert "M&lt;e&gt;era" in text
        assert "<i>*bring* _kit_ &amp; &lt;shoes&gt;</i>" in text


# ─────────────────────────── Admin edit ───────────────────────────────────────

class TestAdminEdit:

    async def test_prompt_carries_current_data(self, async_session, make_payload, state) -> None:
        r = await _stored(async_session, make_payload, name=TRICKY_NAME)
        callback = AsyncMock()

        await cq_registration_edit(
            callback, RegistrationCb(action="edit", rid=r.id, page=2), async_session, state
        )

        assert await state.get_state() == AdminEditStates.enter_payload.state
        assert await state.get_data() == {"edit_rid": r.id, "edit_page": 2}
        edit = callback.message.edit_text.call_args
        assert edit.kwargs["parse_mode"] == ParseMode.HTML
        prompt = edit.args[0]
        assert "<pre>" in prompt
        assert "Tom &lt;b&gt;&amp; Jerry" in prompt
        assert "badminton-doubles" in prompt

    async def test_prompt_for_missing_registration(self, async_session, state) -> None:
        callback = AsyncMock()
        await cq_registration_edit(
            callback, RegistrationCb(action="edit", rid=999), async_session, state
        )
        callback.answer.assert_awaited_once_with("Registration not found.", show_alert=True)
        assert await state.get_state() is None

    async def test_edit_applied(self, async_session, make_payload, state) -> None:
        r = await _stored(async_session, make_payload)
        await state.set_state(AdminEditStates.enter_payload)
        await state.update_data(edit_rid=r.id, edit_page=0)

        edited = make_payload(
            name="Asha V.", year=3, sports=["chess-singles"], partners=[],
        )
        message = _text_message(json.dumps(edited))
        await msg_registration_edit(message, async_session, state)

        assert await state.get_state() is None
        assert message.answer.call_args.kwargs["parse_mode"] == ParseMode.HTML
        fetched = await get_registration(async_session, r.id)
        assert fetched.name == "Asha V."
        assert fetched.year == 3
        assert fetched.sport_ids == ["chess-singles"]
        assert fetched.partners == []

    async def test_invalid_json_keeps_edit_open(self, async_session, make_payload, state) -> None:
        r = await _stored(async_session, make_payload)
        await state.set_state(AdminEditStates.enter_payload)
        await state.update_data(edit_rid=r.id, edit_page=0)

        message = _text_message('{"name": "Asha"')
        await msg_registration_edit(message, async_session, state)

        assert await state.get_state() == AdminEditStates.enter_payload.state
        assert "not valid JSON" in message.answer.call_args.args[0]

    async def test_validation_errors_keep_edit_open(self, async_session, make_payload, state) -> None:
        r = await _stored(async_session, make_payload)
        await state.set_state(AdminEditStates.enter_payload)
        await state.update_data(edit_rid=r.id, edit_page=0)

        edited = make_payload(sports=["cricket"], partners=[{"sport": "cricket", "name": "X"}])
        message = _text_message(json.dumps(edited))
        await msg_registration_edit(message, async_session, state)

        assert await state.get_state() == AdminEditStates.enter_payload.state
        reply = message.answer.call_args
        assert reply.kwargs["parse_mode"] == ParseMode.HTML
        assert "Partners:" in reply.args[0]
        fetched = await get_registration(async_session, r.id)
        assert fetched.sport_ids == ["cricket", "badminton-doubles"]

    async def test_registration_deleted_meanwhile(self, async_session, make_payload, state) -> None:
        await state.set_state(AdminEditStates.enter_payload)
        await state.update_data(edit_rid=999, edit_page=0)

        message = _text_message(json.dumps(make_payload()))
        await msg_registration_edit(message, async_session, state)

        assert await state.get_state() is None
        assert message.answer.call_args.args[0] == "Registration not found."
