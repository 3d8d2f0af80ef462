"""
Admin panel entry point and registration management.
"""
import json
import logging

from aiogram import F, Router, html
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

from spardha.catalog import CATALOG
from spardha.errors import InvalidFieldError, RegistrationNotFoundError
from spardha.handlers.admin.filters import get_filters
from spardha.handlers.registration import format_errors_text
from spardha.keyboards import (
    AdminPanelCb,
    RegistrationCb,
    admin_main_menu,
    cancel_input_kb,
    confirm_action_kb,
    registration_detail_kb,
    registration_list_kb,
)
from spardha.middlewares import IsAdmin
from spardha.models.models import Registration, RegistrationStatus
from spardha.services import (
    compute_stats,
    delete_registration,
    format_stats_text,
    get_registration,
    list_registrations,
    registration_payload,
    set_registration_notes,
    set_registration_status,
    update_registration,
)
from spardha.states import AdminEditStates, AdminNotesStates

logger = logging.getLogger(__name__)
router = Router(name="admin_panel")
router.callback_query.filter(IsAdmin())


# ── Admin home (back) ─────────────────────────────────────────────────────────

@router.callback_query(AdminPanelCb.filter(F.action == "back"))
async def cq_admin_home(callback: CallbackQuery) -> None:
    await callback.message.edit_text(
        "⚡ *Admin panel*\n\nChoose a section:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=admin_main_menu(),
    )
    await callback.answer()


# ── Registration list ─────────────────────────────────────────────────────────

@router.callback_query(AdminPanelCb.filter(F.action == "registrations"))
@router.callback_query(RegistrationCb.filter(F.action == "list"))
async def cq_registration_list(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
    callback_data: AdminPanelCb | RegistrationCb,
) -> None:
    page    = getattr(callback_data, "page", 0)
    filters = await get_filters(state)
    registrations = await list_registrations(session, filters)

    header = f"👥 *Registrations* — `{len(registrations)}`"
    if not filters.is_empty:
        header += f"\n🔎 _{filters.describe()}_"
    if not registrations:
        header += "\n\n_No registrations._"

    await callback.message.edit_text(
        header,
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=registration_list_kb(registrations, page),
    )
    await callback.answer()


# ── Registration detail ───────────────────────────────────────────────────────

def format_registration_detail(r: Registration) -> str:
    """HTML detail card; user-supplied values are escaped."""
    lines = [
        f"👤 {html.bold(html.quote(r.name))}",
        f"📧 {html.quote(r.email)}",
        f"🎓 {html.quote(r.course)}, Year {r.year}",
        f"🚻 {r.gender_label}",
        f"📌 {r.status_emoji} {RegistrationStatus.LABELS.get(r.status, r.status)}",
        "",
        html.bold("Sports"),
    ]
    for sport in r.sport_ids:
        partner = r.partner_for(sport)
        suffix = f" — 🤝 {html.quote(partner)}" if partner else ""
        lines.append(f"• {CATALOG.label(sport)}{suffix}")
    if r.notes:
        lines += ["", f"📝 {html.italic(html.quote(r.notes))}"]
    lines += [
        "",
        f"🕒 Registered: {r.registration_date:%Y-%m-%d %H:%M}",
        f"🕒 Updated: {r.last_updated:%Y-%m-%d %H:%M}",
    ]
    return "\n".join(lines)


async def _show_detail(
    callback: CallbackQuery,
    session: AsyncSession,
    rid: int,
    page: int,
) -> None:
    r = await get_registration(session, rid)
    if not r:
        await callback.answer("Registration not found.", show_alert=True)
        return
    await callback.message.edit_text(
        format_registration_detail(r),
        parse_mode=ParseMode.HTML,
        reply_markup=registration_detail_kb(r, page),
    )
    await callback.answer()


@router.callback_query(RegistrationCb.filter(F.action == "view"))
async def cq_registration_detail(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    await state.set_state(None)
    await _show_detail(callback, session, callback_data.rid, callback_data.page)


@router.callback_query(RegistrationCb.filter(F.action == "status"))
async def cq_registration_status(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    session: AsyncSession,
) -> None:
    try:
        await set_registration_status(session, callback_data.rid, callback_data.status)
    except RegistrationNotFoundError:
        await callback.answer("Registration not found.", show_alert=True)
        return
    except InvalidFieldError as exc:
        await callback.answer(exc.message, show_alert=True)
        return
    await _show_detail(callback, session, callback_data.rid, callback_data.page)


# ── Delete ────────────────────────────────────────────────────────────────────

@router.callback_query(RegistrationCb.filter(F.action == "delete_confirm"))
async def cq_registration_delete_confirm(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    session: AsyncSession,
) -> None:
    r = await get_registration(session, callback_data.rid)
    if not r:
        await callback.answer("Registration not found.", show_alert=True)
        return
    await callback.message.edit_text(
        f"🗑️ Delete the registration of {html.bold(html.quote(r.name))} ({html.quote(r.email)})?",
        parse_mode=ParseMode.HTML,
        reply_markup=confirm_action_kb(
            yes_cb=RegistrationCb(action="delete", rid=r.id, page=callback_data.page).pack(),
            no_cb=RegistrationCb(action="view", rid=r.id, page=callback_data.page).pack(),
        ),
    )
    await callback.answer()


@router.callback_query(RegistrationCb.filter(F.action == "delete"))
async def cq_registration_delete(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    deleted = await delete_registration(session, callback_data.rid)
    if not deleted:
        await callback.answer("Registration not found.", show_alert=True)
        return

    filters = await get_filters(state)
    registrations = await list_registrations(session, filters)
    await callback.message.edit_text(
        f"✅ Registration deleted.\n\n👥 *Registrations* — `{len(registrations)}`",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=registration_list_kb(registrations, 0),
    )
    await callback.answer()


# ── Notes ─────────────────────────────────────────────────────────────────────

@router.callback_query(RegistrationCb.filter(F.action == "notes"))
async def cq_registration_notes(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    state: FSMContext,
) -> None:
    await state.set_state(AdminNotesStates.enter_notes)
    await state.update_data(notes_rid=callback_data.rid, notes_page=callback_data.page)
    await callback.message.edit_text(
        "📝 Send the new notes text (up to 1000 characters).\nSend `-` to clear the notes.",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=cancel_input_kb(callback_data.rid, callback_data.page),
    )
    await callback.answer()


@router.message(AdminNotesStates.enter_notes, IsAdmin())
async def msg_registration_notes(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    data = await state.get_data()
    rid, page = data.get("notes_rid"), data.get("notes_page", 0)
    text = message.text or ""
    notes = None if text.strip() == "-" else text

    try:
        r = await set_registration_notes(session, rid, notes)
    except InvalidFieldError as exc:
        await message.answer(f"⚠️ {exc.message}", reply_markup=cancel_input_kb(rid, page))
        return
    except RegistrationNotFoundError:
        await state.set_state(None)
        await message.answer("Registration not found.", reply_markup=admin_main_menu())
        return

    await session.commit()
    await state.set_state(None)
    await message.answer(
        format_registration_detail(r),
        parse_mode=ParseMode.HTML,
        reply_markup=registration_detail_kb(r, page),
    )


# ── Edit ──────────────────────────────────────────────────────────────────────

def edit_prompt_text(r: Registration) -> str:
    payload = json.dumps(registration_payload(r), ensure_ascii=False, indent=2)
    return (
        f"✏️ {html.bold('Edit registration')}\n\n"
        "Copy the data below, change what you need and send it back as one message. "
        "It is checked exactly like a new registration.\n\n"
        f"{html.pre(html.quote(payload))}"
    )


@router.callback_query(RegistrationCb.filter(F.action == "edit"))
async def cq_registration_edit(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    r = await get_registration(session, callback_data.rid)
    if not r:
        await callback.answer("Registration not found.", show_alert=True)
        return
    await state.set_state(AdminEditStates.enter_payload)
    await state.update_data(edit_rid=r.id, edit_page=callback_data.page)
    await callback.message.edit_text(
        edit_prompt_text(r),
        parse_mode=ParseMode.HTML,
        reply_markup=cancel_input_kb(r.id, callback_data.page),
    )
    await callback.answer()


@router.message(AdminEditStates.enter_payload, IsAdmin())
async def msg_registration_edit(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    data = await state.get_data()
    rid, page = data.get("edit_rid"), data.get("edit_page", 0)

    try:
        payload = json.loads(message.text or "")
    except ValueError:
        await message.answer(
            "⚠️ That is not valid JSON. Send the edited data again.",
            reply_markup=cancel_input_kb(rid, page),
        )
        return

    try:
        r, errors = await update_registration(session, rid, payload)
    except RegistrationNotFoundError:
        await state.set_state(None)
        await message.answer("Registration not found.", reply_markup=admin_main_menu())
        return

    if errors:
        await message.answer(
            format_errors_text(errors),
            parse_mode=ParseMode.HTML,
            reply_markup=cancel_input_kb(rid, page),
        )
        return

    await session.commit()
    await state.set_state(None)
    logger.info("Admin %s edited registration #%d", message.from_user.id, rid)
    await message.answer(
        format_registration_detail(r),
        parse_mode=ParseMode.HTML,
        reply_markup=registration_detail_kb(r, page),
    )


# ── Statistics ────────────────────────────────────────────────────────────────

@router.callback_query(AdminPanelCb.filter(F.action == "stats"))
async def cq_stats(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    filters = await get_filters(state)
    registrations = await list_registrations(session, filters)
    text = format_stats_text(compute_stats(registrations))
    if not filters.is_empty:
        text += f"\n\n🔎 _{filters.describe()}_"
    await callback.message.edit_text(
        text,
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=admin_main_menu(),
    )
    await callback.answer()
