"""
Admin filters — sport / partner sport / year / gender / status.

Active filters are kept in FSM data under "filters" and shared by the
registration list, statistics and PDF export.
"""
import logging

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery

from spardha.catalog import CATALOG, SportCategory
from spardha.keyboards import (
    AdminPanelCb,
    FilterCb,
    filter_menu_kb,
    gender_kb,
    partner_sport_kb,
    sport_category_kb,
    sport_choice_kb,
    status_kb,
    year_kb,
)
from spardha.middlewares import IsAdmin
from spardha.models.models import Gender, RegistrationStatus
from spardha.services import RegistrationFilters

logger = logging.getLogger(__name__)
router = Router(name="admin_filters")
router.callback_query.filter(IsAdmin())


# ── FSM-data helpers ──────────────────────────────────────────────────────────

async def get_filters(state: FSMContext) -> RegistrationFilters:
    raw = (await state.get_data()).get("filters") or {}
    year = raw.get("year")
    return RegistrationFilters(
        sport=raw.get("sport") or None,
        partner_sport=raw.get("partner_sport") or None,
        year=int(year) if year else None,
        gender=raw.get("gender") or None,
        status=raw.get("status") or None,
    )


def _accepts(field: str, value: str) -> bool:
    """Reject stale or forged callback values before they reach a query."""
    if not value:
        return True
    if field == "sport":
        return CATALOG.is_valid_sport(value)
    if field == "partner_sport":
        return CATALOG.requires_partner(value)
    if field == "year":
        return value in ("1", "2", "3", "4")
    if field == "gender":
        return value in Gender.ALL
    if field == "status":
        return value in RegistrationStatus.ALL
    return False


async def set_filter(state: FSMContext, field: str, value: str) -> bool:
    if not _accepts(field, value):
        return False
    data = await state.get_data()
    filters = dict(data.get("filters") or {})
    filters[field] = value
    await state.update_data(filters=filters)
    return True


# ── Menu ──────────────────────────────────────────────────────────────────────

async def _show_menu(callback: CallbackQuery, state: FSMContext) -> None:
    filters = await get_filters(state)
    await callback.message.edit_text(
        "🔎 *Filters*\n\nChoose what to filter by:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=filter_menu_kb(filters),
    )


@router.callback_query(AdminPanelCb.filter(F.action == "filters"))
@router.callback_query(FilterCb.filter(F.action == "menu"))
async def cq_filter_menu(callback: CallbackQuery, state: FSMContext) -> None:
    await _show_menu(callback, state)
    await callback.answer()


@router.callback_query(FilterCb.filter(F.action == "clear"))
async def cq_filter_clear(callback: CallbackQuery, state: FSMContext) -> None:
    await state.update_data(filters={})
    await _show_menu(callback, state)
    await callback.answer("Filters cleared")


# ── Pickers ───────────────────────────────────────────────────────────────────

@router.callback_query(FilterCb.filter(F.action == "pick"))
async def cq_filter_pick(callback: CallbackQuery, callback_data: FilterCb) -> None:
    field = callback_data.field
    if field == "sport_cat":
        text, kb = "🏅 Choose a category:", sport_category_kb()
    elif field == "sport":
        if callback_data.value not in SportCategory.ORDER:
            await callback.answer("Unknown category.", show_alert=True)
            return
        label = SportCategory.LABELS[callback_data.value]
        text, kb = f"🏅 *{label}* — choose a sport:", sport_choice_kb(callback_data.value)
    elif field == "partner_sport":
        text, kb = "🤝 Registrations with a partner for:", partner_sport_kb()
    elif field == "year":
        text, kb = "🎓 Choose a year:", year_kb()
    elif field == "gender":
        text, kb = "🚻 Choose a gender:", gender_kb()
    elif field == "status":
        text, kb = "📌 Choose a status:", status_kb()
    else:
        await callback.answer()
        return

    await callback.message.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=kb)
    await callback.answer()


@router.callback_query(FilterCb.filter(F.action == "set"))
async def cq_filter_set(
    callback: CallbackQuery,
    callback_data: FilterCb,
    state: FSMContext,
) -> None:
    if not await set_filter(state, callback_data.field, callback_data.value):
        await callback.answer("Unknown filter value.", show_alert=True)
        return
    await _show_menu(callback, state)
    await callback.answer()
