"""
Common handlers: /start, /help, main menu routing, sports list.
"""
import logging

from aiogram import F, Router, html
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from spardha.catalog import CATALOG, SportCategory
from spardha.config import settings
from spardha.keyboards import (
    MainMenuCb,
    admin_main_menu,
    back_to_main,
    participant_main_menu,
    registration_form_kb,
)

logger = logging.getLogger(__name__)
router = Router(name="common")


# ── /start ────────────────────────────────────────────────────────────────────

@router.message(CommandStart())
async def cmd_start(message: Message, is_admin: bool, state: FSMContext) -> None:
    await state.clear()
    if is_admin:
        await _send_admin_welcome(message)
    else:
        await _send_participant_welcome(message)


async def _send_participant_welcome(message: Message) -> None:
    name = message.from_user.first_name
    text = (
        f"🏆 Welcome to {html.bold(html.quote(settings.EVENT_TITLE))}, {html.quote(name)}!\n\n"
        f"Here you can:\n"
        f"• 📝 Register for one or more sports\n"
        f"• 🤝 Name your partner for doubles and mixed events\n\n"
        f"Choose an action:"
    )
    await message.answer(text, parse_mode=ParseMode.HTML, reply_markup=participant_main_menu())

    form_kb = registration_form_kb(settings.WEBAPP_URL)
    if form_kb is not None and settings.REGISTRATION_OPEN:
        await message.answer("👇 Tap the button below to open the form.", reply_markup=form_kb)


async def _send_admin_welcome(message: Message) -> None:
    name = message.from_user.first_name
    text = (
        f"⚡ {html.bold('Admin panel')} — {html.quote(name)}\n\n"
        f"Review, filter and update registrations\n"
        f"or download them as a PDF.\n\n"
        f"Choose a section:"
    )
    await message.answer(text, parse_mode=ParseMode.HTML, reply_markup=admin_main_menu())


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(_how_to_text(), parse_mode=ParseMode.MARKDOWN, reply_markup=back_to_main())


# ── Main menu callbacks ───────────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "main"))
async def cq_main_menu(callback: CallbackQuery, is_admin: bool, state: FSMContext) -> None:
    await state.clear()
    if is_admin:
        text = "⚡ *Admin panel*\n\nChoose a section:"
        kb   = admin_main_menu()
    else:
        text = f"🏆 *{settings.EVENT_TITLE}*\n\nChoose an action:"
        kb   = participant_main_menu()

    await callback.message.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=kb)
    await callback.answer()


@router.callback_query(MainMenuCb.filter(F.action == "how_to"))
async def cq_how_to(callback: CallbackQuery) -> None:
    await callback.message.edit_text(
        _how_to_text(), parse_mode=ParseMode.MARKDOWN, reply_markup=back_to_main()
    )
    await callback.answer()


@router.callback_query(MainMenuCb.filter(F.action == "sports"))
async def cq_sports_list(callback: CallbackQuery) -> None:
    await callback.message.edit_text(
        sports_list_text(), parse_mode=ParseMode.MARKDOWN, reply_markup=back_to_main()
    )
    await callback.answer()


@router.callback_query(F.data == "noop")
async def cq_noop(callback: CallbackQuery) -> None:
    await callback.answer()


# ── Texts ─────────────────────────────────────────────────────────────────────

def _how_to_text() -> str:
    if not settings.REGISTRATION_OPEN:
        return "🔒 *Registration is closed.*"
    return (
        "📝 *How to register*\n\n"
        "1. Send /register and open the form\n"
        "2. Fill in your name, email, course, year and gender\n"
        "3. Select your sports\n"
        "4. For doubles / mixed events enter your partner's name\n\n"
        "_One registration per email address._"
    )


def sports_list_text() -> str:
    lines = ["🏅 *Sports*"]
    for category in SportCategory.ORDER:
        lines.append(f"\n*{SportCategory.LABELS[category]}*")
        for sport in CATALOG.sports_in(category):
            mark = " 🤝" if CATALOG.requires_partner(sport) else ""
            lines.append(f"• {CATALOG.label(sport)}{mark}")
    lines.append("\n🤝 — partner required")
    return "\n".join(lines)
