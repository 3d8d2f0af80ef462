"""
Participant registration handler.

Flow:
  /register → reply keyboard opens the Web App form
            → form posts JSON back as `web_app_data`
            → normalize + validate + save → summary ✅ or error list ⚠️
"""
import json
import logging

from aiogram import F, Router, html
from aiogram.enums import ParseMode
from aiogram.filters import Command
from aiogram.types import Message, ReplyKeyboardRemove
from sqlalchemy.ext.asyncio import AsyncSession

from spardha.catalog import CATALOG
from spardha.config import settings
from spardha.errors import ErrorSet, messages
from spardha.keyboards import participant_main_menu, registration_form_kb
from spardha.models.models import Registration, RegistrationStatus
from spardha.services import submit_registration

logger = logging.getLogger(__name__)
router = Router(name="registration")

FIELD_LABELS = {
    "name":       "Name",
    "email":      "Email",
    "course":     "Course",
    "year":       "Year",
    "gender":     "Gender",
    "notes":      "Notes",
    "sports":     "Sports",
    "partners":   "Partners",
    "submission": "Form",
}


# ── /register ─────────────────────────────────────────────────────────────────

@router.message(Command("register"))
async def cmd_register(message: Message) -> None:
    if not settings.REGISTRATION_OPEN:
        await message.answer("🔒 Registration is closed.")
        return

    form_kb = registration_form_kb(settings.WEBAPP_URL)
    if form_kb is None:
        await message.answer("⚠️ The registration form is not available right now.")
        return
    await message.answer("👇 Open the form, fill it in and press *Submit*.",
                         parse_mode=ParseMode.MARKDOWN, reply_markup=form_kb)

# ── Form submission ───────────────────────────────────────────────────────────

@router.message(F.web_app_data)
async def msg_web_app_data(message: Message, session: AsyncSession) -> None:
    if not settings.REGISTRATION_OPEN:
        await message.answer("🔒 Registration is closed.", reply_markup=ReplyKeyboardRemove())
        return

    try:
        payload = json.loads(message.web_app_data.data)
    except ValueError:
        logger.warning("Undecodable web_app_data from user %s", message.from_user.id)
        await message.answer("⚠️ The form data could not be read. Please submit the form again.")
        return

    registration, errors = await submit_registration(session, payload)
    if errors:
        await message.answer(format_errors_text(errors), parse_mode=ParseMode.HTML)
        return

    # Persist before replying: a failed reply must not roll the registration back
    await session.commit()

    await message.answer("✅ Registration received!", reply_markup=ReplyKeyboardRemove())
    await message.answer(
        format_registration_text(registration),
        parse_mode=ParseMode.HTML,
        reply_markup=participant_main_menu(),
    )


# ── Texts (HTML; every user-supplied value goes through html.quote) ───────────

def format_errors_text(errors: ErrorSet) -> str:
    lines = [html.bold("⚠️ Registration could not be saved:"), ""]
    for field_name, message in messages(errors).items():
        label = FIELD_LABELS.get(field_name, field_name.capitalize())
        lines.append(f"• {html.bold(label + ':')} {html.quote(message)}")
    lines.append("")
    lines.append("Please correct the form and submit it again.")
    return "\n".join(lines)


def format_registration_text(r: Registration) -> str:
    sports = ", ".join(CATALOG.label(s) for s in r.sport_ids)
    lines = [
        html.bold("🎉 You are registered!"),
        "",
        f"👤 {html.quote(r.name)}",
        f"📧 {html.quote(r.email)}",
        f"🎓 {html.quote(r.course)}, Year {r.year}",
        f"🏅 {html.quote(sports)}",
    ]
    for p in r.partners:
        lines.append(f"🤝 {CATALOG.label(p.sport)}: {html.quote(p.name)}")
    lines.append(f"📌 Status: {r.status_emoji} {RegistrationStatus.LABELS.get(r.status, r.status)}")
    return "\n".join(lines)
