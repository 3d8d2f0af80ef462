"""
Keyboards for the admin panel: registration list, detail controls and filters.
"""
from typing import List

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from spardha.catalog import CATALOG, SportCategory
from spardha.keyboards.callbacks import (
    AdminPanelCb,
    ExportCb,
    FilterCb,
    RegistrationCb,
)
from spardha.models.models import Gender, Registration, RegistrationStatus
from spardha.services.registration_service import RegistrationFilters

PAGE_SIZE = 8
YEARS = (1, 2, 3, 4)


# ── Registration list (paged) ─────────────────────────────────────────────────

def registration_list_kb(registrations: List[Registration], page: int = 0) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    start = page * PAGE_SIZE
    for r in registrations[start:start + PAGE_SIZE]:
        builder.row(
            InlineKeyboardButton(
                text=f"{r.status_emoji} {r.name} — Y{r.year}, {r.gender_label}",
                callback_data=RegistrationCb(action="view", rid=r.id, page=page).pack(),
            )
        )

    nav = []
    if page > 0:
        nav.append(InlineKeyboardButton(
            text="◀️", callback_data=RegistrationCb(action="list", page=page - 1).pack()
        ))
    if start + PAGE_SIZE < len(registrations):
        nav.append(InlineKeyboardButton(
            text="▶️", callback_data=RegistrationCb(action="list", page=page + 1).pack()
        ))
    if nav:
        builder.row(*nav)

    builder.row(
        InlineKeyboardButton(text="🔎 Filters",      callback_data=FilterCb(action="menu").pack()),
        InlineKeyboardButton(text="📄 PDF",          callback_data=ExportCb(action="pdf").pack()),
    )
    builder.row(InlineKeyboardButton(text="🔙 Back", callback_data=AdminPanelCb(action="back").pack()))
    return builder.as_markup()


def registration_detail_kb(r: Registration, page: int = 0) -> InlineKeyboardMarkup:
    """Status controls, notes and delete for one registration."""
    builder = InlineKeyboardBuilder()
    status_buttons = [
        InlineKeyboardButton(
            text=f"{RegistrationStatus.EMOJI[s]} {RegistrationStatus.LABELS[s]}",
            callback_data=RegistrationCb(action="status", rid=r.id, page=page, status=s).pack(),
        )
        for s in RegistrationStatus.ALL
        if s != r.status
    ]
    for i in range(0, len(status_buttons), 2):
        builder.row(*status_buttons[i:i + 2])

    builder.row(
        InlineKeyboardButton(
            text="✏️ Edit",
            callback_data=RegistrationCb(action="edit", rid=r.id, page=page).pack(),
        ),
        InlineKeyboardButton(
            text="📝 Notes",
            callback_data=RegistrationCb(action="notes", rid=r.id, page=page).pack(),
        ),
        InlineKeyboardButton(
            text="🗑️ Delete",
            callback_data=RegistrationCb(action="delete_confirm", rid=r.id, page=page).pack(),
        ),
    )
    builder.row(
        InlineKeyboardButton(
            text="🔙 To list",
            callback_data=RegistrationCb(action="list", page=page).pack(),
        )
    )
    return builder.as_markup()


def confirm_action_kb(yes_cb: str, no_cb: str) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="✅ Yes", callback_data=yes_cb),
        InlineKeyboardButton(text="❌ No",  callback_data=no_cb),
    )
    return builder.as_markup()


def cancel_input_kb(rid: int, page: int = 0) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(
        text="❌ Cancel",
        callback_data=RegistrationCb(action="view", rid=rid, page=page).pack(),
    ))
    return builder.as_markup()


# ── Filters ───────────────────────────────────────────────────────────────────

def filter_menu_kb(filters: RegistrationFilters) -> InlineKeyboardMarkup:
    """Current filter values, each opening its picker."""
    def _btn(label: str, value, field: str) -> InlineKeyboardButton:
        shown = value if value else "any"
        return InlineKeyboardButton(
            text=f"{label}: {shown}",
            callback_data=FilterCb(action="pick", field=field).pack(),
        )

    builder = InlineKeyboardBuilder()
    builder.row(_btn("🏅 Sport",   filters.sport and CATALOG.label(filters.sport), "sport_cat"))
    builder.row(_btn("🤝 Partner", filters.partner_sport and CATALOG.label(filters.partner_sport), "partner_sport"))
    builder.row(
        _btn("🎓 Year",   filters.year, "year"),
        _btn("🚻 Gender", filters.gender, "gender"),
    )
    builder.row(_btn("📌 Status",  filters.status, "status"))
    builder.row(
        InlineKeyboardButton(text="🧹 Clear", callback_data=FilterCb(action="clear").pack()),
        InlineKeyboardButton(text="✅ Show",  callback_data=RegistrationCb(action="list").pack()),
    )
    builder.row(InlineKeyboardButton(text="🔙 Back", callback_data=AdminPanelCb(action="back").pack()))
    return builder.as_markup()


def _choice_kb(field: str, choices: List[tuple[str, str]], per_row: int = 2) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    buttons = [
        InlineKeyboardButton(
            text=label,
            callback_data=FilterCb(action="set", field=field, value=value).pack(),
        )
        for value, label in choices
    ]
    for i in range(0, len(buttons), per_row):
        builder.row(*buttons[i:i + per_row])
    builder.row(
        InlineKeyboardButton(
            text="♾️ Any",
            callback_data=FilterCb(action="set", field=field, value="").pack(),
        ),
        InlineKeyboardButton(text="🔙 Back", callback_data=FilterCb(action="menu").pack()),
    )
    return builder.as_markup()


def sport_category_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for category in SportCategory.ORDER:
        builder.row(InlineKeyboardButton(
            text=SportCategory.LABELS[category],
            callback_data=FilterCb(action="pick", field="sport", value=category).pack(),
        ))
    builder.row(
        InlineKeyboardButton(
            text="♾️ Any sport",
            callback_data=FilterCb(action="set", field="sport", value="").pack(),
        ),
        InlineKeyboardButton(text="🔙 Back", callback_data=FilterCb(action="menu").pack()),
    )
    return builder.as_markup()


def sport_choice_kb(category: str) -> InlineKeyboardMarkup:
    sports = CATALOG.sports_in(category)
    return _choice_kb("sport", [(s, CATALOG.label(s)) for s in sports])


def partner_sport_kb() -> InlineKeyboardMarkup:
    sports = [s for s in CATALOG.ordered_sports() if CATALOG.requires_partner(s)]
    return _choice_kb("partner_sport", [(s, CATALOG.label(s)) for s in sports], per_row=1)


def year_kb() -> InlineKeyboardMarkup:
    return _choice_kb("year", [(str(y), f"Year {y}") for y in YEARS], per_row=4)


def gender_kb() -> InlineKeyboardMarkup:
    return _choice_kb("gender", [(g, Gender.LABELS[g]) for g in Gender.ALL])


def status_kb() -> InlineKeyboardMarkup:
    return _choice_kb(
        "status",
        [(s, f"{RegistrationStatus.EMOJI[s]} {RegistrationStatus.LABELS[s]}") for s in RegistrationStatus.ALL],
    )
