"""
Main menu keyboards — participant vs. admin.
"""
from typing import Optional

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    WebAppInfo,
)
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from spardha.keyboards.callbacks import AdminPanelCb, MainMenuCb


def participant_main_menu() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="📝 How to register", callback_data=MainMenuCb(action="how_to").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="🏅 Sports list",     callback_data=MainMenuCb(action="sports").pack()),
    )
    return builder.as_markup()


def registration_form_kb(webapp_url: Optional[str]) -> Optional[ReplyKeyboardMarkup]:
    """
    Reply keyboard that opens the registration Web App.
    Only reply-keyboard Web App buttons deliver `web_app_data` back to the bot.
    """
    if not webapp_url:
        return None
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text="📝 Open registration form", web_app=WebAppInfo(url=webapp_url)))
    return builder.as_markup(resize_keyboard=True)


def admin_main_menu() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="👥 Registrations",   callback_data=AdminPanelCb(action="registrations").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="🔎 Filters",         callback_data=AdminPanelCb(action="filters").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="📊 Statistics",      callback_data=AdminPanelCb(action="stats").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="📄 Download PDF",    callback_data=AdminPanelCb(action="export").pack()),
    )
    return builder.as_markup()


def back_to_main() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="🔙 Main menu", callback_data=MainMenuCb(action="main").pack()))
    return builder.as_markup()
