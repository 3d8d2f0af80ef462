"""
Centralized CallbackData factories.
Telegram limits callback_data to 64 bytes — all prefixes are kept short.
"""
from aiogram.filters.callback_data import CallbackData


class MainMenuCb(CallbackData, prefix="mm"):
    action: str           # main | sports | how_to


class AdminPanelCb(CallbackData, prefix="adm"):
    action: str           # back | registrations | filters | stats | export


class RegistrationCb(CallbackData, prefix="reg"):
    action: str           # list | view | status | edit | delete_confirm | delete | notes
    rid: int = 0          # registration id
    page: int = 0         # list page to return to
    status: str = ""


class FilterCb(CallbackData, prefix="flt"):
    action: str           # menu | pick | set | clear
    field: str = ""       # sport_cat | sport | partner_sport | year | gender | status
    value: str = ""


class ExportCb(CallbackData, prefix="exp"):
    action: str           # pdf
