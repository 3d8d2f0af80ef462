from spardha.keyboards.callbacks import (
    MainMenuCb,
    AdminPanelCb,
    RegistrationCb,
    FilterCb,
    ExportCb,
)
from spardha.keyboards.main_menu import (
    participant_main_menu,
    registration_form_kb,
    admin_main_menu,
    back_to_main,
)
from spardha.keyboards.admin_kb import (
    registration_list_kb,
    registration_detail_kb,
    confirm_action_kb,
    cancel_input_kb,
    filter_menu_kb,
    sport_category_kb,
    sport_choice_kb,
    partner_sport_kb,
    year_kb,
    gender_kb,
    status_kb,
    PAGE_SIZE,
)

__all__ = [
    # callbacks
    "MainMenuCb", "AdminPanelCb", "RegistrationCb", "FilterCb", "ExportCb",
    # main menu
    "participant_main_menu", "registration_form_kb", "admin_main_menu", "back_to_main",
    # admin
    "registration_list_kb", "registration_detail_kb",
    "confirm_action_kb", "cancel_input_kb",
    "filter_menu_kb", "sport_category_kb", "sport_choice_kb", "partner_sport_kb",
    "year_kb", "gender_kb", "status_kb", "PAGE_SIZE",
]
