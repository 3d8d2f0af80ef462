from spardha.services.registration_service import (
    RegistrationFilters,
    find_by_email, get_registration, list_registrations, count_registrations,
    normalize_and_validate, create_registration, submit_registration,
    update_registration, registration_payload,
    set_registration_status, set_registration_notes,
    delete_registration,
)
from spardha.services.report_service import (
    build_report, compute_stats, format_stats_text,
)
from spardha.services.pdf_service import render_registrations_pdf, pdf_filename

__all__ = [
    # registration store
    "RegistrationFilters",
    "find_by_email", "get_registration", "list_registrations", "count_registrations",
    "normalize_and_validate", "create_registration", "submit_registration",
    "update_registration", "registration_payload",
    "set_registration_status", "set_registration_notes",
    "delete_registration",
    # reports
    "build_report", "compute_stats", "format_stats_text",
    # pdf
    "render_registrations_pdf", "pdf_filename",
]
