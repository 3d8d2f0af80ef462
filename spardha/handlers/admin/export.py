"""
Admin export handler — PDF of the (filtered) registrations grouped by
sport and year.
"""
import logging
from datetime import datetime, timezone

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import BufferedInputFile, CallbackQuery
from sqlalchemy.ext.asyncio import AsyncSession

from spardha.config import settings
from spardha.handlers.admin.filters import get_filters
from spardha.keyboards import AdminPanelCb, ExportCb
from spardha.middlewares import IsAdmin
from spardha.services import (
    build_report,
    list_registrations,
    pdf_filename,
    render_registrations_pdf,
)

logger = logging.getLogger(__name__)
router = Router(name="admin_export")
router.callback_query.filter(IsAdmin())


@router.callback_query(AdminPanelCb.filter(F.action == "export"))
@router.callback_query(ExportCb.filter(F.action == "pdf"))
async def cq_export_pdf(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    await callback.answer("⏳ Building PDF…")
    filters       = await get_filters(state)
    registrations = await list_registrations(session, filters)
    report        = build_report(registrations, filters, title=settings.EVENT_TITLE)

    try:
        pdf_bytes = render_registrations_pdf(report)
    except Exception as e:
        logger.exception("PDF export failed: %s", e)
        await callback.message.answer(f"❌ PDF export failed: {e}", parse_mode=None)
        return

    filename = pdf_filename(datetime.now(timezone.utc))
    logger.info("PDF export: %d registrations, %d sports", report.total, len(report.sports))
    caption = f"📄 {report.total} registrations"
    if not filters.is_empty:
        caption += f"\n🔎 {filters.describe()}"
    await callback.message.answer_document(
        BufferedInputFile(pdf_bytes, filename=filename),
        caption=caption,
    )
