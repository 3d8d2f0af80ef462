"""
Admin authorization middleware.

Attaches `is_admin: bool` to handler data for all updates.
The IsAdmin filter (below) can be used as a router-level filter.
"""
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from aiogram import BaseMiddleware
from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery, Message, TelegramObject

from spardha.config import settings


class AdminMiddleware(BaseMiddleware):
    """
    Injects `is_admin` flag into data dict.
    Applied globally — individual routers restrict access via filters.
    """

    def __init__(self, admin_ids: Optional[Iterable[int]] = None) -> None:
        self._admin_ids = set(admin_ids) if admin_ids is not None else None

    @property
    def admin_ids(self) -> set[int]:
        if self._admin_ids is None:
            return set(settings.admin_ids_list)
        return self._admin_ids

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user = data.get("event_from_user")
        data["is_admin"] = bool(user and user.id in self.admin_ids)
        return await handler(event, data)


# ── Reusable filter ──────────────────────────────────────────────────────────

class IsAdmin(BaseFilter):
    """Use on individual routers/handlers to restrict access to admins."""

    async def __call__(self, event: Message | CallbackQuery, is_admin: bool = False) -> bool:
        if not is_admin:
            if isinstance(event, Message):
                await event.answer("⛔️ Access denied.")
            elif isinstance(event, CallbackQuery):
                await event.answer("⛔️ Access denied.", show_alert=True)
        return is_admin
