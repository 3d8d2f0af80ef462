from spardha.middlewares.db_middleware import DatabaseMiddleware
from spardha.middlewares.auth_middleware import AdminMiddleware, IsAdmin

__all__ = ["DatabaseMiddleware", "AdminMiddleware", "IsAdmin"]
