"""API routes package."""

from files_manager.routes.app_routes import router as app_router
from files_manager.routes.auth_routes import router as auth_router
from files_manager.routes.file_routes import router as file_router
from files_manager.routes.user_routes import router as user_router

__all__ = ["app_router", "auth_router", "file_router", "user_router"]
