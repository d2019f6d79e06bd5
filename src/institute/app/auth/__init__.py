"""Authentication, authorization and user management."""

from .auth_routes import configure_auth_router
from .queries import UserQueries
from .security_manager import SecurityManager
from .user_routes import configure_user_router
from .validation import Validate

__all__ = [
    "SecurityManager",
    "UserQueries",
    "Validate",
    "configure_auth_router",
    "configure_user_router",
]
