"""Route modules."""

from .admin import router as admin_router
from .books import router as books_router
from .member import router as member_router
from .membership import router as membership_router
from .notifications import router as notifications_router
from .public import router as public_router
from .reservations import router as reservations_router

__all__ = [
    "admin_router",
    "books_router",
    "member_router",
    "membership_router",
    "notifications_router",
    "public_router",
    "reservations_router",
]
