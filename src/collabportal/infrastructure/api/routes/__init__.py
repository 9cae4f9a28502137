"""API Routes for CollabPortal."""

from collabportal.infrastructure.api.routes.auth_router import router as auth_router
from .chats_router import router as chats_router
from .invitations_router import public_router as signup_router
from .invitations_router import router as invitations_router
from .notifications_router import router as notifications_router
from .password_reset_router import router as password_reset_router
from .proposals_router import admin_router as admin_proposals_router
from .proposals_router import router as proposals_router
from .responses_router import admin_router as admin_responses_router
from .responses_router import router as responses_router
from .tags_router import router as tags_router
from .users_router import router as users_router

__all__ = [
    "admin_proposals_router",
    "admin_responses_router",
    "auth_router",
    "chats_router",
    "invitations_router",
    "notifications_router",
    "password_reset_router",
    "proposals_router",
    "responses_router",
    "signup_router",
    "tags_router",
    "users_router",
]
