"""API route handlers."""

from .discover import router as discover_router
from .likes import router as likes_router
from .matches import router as matches_router
