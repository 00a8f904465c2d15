"""API routers for the mealmatch application."""

from mealmatch.routers.recipes import router as recipes_router
from mealmatch.routers.shopping_list import router as shopping_list_router

__all__ = [
    "recipes_router",
    "shopping_list_router",
]
