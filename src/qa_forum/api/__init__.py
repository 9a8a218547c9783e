"""API routers."""

from qa_forum.api.router import api_router

__all__ = ["api_router"]
