"""Main API router aggregation."""

from fastapi import APIRouter

from qa_forum.api.answers import router as answers_router
from qa_forum.api.auth import router as auth_router
from qa_forum.api.catalog import router as catalog_router
from qa_forum.api.questions import router as questions_router
from qa_forum.api.users import admin_router
from qa_forum.api.users import router as users_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(catalog_router)
api_router.include_router(questions_router)
api_router.include_router(answers_router)
api_router.include_router(users_router)
api_router.include_router(admin_router)
