"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from app.api.v1.endpoints import categories, health, questions, quiz

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(questions.router, prefix="/questions", tags=["Questions"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(quiz.router, prefix="/quiz", tags=["Quiz"])
