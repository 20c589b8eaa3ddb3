from fastapi import APIRouter

from . import psychology, quiz, system

api_router = APIRouter()
api_router.include_router(quiz.router, prefix="/quiz", tags=["Quiz"])
api_router.include_router(psychology.router, prefix="/psychology", tags=["Psychology"])
api_router.include_router(system.api_router, tags=["System"])
