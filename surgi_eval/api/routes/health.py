"""
SurgiEval — Health Routes

Health check та інформація про систему.
"""

from fastapi import APIRouter, Depends

from surgi_eval import __version__
from ..dependencies import get_sessions, SessionManager
from ..models import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    sessions: SessionManager = Depends(get_sessions)
) -> HealthResponse:
    """
    Перевірка стану сервера.

    Повертає:
    - Статус сервера ("degraded", якщо не задано API ключ генерації)
    - Модель генерації
    - Кількість активних сесій
    """
    generation = sessions.app_config.generation
    has_key = bool(generation.resolve_api_key())

    return HealthResponse(
        status="ok" if has_key else "degraded",
        version=__version__,
        model=generation.model,
        api_key_configured=has_key,
        active_sessions=sessions.get_active_count()
    )


@router.get("/")
async def root():
    """Головна сторінка API"""
    return {
        "name": "SurgiEval API",
        "version": __version__,
        "description": "Evaluación ECOE de Cirugía",
        "docs": "/docs",
        "health": "/health",
    }
