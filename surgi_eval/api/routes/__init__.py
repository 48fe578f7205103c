"""
SurgiEval — API Routes

Експорт всіх роутерів.
"""

from .health import router as health_router
from .topics import router as topics_router
from .sessions import router as sessions_router

__all__ = [
    'health_router',
    'topics_router',
    'sessions_router',
]
