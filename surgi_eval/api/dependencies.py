"""
SurgiEval — API Dependencies

Dependency Injection для FastAPI.
Клієнт генерації та менеджер сесій (ExamController на кожну сесію).
"""

from typing import Dict, Optional
from datetime import datetime, timedelta
import logging
import threading

from fastapi import HTTPException

from surgi_eval.config import SurgiEvalConfig, get_default_config
from surgi_eval.exam_engine import ExamController
from surgi_eval.generation import GeminiClient, GenerationClient

from .config import config

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Менеджер сесій станцій.
    Зберігає активні контролери в пам'яті.
    Singleton pattern.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self.sessions: Dict[str, ExamController] = {}
        self.lock = threading.Lock()
        self.app_config: SurgiEvalConfig = get_default_config()
        self.app_config.report.output_dir = config.reports_dir

    def create_session(self, client: GenerationClient) -> ExamController:
        """
        Створити нову сесію (етап LOGIN).

        У API фоновий таймер не запускається: станцію завершує POST /finish.
        """
        controller = ExamController(client, config=self.app_config, use_timer=False)

        with self.lock:
            self._cleanup_old_sessions()
            if len(self.sessions) >= config.max_sessions:
                raise HTTPException(status_code=503, detail="Too many active sessions")
            self.sessions[controller.session.session_id] = controller

        logger.info("Session created: %s", controller.session.session_id)
        return controller

    def get_session(self, session_id: str) -> Optional[ExamController]:
        """Отримати контролер сесії"""
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Видалити сесію"""
        with self.lock:
            controller = self.sessions.pop(session_id, None)
        if controller is None:
            return False
        controller.close()
        logger.info("Session deleted: %s", session_id)
        return True

    def get_active_count(self) -> int:
        """Кількість активних сесій"""
        return len(self.sessions)

    def close_all(self) -> None:
        with self.lock:
            controllers = list(self.sessions.values())
            self.sessions.clear()
        for controller in controllers:
            controller.close()

    def _cleanup_old_sessions(self):
        """Видалити застарілі сесії"""
        timeout = timedelta(minutes=config.session_timeout_minutes)
        now = datetime.now()

        expired = [
            sid for sid, controller in self.sessions.items()
            if now - controller.session.updated_at > timeout
        ]

        for sid in expired:
            self.sessions.pop(sid).close()
            logger.info("Session expired: %s", sid)


# Глобальні менеджери
session_manager = SessionManager()


# Dependency functions для FastAPI
def get_sessions() -> SessionManager:
    """Dependency: отримати менеджер сесій"""
    return session_manager


def get_client() -> GenerationClient:
    """Dependency: клієнт генерації для нових сесій"""
    return GeminiClient(session_manager.app_config.generation)


def get_controller(session_id: str, sessions: SessionManager) -> ExamController:
    """Контролер сесії або 404"""
    controller = sessions.get_session(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return controller
