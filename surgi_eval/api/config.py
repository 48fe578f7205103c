"""
SurgiEval — API Configuration

Налаштування FastAPI сервера.
"""

from dataclasses import dataclass, field
import os
from typing import Optional


@dataclass
class APIConfig:
    """Конфігурація API сервера"""

    # Сервер
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True
    reload: bool = True
    log_level: str = "INFO"
    logs_dir: Optional[str] = None   # None: лише stdout

    # CORS
    cors_origins: list = field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list = field(default_factory=lambda: ["*"])
    cors_allow_headers: list = field(default_factory=lambda: ["*"])

    # Звіти
    reports_dir: str = "reports"

    # Сесії
    max_sessions: int = 200
    session_timeout_minutes: int = 120

    # API
    api_prefix: str = "/api"
    api_title: str = "SurgiEval API"
    api_description: str = "Проведення станцій ОСКІ з хірургії: сценарій, чек-лист, оцінка, PDF звіт"

    @classmethod
    def from_env(cls) -> 'APIConfig':
        """Створити конфігурацію з environment variables"""
        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "8000")),
            debug=os.getenv("API_DEBUG", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            logs_dir=os.getenv("LOGS_DIR") or None,
            reports_dir=os.getenv("REPORTS_DIR", "reports"),
            max_sessions=int(os.getenv("MAX_SESSIONS", "200")),
        )


# Глобальна конфігурація
config = APIConfig.from_env()
