"""
SurgiEval — REST API

FastAPI сервіс, що повторює потік Streamlit інтерфейсу:
одна сесія в пам'яті на кожен id.

Запуск:
    python scripts/run_api.py
"""

from .app import app
from .config import APIConfig, config

__all__ = ["app", "APIConfig", "config"]
