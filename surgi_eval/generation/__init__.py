"""
SurgiEval — Модуль генерації (generation)

Компоненти:
- GenerationClient: інтерфейс зовнішнього генератора
- GeminiClient: реалізація через Gemini REST API
- GenerationResult: явний результат Ok | Err для машини станів
- prompts: промпти та схеми відповідей
"""

from .results import GenerationResult
from .client import GenerationClient, GeminiClient
from .prompts import build_scenario_prompt, build_feedback_prompt

__all__ = [
    "GenerationResult",
    "GenerationClient",
    "GeminiClient",
    "build_scenario_prompt",
    "build_feedback_prompt",
]
