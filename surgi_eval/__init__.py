"""
SurgiEval — Система проведення станцій ОСКІ з хірургії

Архітектура: машина станів сесії + детермінована оцінка + PDF звіт

Модулі:
- config: Конфігурація системи
- schemas: Студент, сценарій, чек-лист, зворотний зв'язок
- scoring: Обчислення оцінки за чек-листом
- exam_engine: Сесія іспиту, переходи між етапами, таймер
- generation: Клієнт генеративного AI (сценарій та зворотний зв'язок)
- report: Компонування та рендеринг PDF звіту
- api: Backend API
- web_ui: Веб-інтерфейс
"""

__version__ = "0.1.0"
__author__ = "Oleksii Bychkov"

from .config import SurgiEvalConfig, get_default_config
