"""
SurgiEval — Обчислення оцінки

Детермінована оцінка за чек-листом:

    score = 5.0 * Σ credit(item) / N

credit: CORRECT = 1.0, PARTIAL = 0.5, INCORRECT / NOT_DONE / відсутній = 0.

Ця ж функція дає локальний fallback, коли зовнішній виклик
зворотного зв'язку не вдався.
"""

from typing import Iterable, List, Mapping, Optional, Sequence
from enum import Enum

from surgi_eval.exceptions import EmptyChecklistError
from surgi_eval.schemas import ChecklistItem, FeedbackRecord, PerformanceStatus


MAX_SCORE = 5.0

FALLBACK_STRENGTHS = ["No se pudo generar análisis AI."]
FALLBACK_WEAKNESSES = ["Verificar conexión."]
FALLBACK_RECOMMENDATIONS = ["Revisar guías estándar."]


class ScoreBand(str, Enum):
    """Рубрика оцінювання (шкала 0.0–5.0)"""
    INSUFFICIENT = "Insuficiente"   # 0.0–2.9
    ACCEPTABLE = "Aceptable"        # 3.0–3.9
    GOOD = "Bueno"                  # 4.0–4.5
    EXCELLENT = "Excelente"         # 4.6–5.0


def credit(status: Optional[PerformanceStatus]) -> float:
    """Бал за один пункт; None — пункт не виконано"""
    if status is None:
        return 0.0
    return PerformanceStatus(status).credit


def raw_score(
    checklist: Sequence[ChecklistItem],
    responses: Mapping[str, PerformanceStatus],
) -> float:
    """Сума балів по чек-листу"""
    return sum(credit(responses.get(item.id)) for item in checklist)


def score(
    checklist: Sequence[ChecklistItem],
    responses: Mapping[str, PerformanceStatus],
    max_score: float = MAX_SCORE,
) -> float:
    """
    Нормалізована оцінка в діапазоні [0, max_score].

    Args:
        checklist: Пункти чек-листа сценарію
        responses: Мапа item.id -> PerformanceStatus

    Raises:
        EmptyChecklistError: порожній чек-лист
    """
    if not checklist:
        raise EmptyChecklistError("Cannot score an empty checklist")

    return raw_score(checklist, responses) / len(checklist) * max_score


def round_score(value: float) -> float:
    """Оцінка з точністю до десятої"""
    return round(float(value), 1)


def score_band(value: float) -> ScoreBand:
    """Смуга рубрики для оцінки (порівнюється з точністю до десятої)"""
    value = round_score(value)
    if value < 3.0:
        return ScoreBand.INSUFFICIENT
    if value < 4.0:
        return ScoreBand.ACCEPTABLE
    if value <= 4.5:
        return ScoreBand.GOOD
    return ScoreBand.EXCELLENT


def format_responses(
    checklist: Iterable[ChecklistItem],
    responses: Mapping[str, PerformanceStatus],
) -> List[str]:
    """Рядки '- категорія: текст -> STATUS' для промпту зворотного зв'язку"""
    lines = []
    for item in checklist:
        status = responses.get(item.id, PerformanceStatus.NOT_DONE)
        lines.append(f"- {item.category}: {item.text} -> {PerformanceStatus(status).value}")
    return lines


def fallback_feedback(
    checklist: Sequence[ChecklistItem],
    responses: Mapping[str, PerformanceStatus],
    max_score: float = MAX_SCORE,
) -> FeedbackRecord:
    """Зворотний зв'язок без AI: локальна оцінка + заглушки"""
    return FeedbackRecord(
        calculated_score=score(checklist, responses, max_score=max_score),
        strengths=list(FALLBACK_STRENGTHS),
        weaknesses=list(FALLBACK_WEAKNESSES),
        recommendations=list(FALLBACK_RECOMMENDATIONS),
    )
