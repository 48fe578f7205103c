"""
SurgiEval — Модуль оцінювання (scoring)

Приклад використання:
    from surgi_eval.scoring import score, score_band

    value = score(scenario.checklist, responses)   # 0.0–5.0
    print(score_band(value).value)                 # 'Aceptable'
"""

from .engine import (
    MAX_SCORE,
    ScoreBand,
    credit,
    raw_score,
    score,
    round_score,
    score_band,
    format_responses,
    fallback_feedback,
)

__all__ = [
    "MAX_SCORE",
    "ScoreBand",
    "credit",
    "raw_score",
    "score",
    "round_score",
    "score_band",
    "format_responses",
    "fallback_feedback",
]
