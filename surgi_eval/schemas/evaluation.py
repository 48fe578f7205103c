"""
SurgiEval — Схеми оцінювання

Pydantic моделі для:
- PerformanceStatus: виконання пункту чек-листа
- FeedbackRecord: оцінка та зворотний зв'язок від AI (або локальний fallback)
- SessionSnapshot: незмінний знімок сесії для звіту
"""

from typing import Dict, List, Optional, Union
from enum import Enum
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .student import ExamMode, Student
from .scenario import CaseScenario, ProcedureScenario


class PerformanceStatus(str, Enum):
    """Статус виконання пункту (упорядковано за балом)"""
    CORRECT = "CORRECT"       # 1.0
    PARTIAL = "PARTIAL"       # 0.5
    INCORRECT = "INCORRECT"   # 0
    NOT_DONE = "NOT_DONE"     # 0, але семантично відрізняється від INCORRECT

    @property
    def credit(self) -> float:
        """Бал за пункт"""
        if self is PerformanceStatus.CORRECT:
            return 1.0
        if self is PerformanceStatus.PARTIAL:
            return 0.5
        return 0.0


ResponseMap = Dict[str, PerformanceStatus]


class FeedbackRecord(BaseModel):
    """
    Оцінка та зворотний зв'язок.

    calculated_score — в шкалі 0.0–5.0. Підсумкову оцінку (final_score)
    та обґрунтування сесія зберігає окремо.
    """
    calculated_score: float = Field(..., ge=0.0, le=5.0)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "calculatedScore": 3.8,
                "strengths": ["Técnica estéril adecuada"],
                "weaknesses": ["No verifica permeabilidad"],
                "recommendations": ["Repasar secuencia ATLS"]
            }
        }


class SessionSnapshot(BaseModel):
    """
    Повний знімок завершеної сесії — вхід для збирача звіту.

    Сценарій та зворотний зв'язок обов'язкові.
    """
    student: Student
    mode: ExamMode
    scenario: Union[CaseScenario, ProcedureScenario] = Field(..., discriminator="mode")
    responses: Dict[str, PerformanceStatus] = Field(default_factory=dict)
    evaluator_notes: str = ""
    feedback: FeedbackRecord
    final_score: float
    justification: str = ""
    evaluator_name: str = ""

    def status_of(self, item_id: str) -> PerformanceStatus:
        """Статус пункту; відсутній у мапі пункт — NOT_DONE"""
        return self.responses.get(item_id, PerformanceStatus.NOT_DONE)

    class Config:
        frozen = True
