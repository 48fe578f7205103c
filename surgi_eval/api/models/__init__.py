"""
SurgiEval — API Models

Pydantic моделі для запитів та відповідей API.
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Optional
from datetime import datetime

from surgi_eval.exam_engine import ExamSession, Stage
from surgi_eval.schemas import (
    ExamMode, FeedbackRecord, PerformanceStatus, Scenario, Student
)
from surgi_eval.scoring import score_band


# ============================================================
# Request Models
# ============================================================

class LoginRequest(BaseModel):
    """Дані студента"""
    name: str = ""
    id: str = ""

    class Config:
        json_schema_extra = {
            "example": {"name": "Ana María Pérez", "id": "1098765432"}
        }


class ModeRequest(BaseModel):
    """Вибір режиму станції"""
    mode: ExamMode


class TopicRequest(BaseModel):
    """Вибір теми (запускає генерацію сценарію)"""
    topic: str = Field(..., min_length=1, max_length=200)
    include_simulated_patient: bool = False

    class Config:
        json_schema_extra = {
            "example": {"topic": "Apendicitis aguda", "include_simulated_patient": True}
        }


class ResponseRequest(BaseModel):
    """Позначка пункту чек-листа"""
    item_id: str = Field(..., min_length=1)
    status: PerformanceStatus


class NotesRequest(BaseModel):
    """Нотатки екзаменатора"""
    notes: str = ""


class ResultsRequest(BaseModel):
    """Поля екрану результатів (передаються лише змінені)"""
    final_score: Optional[float] = Field(None, ge=0.0, le=5.0)
    justification: Optional[str] = None
    evaluator_name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "final_score": 4.0,
                "justification": "Buen manejo de la vía aérea no reflejado en la lista",
                "evaluator_name": "Dr. Gómez"
            }
        }


# ============================================================
# Response Models
# ============================================================

class SessionState(BaseModel):
    """Повний стан сесії"""
    session_id: str
    stage: Stage
    student: Optional[Student] = None
    mode: Optional[ExamMode] = None
    topic: str = ""
    include_simulated_patient: bool = False
    scenario: Optional[Scenario] = None
    error: Optional[str] = None

    time_remaining: int
    time_display: str
    timer_active: bool
    responses: Dict[str, PerformanceStatus] = {}
    evaluator_notes: str = ""

    feedback: Optional[FeedbackRecord] = None
    final_score: Optional[float] = None
    score_band: Optional[str] = None
    justification: str = ""
    evaluator_name: str = ""
    needs_justification: bool = False
    can_download_report: bool = False

    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: ExamSession) -> "SessionState":
        """Конвертувати ExamSession в модель відповіді"""
        band = None
        if session.final_score is not None:
            band = score_band(session.final_score).value

        return cls(
            session_id=session.session_id,
            stage=session.stage,
            student=session.student,
            mode=session.mode,
            topic=session.topic,
            include_simulated_patient=session.include_simulated_patient,
            scenario=session.scenario,
            error=session.error,
            time_remaining=session.time_remaining,
            time_display=session.time_display,
            timer_active=session.timer_active,
            responses=dict(session.responses),
            evaluator_notes=session.evaluator_notes,
            feedback=session.feedback,
            final_score=session.final_score,
            score_band=band,
            justification=session.justification,
            evaluator_name=session.evaluator_name,
            needs_justification=session.needs_justification,
            can_download_report=session.can_download_report,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class TopicsResponse(BaseModel):
    """Каталог тем для режиму"""
    mode: ExamMode
    topics: List[str]
    total: int


class HealthResponse(BaseModel):
    """Стан сервера"""
    status: str
    version: str
    model: str
    api_key_configured: bool
    active_sessions: int


class ErrorResponse(BaseModel):
    """Помилка"""
    error: str
    detail: Optional[str] = None


__all__ = [
    # Requests
    'LoginRequest',
    'ModeRequest',
    'TopicRequest',
    'ResponseRequest',
    'NotesRequest',
    'ResultsRequest',
    # Responses
    'SessionState',
    'TopicsResponse',
    'HealthResponse',
    'ErrorResponse',
]
