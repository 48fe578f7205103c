"""
SurgiEval — Сесія іспиту

ExamSession — єдина структура, що володіє всім станом станції:
- Етап (Stage) та дані студента
- Режим, тема, згенерований сценарій
- Таймер, відповіді чек-листа, нотатки екзаменатора
- Зворотний зв'язок, підсумкова оцінка, обґрунтування, ім'я екзаменатора

Сесія не змінюється на місці: переходи (transitions.py) повертають
нову копію через dataclasses.replace.
"""

from typing import Dict, Optional, Any, Union
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import uuid

from surgi_eval.exceptions import IncompleteSessionError
from surgi_eval.scoring import MAX_SCORE
from surgi_eval.schemas import (
    CaseScenario, ExamMode, FeedbackRecord, PerformanceStatus,
    ProcedureScenario, SessionSnapshot, Student,
)


class Stage(str, Enum):
    """Етапи станції (в порядку проходження)"""
    LOGIN = "LOGIN"
    MODE_SELECTION = "MODE_SELECTION"
    TOPIC_SELECTION = "TOPIC_SELECTION"
    GENERATING = "GENERATING"
    PREVIEW = "PREVIEW"
    EXAM_RUNNING = "EXAM_RUNNING"
    FEEDBACK_GENERATION = "FEEDBACK_GENERATION"
    RESULTS = "RESULTS"

    @property
    def is_pending(self) -> bool:
        """Етап очікує на зовнішній виклик"""
        return self in (Stage.GENERATING, Stage.FEEDBACK_GENERATION)


DEFAULT_STATION_SECONDS = 480


@dataclass(frozen=True)
class ExamSession:
    """
    Стан однієї станції ОСКІ.

    Приклад:
        session = ExamSession()
        result = transition(session, SubmitLogin(name="Ana", student_id="123"))
        print(result.session.stage)   # Stage.MODE_SELECTION
    """

    # Ідентифікатор
    session_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    stage: Stage = Stage.LOGIN

    # Студент та вибір станції
    student: Optional[Student] = None
    mode: Optional[ExamMode] = None
    topic: str = ""
    include_simulated_patient: bool = False

    # Сценарій
    scenario: Optional[Union[CaseScenario, ProcedureScenario]] = None
    error: Optional[str] = None

    # Проведення станції
    station_duration: int = DEFAULT_STATION_SECONDS
    time_remaining: int = DEFAULT_STATION_SECONDS
    timer_active: bool = False
    responses: Dict[str, PerformanceStatus] = field(default_factory=dict)
    evaluator_notes: str = ""

    # Результати
    max_score: float = MAX_SCORE
    feedback: Optional[FeedbackRecord] = None
    final_score: Optional[float] = None
    justification: str = ""
    evaluator_name: str = ""

    # Timestamps
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def status_of(self, item_id: str) -> PerformanceStatus:
        """Статус пункту; відсутній — NOT_DONE"""
        return self.responses.get(item_id, PerformanceStatus.NOT_DONE)

    @property
    def is_procedure(self) -> bool:
        return self.mode is ExamMode.PROCEDURE

    @property
    def time_display(self) -> str:
        """Залишок часу у форматі mm:ss"""
        return format_time(self.time_remaining)

    @property
    def n_answered(self) -> int:
        return len(self.responses)

    @property
    def score_changed(self) -> bool:
        """Підсумкова оцінка відрізняється від розрахованої"""
        if self.feedback is None or self.final_score is None:
            return False
        return round(self.final_score, 1) != round(self.feedback.calculated_score, 1)

    @property
    def needs_justification(self) -> bool:
        """Оцінку змінено, але обґрунтування порожнє (лише підказка для UI)"""
        return self.score_changed and not self.justification.strip()

    @property
    def can_download_report(self) -> bool:
        return (
            self.stage is Stage.RESULTS
            and self.feedback is not None
            and bool(self.evaluator_name.strip())
        )

    def snapshot(self) -> SessionSnapshot:
        """
        Знімок для звіту.

        Raises:
            IncompleteSessionError: немає студента, сценарію чи зворотного зв'язку
        """
        if self.student is None or self.scenario is None or self.feedback is None:
            raise IncompleteSessionError(
                f"Session {self.session_id} has no scenario or feedback yet (stage {self.stage.value})"
            )

        final_score = self.final_score
        if final_score is None:
            final_score = round(self.feedback.calculated_score, 1)

        return SessionSnapshot(
            student=self.student,
            mode=self.mode or ExamMode(self.scenario.mode),
            scenario=self.scenario,
            responses=dict(self.responses),
            evaluator_notes=self.evaluator_notes,
            feedback=self.feedback,
            final_score=final_score,
            justification=self.justification,
            evaluator_name=self.evaluator_name,
        )

    def get_summary(self) -> Dict[str, Any]:
        """Підсумок сесії"""
        return {
            "session_id": self.session_id,
            "stage": self.stage.value,
            "student": self.student.model_dump() if self.student else None,
            "mode": self.mode.value if self.mode else None,
            "topic": self.topic,
            "time_remaining": self.time_remaining,
            "timer_active": self.timer_active,
            "answered": self.n_answered,
            "calculated_score": self.feedback.calculated_score if self.feedback else None,
            "final_score": self.final_score,
            "error": self.error,
        }

    def __repr__(self) -> str:
        return (
            f"ExamSession("
            f"id={self.session_id}, "
            f"stage={self.stage.value}, "
            f"mode={self.mode.value if self.mode else 'None'}, "
            f"answered={self.n_answered}, "
            f"time={self.time_display}"
            f")"
        )


def format_time(total_seconds: int) -> str:
    """480 -> '08:00'"""
    total_seconds = max(0, int(total_seconds))
    mins, secs = divmod(total_seconds, 60)
    return f"{mins:02d}:{secs:02d}"
