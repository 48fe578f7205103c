"""
SurgiEval — Події та ефекти машини станів

Події — все, що може змінити сесію: дії користувача, тік таймера,
результати зовнішніх викликів.

Ефекти — опис зовнішнього виклику, який має виконати контролер
після переходу. Сама машина станів I/O не виконує.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from surgi_eval.generation import GenerationResult
from surgi_eval.schemas import CaseScenario, ExamMode, PerformanceStatus, ProcedureScenario
from .session import ExamSession


# =============================================================================
# USER EVENTS
# =============================================================================

@dataclass(frozen=True)
class SubmitLogin:
    name: str
    student_id: str


@dataclass(frozen=True)
class SelectMode:
    mode: ExamMode


@dataclass(frozen=True)
class BackToModes:
    pass


@dataclass(frozen=True)
class SelectTopic:
    topic: str
    include_simulated_patient: bool = False


@dataclass(frozen=True)
class StartExam:
    pass


@dataclass(frozen=True)
class CancelPreview:
    pass


@dataclass(frozen=True)
class RecordResponse:
    item_id: str
    status: PerformanceStatus


@dataclass(frozen=True)
class UpdateNotes:
    notes: str


@dataclass(frozen=True)
class TimerTick:
    pass


@dataclass(frozen=True)
class FinishExam:
    pass


@dataclass(frozen=True)
class SetFinalScore:
    value: float


@dataclass(frozen=True)
class SetJustification:
    text: str


@dataclass(frozen=True)
class SetEvaluatorName:
    name: str


@dataclass(frozen=True)
class Reset:
    pass


# =============================================================================
# EXTERNAL RESULTS
# =============================================================================

@dataclass(frozen=True)
class ScenarioResolved:
    result: GenerationResult


@dataclass(frozen=True)
class FeedbackResolved:
    result: GenerationResult


Event = Union[
    SubmitLogin, SelectMode, BackToModes, SelectTopic, ScenarioResolved,
    StartExam, CancelPreview, RecordResponse, UpdateNotes, TimerTick,
    FinishExam, FeedbackResolved, SetFinalScore, SetJustification,
    SetEvaluatorName, Reset,
]


# =============================================================================
# EFFECTS
# =============================================================================

@dataclass(frozen=True)
class RequestScenario:
    """Згенерувати сценарій"""
    topic: str
    mode: ExamMode
    include_simulated_patient: bool = False

    @property
    def is_procedure(self) -> bool:
        return ExamMode(self.mode).is_procedure


@dataclass(frozen=True)
class RequestFeedback:
    """Згенерувати зворотний зв'язок"""
    scenario: Union[CaseScenario, ProcedureScenario]
    responses: Dict[str, PerformanceStatus] = field(default_factory=dict)
    notes: str = ""
    computed_score: float = 0.0


Effect = Union[RequestScenario, RequestFeedback]


@dataclass(frozen=True)
class Transition:
    """Результат переходу: нова сесія + (опційно) ефект"""
    session: ExamSession
    effect: Optional[Effect] = None
