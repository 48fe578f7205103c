"""
SurgiEval — Модуль проведення станції (exam_engine)

Компоненти:
- ExamSession, Stage: стан станції
- events: події та ефекти машини станів
- transition: чиста функція переходу
- CountdownTimer: таймер станції
- ExamController: виконавець переходів та ефектів

Приклад використання:
    from surgi_eval.exam_engine import ExamController
    from surgi_eval.generation import GeminiClient

    controller = ExamController(GeminiClient())
    controller.login("Ana María Pérez", "1098765432")
    print(controller.session.stage)   # Stage.MODE_SELECTION
"""

from .session import ExamSession, Stage, DEFAULT_STATION_SECONDS, format_time

from .events import (
    # User events
    SubmitLogin,
    SelectMode,
    BackToModes,
    SelectTopic,
    StartExam,
    CancelPreview,
    RecordResponse,
    UpdateNotes,
    TimerTick,
    FinishExam,
    SetFinalScore,
    SetJustification,
    SetEvaluatorName,
    Reset,
    # External results
    ScenarioResolved,
    FeedbackResolved,
    Event,
    # Effects
    RequestScenario,
    RequestFeedback,
    Effect,
    Transition,
)

from .transitions import transition, SCENARIO_ERROR_MESSAGE
from .timer import CountdownTimer
from .controller import ExamController


__all__ = [
    # Session
    "ExamSession",
    "Stage",
    "DEFAULT_STATION_SECONDS",
    "format_time",

    # Events
    "SubmitLogin",
    "SelectMode",
    "BackToModes",
    "SelectTopic",
    "StartExam",
    "CancelPreview",
    "RecordResponse",
    "UpdateNotes",
    "TimerTick",
    "FinishExam",
    "SetFinalScore",
    "SetJustification",
    "SetEvaluatorName",
    "Reset",
    "ScenarioResolved",
    "FeedbackResolved",
    "Event",

    # Effects
    "RequestScenario",
    "RequestFeedback",
    "Effect",
    "Transition",

    # Engine
    "transition",
    "SCENARIO_ERROR_MESSAGE",
    "CountdownTimer",
    "ExamController",
]
