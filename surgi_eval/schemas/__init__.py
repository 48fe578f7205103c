"""
SurgiEval — Модуль схем даних (schemas)

Pydantic моделі для валідації та серіалізації даних.

Компоненти:
- student.py: Student, ExamMode
- scenario.py: ChecklistItem, SimulatedPatientScript, CaseScenario, ProcedureScenario
- evaluation.py: PerformanceStatus, FeedbackRecord, SessionSnapshot
- topics.py: каталог тем

Приклад використання:
    from surgi_eval.schemas import ExamMode, parse_scenario

    scenario = parse_scenario(ai_json, ExamMode.PROCEDURE)
    print(scenario.supplies)

    # Серіалізація в JSON (camelCase)
    json_data = scenario.model_dump_json(by_alias=True)
"""

from .student import ExamMode, Student

from .scenario import (
    ChecklistItem,
    SimulatedPatientScript,
    ScenarioBase,
    CaseScenario,
    ProcedureScenario,
    Scenario,
    parse_scenario,
)

from .evaluation import (
    PerformanceStatus,
    ResponseMap,
    FeedbackRecord,
    SessionSnapshot,
)

from .topics import TOPICS_CASES, TOPICS_PROCEDURES, topics_for


__all__ = [
    # Student
    "ExamMode",
    "Student",

    # Scenario
    "ChecklistItem",
    "SimulatedPatientScript",
    "ScenarioBase",
    "CaseScenario",
    "ProcedureScenario",
    "Scenario",
    "parse_scenario",

    # Evaluation
    "PerformanceStatus",
    "ResponseMap",
    "FeedbackRecord",
    "SessionSnapshot",

    # Topics
    "TOPICS_CASES",
    "TOPICS_PROCEDURES",
    "topics_for",
]
