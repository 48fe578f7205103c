"""
SurgiEval — Переходи машини станів

    LOGIN → MODE_SELECTION → TOPIC_SELECTION → GENERATING → PREVIEW
          → EXAM_RUNNING → FEEDBACK_GENERATION → RESULTS → (reset) LOGIN

transition(session, event) — чиста функція: вхідна сесія не змінюється,
повертається Transition(нова сесія, ефект). Ефект описує зовнішній виклик,
який виконує ExamController.

Подія, недопустима на поточному етапі, піднімає InvalidTransitionError.
Виняток — TimerTick: поза активною станцією тік просто ігнорується.
"""

import math
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Type

from surgi_eval.exceptions import (
    InvalidTransitionError, ScoreOverrideError, UnknownChecklistItemError
)
from surgi_eval.schemas import ExamMode, PerformanceStatus, Student
from surgi_eval.scoring import fallback_feedback, round_score, score

from .session import ExamSession, Stage
from .events import (
    BackToModes, CancelPreview, FeedbackResolved, FinishExam, RecordResponse,
    RequestFeedback, RequestScenario, Reset, ScenarioResolved, SelectMode,
    SelectTopic, SetEvaluatorName, SetFinalScore, SetJustification, StartExam,
    SubmitLogin, TimerTick, Transition, UpdateNotes,
)


SCENARIO_ERROR_MESSAGE = (
    "Error generando el caso. Por favor intente de nuevo o verifique su conexión/API Key."
)


def _require(session: ExamSession, event, *stages: Stage) -> None:
    if session.stage not in stages:
        raise InvalidTransitionError(session.stage, event)


def _update(session: ExamSession, **changes) -> ExamSession:
    return replace(session, updated_at=datetime.now(), **changes)


# =============================================================================
# LOGIN / SELECTION
# =============================================================================

def _on_login(session: ExamSession, event: SubmitLogin) -> Transition:
    _require(session, event, Stage.LOGIN)

    name = (event.name or "").strip()
    student_id = (event.student_id or "").strip()

    # Неповні дані: перехід просто не відбувається
    if not name or not student_id:
        return Transition(session)

    return Transition(_update(
        session,
        student=Student(name=name, id=student_id),
        stage=Stage.MODE_SELECTION,
    ))


def _on_select_mode(session: ExamSession, event: SelectMode) -> Transition:
    _require(session, event, Stage.MODE_SELECTION)
    return Transition(_update(
        session,
        mode=ExamMode(event.mode),
        stage=Stage.TOPIC_SELECTION,
        error=None,
    ))


def _on_back_to_modes(session: ExamSession, event: BackToModes) -> Transition:
    _require(session, event, Stage.TOPIC_SELECTION)
    return Transition(_update(session, stage=Stage.MODE_SELECTION, error=None))


def _on_select_topic(session: ExamSession, event: SelectTopic) -> Transition:
    _require(session, event, Stage.TOPIC_SELECTION)

    topic = (event.topic or "").strip()
    if not topic:
        return Transition(session)

    # Стандартизований пацієнт має сенс лише для клінічного випадку
    include_patient = bool(event.include_simulated_patient) and not session.is_procedure

    new_session = _update(
        session,
        topic=topic,
        include_simulated_patient=include_patient,
        scenario=None,
        error=None,
        stage=Stage.GENERATING,
    )
    effect = RequestScenario(
        topic=topic,
        mode=session.mode,
        include_simulated_patient=include_patient,
    )
    return Transition(new_session, effect)


def _on_scenario_resolved(session: ExamSession, event: ScenarioResolved) -> Transition:
    _require(session, event, Stage.GENERATING)

    result = event.result
    scenario = result.value if result.is_ok else None

    if scenario is not None and ExamMode(scenario.mode) is not session.mode:
        scenario = None

    if scenario is None:
        return Transition(_update(
            session,
            scenario=None,
            error=SCENARIO_ERROR_MESSAGE,
            stage=Stage.TOPIC_SELECTION,
        ))

    if scenario.topic != session.topic:
        scenario = scenario.with_topic(session.topic)

    return Transition(_update(session, scenario=scenario, stage=Stage.PREVIEW))


# =============================================================================
# PREVIEW / EXAM
# =============================================================================

def _on_start_exam(session: ExamSession, event: StartExam) -> Transition:
    _require(session, event, Stage.PREVIEW)
    return Transition(_update(
        session,
        time_remaining=session.station_duration,
        responses={},
        evaluator_notes="",
        timer_active=True,
        stage=Stage.EXAM_RUNNING,
    ))


def _on_cancel_preview(session: ExamSession, event: CancelPreview) -> Transition:
    _require(session, event, Stage.PREVIEW)
    return Transition(_update(session, scenario=None, stage=Stage.TOPIC_SELECTION))


def _on_record_response(session: ExamSession, event: RecordResponse) -> Transition:
    _require(session, event, Stage.EXAM_RUNNING)

    if session.scenario.get_item(event.item_id) is None:
        raise UnknownChecklistItemError(f"Checklist item not found: {event.item_id}")

    status = PerformanceStatus(event.status)
    if session.responses.get(event.item_id) is status:
        return Transition(session)

    responses = dict(session.responses)
    responses[event.item_id] = status
    return Transition(_update(session, responses=responses))


def _on_update_notes(session: ExamSession, event: UpdateNotes) -> Transition:
    _require(session, event, Stage.EXAM_RUNNING)
    return Transition(_update(session, evaluator_notes=event.notes or ""))


def _finish(session: ExamSession) -> Transition:
    """Зупинити таймер, перерахувати оцінку, запросити зворотний зв'язок"""
    computed = score(session.scenario.checklist, session.responses, max_score=session.max_score)

    new_session = _update(
        session,
        timer_active=False,
        stage=Stage.FEEDBACK_GENERATION,
        error=None,
    )
    effect = RequestFeedback(
        scenario=session.scenario,
        responses=dict(session.responses),
        notes=session.evaluator_notes,
        computed_score=computed,
    )
    return Transition(new_session, effect)


def _on_timer_tick(session: ExamSession, event: TimerTick) -> Transition:
    if session.stage is not Stage.EXAM_RUNNING or not session.timer_active:
        return Transition(session)

    remaining = max(0, session.time_remaining - 1)
    if remaining == 0:
        # Час вичерпано: станція завершується один раз
        return _finish(replace(session, time_remaining=0))

    return Transition(_update(session, time_remaining=remaining))


def _on_finish_exam(session: ExamSession, event: FinishExam) -> Transition:
    _require(session, event, Stage.EXAM_RUNNING)
    return _finish(session)


def _on_feedback_resolved(session: ExamSession, event: FeedbackResolved) -> Transition:
    _require(session, event, Stage.FEEDBACK_GENERATION)

    result = event.result
    if result.is_ok and result.value is not None:
        feedback = result.value
    else:
        feedback = fallback_feedback(
            session.scenario.checklist, session.responses, max_score=session.max_score,
        )

    return Transition(_update(
        session,
        feedback=feedback,
        final_score=round_score(feedback.calculated_score),
        justification="",
        stage=Stage.RESULTS,
    ))


# =============================================================================
# RESULTS
# =============================================================================

def _on_set_final_score(session: ExamSession, event: SetFinalScore) -> Transition:
    _require(session, event, Stage.RESULTS)

    try:
        value = float(event.value)
    except (TypeError, ValueError):
        raise ScoreOverrideError(f"Final score is not a number: {event.value!r}")

    if math.isnan(value) or not 0.0 <= value <= session.max_score:
        raise ScoreOverrideError(f"Final score must be within [0, {session.max_score}], got {value}")

    return Transition(_update(session, final_score=round_score(value)))


def _on_set_justification(session: ExamSession, event: SetJustification) -> Transition:
    _require(session, event, Stage.RESULTS)
    return Transition(_update(session, justification=event.text or ""))


def _on_set_evaluator_name(session: ExamSession, event: SetEvaluatorName) -> Transition:
    _require(session, event, Stage.RESULTS)
    return Transition(_update(session, evaluator_name=event.name or ""))


def _on_reset(session: ExamSession, event: Reset) -> Transition:
    _require(session, event, Stage.RESULTS)
    return Transition(ExamSession(
        session_id=session.session_id,
        station_duration=session.station_duration,
        time_remaining=session.station_duration,
        max_score=session.max_score,
        created_at=session.created_at,
    ))


_HANDLERS: Dict[Type, Callable[[ExamSession, object], Transition]] = {
    SubmitLogin: _on_login,
    SelectMode: _on_select_mode,
    BackToModes: _on_back_to_modes,
    SelectTopic: _on_select_topic,
    ScenarioResolved: _on_scenario_resolved,
    StartExam: _on_start_exam,
    CancelPreview: _on_cancel_preview,
    RecordResponse: _on_record_response,
    UpdateNotes: _on_update_notes,
    TimerTick: _on_timer_tick,
    FinishExam: _on_finish_exam,
    FeedbackResolved: _on_feedback_resolved,
    SetFinalScore: _on_set_final_score,
    SetJustification: _on_set_justification,
    SetEvaluatorName: _on_set_evaluator_name,
    Reset: _on_reset,
}


def transition(session: ExamSession, event) -> Transition:
    """
    Застосувати подію до сесії.

    Args:
        session: Поточний стан (не змінюється)
        event: Одна з подій events.py

    Returns:
        Transition(session=новий стан, effect=зовнішній виклик або None)

    Raises:
        InvalidTransitionError: подія недопустима на поточному етапі
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown event type: {type(event).__name__}")
    return handler(session, event)
