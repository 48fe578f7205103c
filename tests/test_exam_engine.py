"""
Тести для модуля exam_engine

Запуск: pytest tests/test_exam_engine.py -v
Або демо: python tests/test_exam_engine.py
"""

import pytest

from fakes import FakeClient, make_case_scenario, make_feedback, make_procedure_scenario


def _controller(**client_kwargs):
    from surgi_eval.config import SurgiEvalConfig
    from surgi_eval.exam_engine import ExamController

    return ExamController(FakeClient(**client_kwargs), config=SurgiEvalConfig(), use_timer=False)


def _running(mode=None, **client_kwargs):
    """Контролер на етапі EXAM_RUNNING"""
    from surgi_eval.schemas import ExamMode

    controller = _controller(**client_kwargs)
    controller.login("Ana María Pérez", "1098765432")
    controller.select_mode(mode or ExamMode.CASE)
    controller.select_topic("Apendicitis aguda")
    controller.start_exam()
    return controller


# ============================================================
# Login / selection
# ============================================================

def test_login_guard():
    """Порожнє ім'я або документ — етап не змінюється, без помилки"""
    from surgi_eval.exam_engine import ExamSession, Stage, SubmitLogin, transition

    session = ExamSession()

    for name, student_id in [("", "123"), ("Ana", ""), ("   ", "123"), ("Ana", "  ")]:
        result = transition(session, SubmitLogin(name=name, student_id=student_id))
        assert result.session.stage is Stage.LOGIN
        assert result.session.student is None
        assert result.effect is None

    result = transition(session, SubmitLogin(name=" Ana ", student_id=" 123 "))
    assert result.session.stage is Stage.MODE_SELECTION
    assert result.session.student.name == "Ana"
    assert result.session.student.id == "123"

    print("✓ Login guard")


def test_transition_is_pure():
    """Вхідна сесія не змінюється"""
    from surgi_eval.exam_engine import ExamSession, Stage, SubmitLogin, transition

    session = ExamSession()
    result = transition(session, SubmitLogin(name="Ana", student_id="123"))

    assert session.stage is Stage.LOGIN
    assert session.student is None
    assert result.session is not session
    assert result.session.session_id == session.session_id

    print("✓ Pure transition")


def test_mode_and_back():
    """Вибір режиму та повернення"""
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import ExamMode

    controller = _controller()
    controller.login("Ana", "123")
    controller.select_mode(ExamMode.PROCEDURE)

    assert controller.session.stage is Stage.TOPIC_SELECTION
    assert controller.session.is_procedure

    controller.back_to_modes()
    assert controller.session.stage is Stage.MODE_SELECTION

    controller.select_mode(ExamMode.CASE)
    assert controller.session.mode is ExamMode.CASE

    print("✓ Mode selection and back")


def test_select_topic_emits_request():
    """Вибір теми -> GENERATING + ефект RequestScenario"""
    from surgi_eval.exam_engine import (
        ExamSession, RequestScenario, SelectMode, SelectTopic, Stage, SubmitLogin, transition
    )
    from surgi_eval.schemas import ExamMode

    session = transition(ExamSession(), SubmitLogin(name="Ana", student_id="1")).session
    session = transition(session, SelectMode(mode=ExamMode.PROCEDURE)).session

    # Порожня тема: нічого не відбувається
    blank = transition(session, SelectTopic(topic="  "))
    assert blank.session.stage is Stage.TOPIC_SELECTION
    assert blank.effect is None

    # Пацієнт для процедури ігнорується
    result = transition(session, SelectTopic(topic="Toracostomía", include_simulated_patient=True))
    assert result.session.stage is Stage.GENERATING
    assert isinstance(result.effect, RequestScenario)
    assert result.effect.is_procedure
    assert result.effect.include_simulated_patient is False

    print(f"✓ Effect: {result.effect}")


def test_scenario_generation_success():
    """Сценарій від клієнта -> PREVIEW, тема проставлена"""
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import ExamMode

    controller = _controller(scenario=make_case_scenario(topic=""))
    controller.login("Ana", "123")
    controller.select_mode(ExamMode.CASE)
    controller.select_topic("Colelitiasis", include_simulated_patient=True)

    session = controller.session
    assert session.stage is Stage.PREVIEW
    assert session.scenario.topic == "Colelitiasis"
    assert session.error is None
    assert controller.client.scenario_calls == [("Colelitiasis", ExamMode.CASE, True)]

    print(f"✓ Preview: {session.scenario.title}")


def test_scenario_generation_failure():
    """Помилка генерації -> TOPIC_SELECTION з повідомленням"""
    from surgi_eval.exam_engine import SCENARIO_ERROR_MESSAGE, Stage
    from surgi_eval.schemas import ExamMode

    controller = _controller(fail_scenario=True)
    controller.login("Ana", "123")
    controller.select_mode(ExamMode.CASE)
    controller.select_topic("Quemaduras")

    assert controller.session.stage is Stage.TOPIC_SELECTION
    assert controller.session.scenario is None
    assert controller.session.error == SCENARIO_ERROR_MESSAGE

    # Повторний вибір скидає помилку
    controller.client.fail_scenario = False
    controller.select_topic("Quemaduras")
    assert controller.session.stage is Stage.PREVIEW
    assert controller.session.error is None

    print("✓ Scenario failure handled")


def test_scenario_mode_mismatch():
    """Сценарій іншого режиму не приймається"""
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import ExamMode

    controller = _controller(scenario=make_procedure_scenario())
    controller.login("Ana", "123")
    controller.select_mode(ExamMode.CASE)
    controller.select_topic("Apendicitis aguda")

    assert controller.session.stage is Stage.TOPIC_SELECTION
    assert controller.session.error

    print("✓ Mode mismatch rejected")


def test_cancel_preview():
    """Скасування попереднього перегляду"""
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import ExamMode

    controller = _controller()
    controller.login("Ana", "123")
    controller.select_mode(ExamMode.CASE)
    controller.select_topic("Abdomen agudo")
    controller.cancel_preview()

    assert controller.session.stage is Stage.TOPIC_SELECTION
    assert controller.session.scenario is None

    print("✓ Preview cancelled")


# ============================================================
# Exam
# ============================================================

def test_start_resets_timer_and_responses():
    """Старт: 480 с, порожні відповіді та нотатки, таймер активний"""
    from dataclasses import replace
    from surgi_eval.exam_engine import ExamSession, Stage, StartExam, transition
    from surgi_eval.schemas import ExamMode, PerformanceStatus

    session = ExamSession(
        stage=Stage.PREVIEW,
        mode=ExamMode.CASE,
        scenario=make_case_scenario(),
    )
    session = replace(session, time_remaining=12, responses={"c1": PerformanceStatus.CORRECT},
                      evaluator_notes="old")

    started = transition(session, StartExam()).session

    assert started.stage is Stage.EXAM_RUNNING
    assert started.time_remaining == 480
    assert started.time_display == "08:00"
    assert started.responses == {}
    assert started.evaluator_notes == ""
    assert started.timer_active

    print(f"✓ Started: {started.time_display}")


def test_record_response_idempotent():
    """Повторна позначка тим самим статусом нічого не змінює"""
    from surgi_eval.schemas import PerformanceStatus

    controller = _running()
    controller.record_response("c1", PerformanceStatus.PARTIAL)
    first = controller.session

    controller.record_response("c1", PerformanceStatus.PARTIAL)
    assert controller.session is first

    controller.record_response("c1", PerformanceStatus.CORRECT)
    assert controller.session.responses == {"c1": PerformanceStatus.CORRECT}
    assert controller.session.n_answered == 1

    print("✓ Idempotent recording")


def test_record_unknown_item():
    """Невідомий пункт чек-листа — помилка"""
    from surgi_eval.exceptions import UnknownChecklistItemError
    from surgi_eval.schemas import PerformanceStatus

    controller = _running()
    with pytest.raises(UnknownChecklistItemError):
        controller.record_response("zz", PerformanceStatus.CORRECT)

    assert controller.session.responses == {}

    print("✓ Unknown item rejected")


def test_timer_tick():
    """Тік зменшує час лише на активній станції"""
    from surgi_eval.exam_engine import ExamSession, TimerTick, transition

    idle = ExamSession()
    assert transition(idle, TimerTick()).session is idle

    controller = _running()
    controller.tick()
    controller.tick()

    assert controller.session.time_remaining == 478
    assert controller.session.time_display == "07:58"

    print(f"✓ Ticks: {controller.session.time_display}")


def test_expiry_finishes_once():
    """Закінчення часу завершує станцію рівно один раз"""
    from dataclasses import replace
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import PerformanceStatus

    controller = _running()
    controller.record_response("c1", PerformanceStatus.CORRECT)
    controller.session = replace(controller.session, time_remaining=2)

    controller.tick()
    assert controller.session.stage is Stage.EXAM_RUNNING
    controller.tick()

    assert controller.session.stage is Stage.RESULTS
    assert controller.session.time_remaining == 0
    assert not controller.session.timer_active
    assert len(controller.client.feedback_calls) == 1

    # Пізні тіки ігноруються
    controller.tick()
    assert len(controller.client.feedback_calls) == 1

    print("✓ Expiry finished the station once")


def test_finish_with_feedback():
    """Завершення: оцінка рахується локально та передається в запит"""
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import PerformanceStatus as S

    controller = _running(feedback=make_feedback(4.26))
    controller.record_response("c1", S.CORRECT)
    controller.record_response("c2", S.CORRECT)
    controller.record_response("c3", S.PARTIAL)
    controller.update_notes("Buen abordaje")
    controller.finish_exam()

    session = controller.session
    title, responses, notes, computed = controller.client.feedback_calls[0]

    assert computed == pytest.approx(3.125)
    assert notes == "Buen abordaje"
    assert responses["c3"] is S.PARTIAL

    assert session.stage is Stage.RESULTS
    assert session.feedback.calculated_score == 4.26
    assert session.final_score == 4.3
    assert not session.score_changed

    print(f"✓ Results: calculated={session.feedback.calculated_score}, final={session.final_score}")


def test_feedback_failure_uses_local_score():
    """Помилка зворотного зв'язку -> локальна оцінка, все одно RESULTS"""
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import PerformanceStatus as S

    controller = _running(fail_feedback=True)
    controller.record_response("c1", S.CORRECT)
    controller.record_response("c2", S.CORRECT)
    controller.record_response("c3", S.PARTIAL)
    controller.record_response("c4", S.NOT_DONE)
    controller.finish_exam()

    session = controller.session
    assert session.stage is Stage.RESULTS
    assert session.feedback.calculated_score == pytest.approx(3.125)
    assert session.feedback.strengths == ["No se pudo generar análisis AI."]
    assert session.final_score == 3.1

    print(f"✓ Fallback: {session.final_score}")


# ============================================================
# Results
# ============================================================

def test_final_score_override():
    """Зміна оцінки: округлення, діапазон, підказка про обґрунтування"""
    from surgi_eval.exceptions import ScoreOverrideError

    controller = _running(feedback=make_feedback(3.0))
    controller.finish_exam()

    controller.set_final_score(3.76)
    assert controller.session.final_score == 3.8
    assert controller.session.score_changed
    assert controller.session.needs_justification

    controller.set_justification("Manejo de vía aérea no reflejado")
    assert not controller.session.needs_justification

    for bad in (5.1, -0.1, float("nan"), "abc"):
        with pytest.raises(ScoreOverrideError):
            controller.set_final_score(bad)
    assert controller.session.final_score == 3.8

    print(f"✓ Override: {controller.session.final_score}")


def test_configured_max_score():
    """Шкала з ScoringConfig: локальна оцінка, межа зміни оцінки, reset"""
    from surgi_eval.config import ScoringConfig, SurgiEvalConfig
    from surgi_eval.exam_engine import ExamController, Stage
    from surgi_eval.exceptions import ScoreOverrideError
    from surgi_eval.schemas import ExamMode
    from surgi_eval.schemas import PerformanceStatus as S

    config = SurgiEvalConfig(scoring=ScoringConfig(max_score=4.0))
    controller = ExamController(FakeClient(fail_feedback=True), config=config, use_timer=False)
    assert controller.session.max_score == 4.0

    controller.login("Ana María Pérez", "1098765432")
    controller.select_mode(ExamMode.CASE)
    controller.select_topic("Apendicitis aguda")
    controller.start_exam()
    controller.record_response("c1", S.CORRECT)
    controller.record_response("c2", S.CORRECT)
    controller.record_response("c3", S.PARTIAL)
    controller.finish_exam()

    assert controller.client.feedback_calls[0][3] == pytest.approx(2.5)
    assert controller.session.feedback.calculated_score == pytest.approx(2.5)
    assert controller.session.final_score == 2.5

    with pytest.raises(ScoreOverrideError):
        controller.set_final_score(4.5)
    controller.set_final_score(4.0)
    assert controller.session.final_score == 4.0

    controller.reset()
    assert controller.session.stage is Stage.LOGIN
    assert controller.session.max_score == 4.0

    print(f"✓ Max score: {config.scoring.max_score}")


def test_evaluator_gate():
    """Без імені екзаменатора звіт недоступний"""
    from surgi_eval.exceptions import MissingEvaluatorError

    controller = _running()
    controller.finish_exam()

    assert not controller.session.can_download_report
    with pytest.raises(MissingEvaluatorError):
        controller.report_bytes()

    controller.set_evaluator_name("   ")
    assert not controller.session.can_download_report

    controller.set_evaluator_name("Dr. Gómez")
    assert controller.session.can_download_report
    assert controller.report_bytes().startswith(b"%PDF")

    print("✓ Evaluator gate")


def test_report_only_in_results():
    """Звіт до завершення станції — ReportError"""
    from surgi_eval.exceptions import ReportError

    controller = _running()
    with pytest.raises(ReportError):
        controller.report_bytes()

    print("✓ Report gated by stage")


def test_reset_clears_everything():
    """Нова оцінка: повне очищення сесії"""
    from surgi_eval.exam_engine import Stage
    from surgi_eval.schemas import PerformanceStatus

    controller = _running()
    session_id = controller.session.session_id
    controller.record_response("c1", PerformanceStatus.CORRECT)
    controller.update_notes("notas")
    controller.finish_exam()
    controller.set_final_score(4.0)
    controller.set_justification("motivo")
    controller.set_evaluator_name("Dr. Gómez")

    controller.reset()
    session = controller.session

    assert session.stage is Stage.LOGIN
    assert session.session_id == session_id
    assert session.student is None
    assert session.mode is None
    assert session.topic == ""
    assert session.scenario is None
    assert session.feedback is None
    assert session.final_score is None
    assert session.responses == {}
    assert session.evaluator_notes == ""
    assert session.justification == ""
    assert session.evaluator_name == ""
    assert session.error is None
    assert session.time_remaining == 480
    assert not session.timer_active

    print("✓ Reset")


def test_invalid_transitions():
    """Подія поза своїм етапом — InvalidTransitionError"""
    from surgi_eval.exam_engine import (
        ExamSession, FinishExam, Reset, SelectTopic, Stage, StartExam, SubmitLogin, transition
    )
    from surgi_eval.exceptions import InvalidTransitionError

    session = ExamSession()
    for event in (StartExam(), FinishExam(), Reset(), SelectTopic(topic="x")):
        with pytest.raises(InvalidTransitionError):
            transition(session, event)

    generating = ExamSession(stage=Stage.GENERATING)
    with pytest.raises(InvalidTransitionError) as exc_info:
        transition(generating, SelectTopic(topic="Quemaduras"))
    assert "GENERATING" in str(exc_info.value)

    feedback_pending = ExamSession(stage=Stage.FEEDBACK_GENERATION)
    for event in (FinishExam(), SubmitLogin(name="a", student_id="b"), Reset()):
        with pytest.raises(InvalidTransitionError):
            transition(feedback_pending, event)

    with pytest.raises(TypeError):
        transition(session, object())

    print("✓ Invalid transitions rejected")


def test_snapshot_requires_results():
    """Знімок без сценарію та зворотного зв'язку — помилка"""
    from surgi_eval.exam_engine import ExamSession
    from surgi_eval.exceptions import IncompleteSessionError

    with pytest.raises(IncompleteSessionError):
        ExamSession().snapshot()

    controller = _running()
    controller.finish_exam()
    snapshot = controller.session.snapshot()

    assert snapshot.student.name == "Ana María Pérez"
    assert snapshot.final_score == controller.session.final_score

    print(f"✓ Snapshot: {snapshot.student.name}")


def test_format_time():
    """mm:ss"""
    from surgi_eval.exam_engine import format_time

    assert format_time(480) == "08:00"
    assert format_time(61) == "01:01"
    assert format_time(0) == "00:00"
    assert format_time(-5) == "00:00"

    print("✓ format_time")


def demo():
    print("=" * 60)
    print("SurgiEval — Тест станції")
    print("=" * 60)

    test_login_guard()
    test_select_topic_emits_request()
    test_scenario_generation_success()
    test_start_resets_timer_and_responses()
    test_record_response_idempotent()
    test_expiry_finishes_once()
    test_finish_with_feedback()
    test_feedback_failure_uses_local_score()
    test_configured_max_score()
    test_reset_clears_everything()
    test_invalid_transitions()

    print("=" * 60)
    print("✅ Всі тести пройдено!")


if __name__ == "__main__":
    demo()
