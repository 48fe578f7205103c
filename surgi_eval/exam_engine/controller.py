"""
SurgiEval — Контролер станції

ExamController володіє однією ExamSession та:
- послідовно застосовує події під RLock
- виконує ефекти (зовнішні виклики) через GenerationClient
- перетворює результат виклику на подію ScenarioResolved / FeedbackResolved
- запускає та зупиняє CountdownTimer разом з прапорцем timer_active
- формує PDF звіт зі знімка сесії

Приклад:
    controller = ExamController(GeminiClient())
    controller.login("Ana María Pérez", "1098765432")
    controller.select_mode(ExamMode.CASE)
    controller.select_topic("Apendicitis aguda")      # блокує до відповіді AI
    controller.start_exam()
    controller.record_response("c1", PerformanceStatus.CORRECT)
    controller.finish_exam()                           # -> RESULTS
    controller.set_evaluator_name("Dr. Gómez")
    path = controller.save_report("reports")
"""

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from surgi_eval.config import SurgiEvalConfig, get_default_config
from surgi_eval.exceptions import GenerationError, ReportError
from surgi_eval.generation import GenerationClient, GenerationResult
from surgi_eval.schemas import ExamMode, PerformanceStatus
from surgi_eval.report import build_report, write_report

from .session import ExamSession, Stage
from .timer import CountdownTimer
from .transitions import transition
from .events import (
    BackToModes, CancelPreview, FeedbackResolved, FinishExam, RecordResponse,
    RequestFeedback, RequestScenario, Reset, ScenarioResolved, SelectMode,
    SelectTopic, SetEvaluatorName, SetFinalScore, SetJustification, StartExam,
    SubmitLogin, TimerTick, UpdateNotes,
)

logger = logging.getLogger(__name__)


class ExamController:
    """Виконавець машини станів для однієї сесії"""

    def __init__(
        self,
        client: GenerationClient,
        config: Optional[SurgiEvalConfig] = None,
        session: Optional[ExamSession] = None,
        use_timer: bool = True,
    ):
        self.client = client
        self.config = config or get_default_config()
        self.use_timer = use_timer

        duration = self.config.timer.station_duration_seconds
        self.session = session or ExamSession(
            station_duration=duration,
            time_remaining=duration,
            max_score=self.config.scoring.max_score,
        )

        self._lock = threading.RLock()
        self.timer = CountdownTimer(
            on_tick=self._on_tick,
            interval=self.config.timer.tick_interval_seconds,
            lock=self._lock,
        )

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def _apply(self, event):
        """Перехід під lock'ом; повертає ефект (або None)"""
        with self._lock:
            result = transition(self.session, event)
            self.session = result.session
            self._sync_timer()
            return result.effect

    def dispatch(self, event) -> ExamSession:
        """
        Застосувати подію; якщо перехід вимагає зовнішнього виклику —
        виконати його (поза lock'ом) та застосувати результат.
        """
        effect = self._apply(event)
        while effect is not None:
            effect = self._apply(self._perform(effect))
        return self.session

    def _sync_timer(self) -> None:
        if not self.use_timer:
            return
        if self.session.timer_active and not self.timer.is_running:
            self.timer.start()
        elif not self.session.timer_active and self.timer.is_running:
            self.timer.stop()

    def _on_tick(self) -> None:
        """Виконується в потоці таймера під спільним lock'ом"""
        effect = self._apply(TimerTick())
        if effect is not None:
            # Час вичерпано: зворотний зв'язок запитуємо поза потоком таймера
            worker = threading.Thread(
                target=self._resolve, args=(effect,), name="surgi-eval-feedback", daemon=True
            )
            worker.start()

    def _resolve(self, effect) -> None:
        next_effect = effect
        while next_effect is not None:
            next_effect = self._apply(self._perform(next_effect))

    # =========================================================================
    # EFFECTS
    # =========================================================================

    def _perform(self, effect):
        """Виконати зовнішній виклик і повернути подію з GenerationResult"""
        if isinstance(effect, RequestScenario):
            try:
                scenario = self.client.generate_scenario(
                    effect.topic, effect.mode, effect.include_simulated_patient
                )
                return ScenarioResolved(GenerationResult.ok(scenario))
            except GenerationError as e:
                logger.warning("Scenario generation failed for '%s': %s", effect.topic, e)
                return ScenarioResolved(GenerationResult.err(str(e)))
            except Exception as e:
                logger.exception("Unexpected error generating scenario for '%s'", effect.topic)
                return ScenarioResolved(GenerationResult.err(str(e)))

        if isinstance(effect, RequestFeedback):
            try:
                feedback = self.client.generate_feedback(
                    effect.scenario, effect.responses, effect.notes, effect.computed_score
                )
                return FeedbackResolved(GenerationResult.ok(feedback))
            except GenerationError as e:
                logger.warning(
                    "Feedback generation failed, using local score %.2f: %s",
                    effect.computed_score, e,
                )
                return FeedbackResolved(GenerationResult.err(str(e)))
            except Exception as e:
                logger.exception("Unexpected error generating feedback")
                return FeedbackResolved(GenerationResult.err(str(e)))

        raise TypeError(f"Unknown effect: {type(effect).__name__}")

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def login(self, name: str, student_id: str) -> ExamSession:
        return self.dispatch(SubmitLogin(name=name, student_id=student_id))

    def select_mode(self, mode: ExamMode) -> ExamSession:
        return self.dispatch(SelectMode(mode=ExamMode(mode)))

    def back_to_modes(self) -> ExamSession:
        return self.dispatch(BackToModes())

    def select_topic(self, topic: str, include_simulated_patient: bool = False) -> ExamSession:
        return self.dispatch(SelectTopic(topic=topic, include_simulated_patient=include_simulated_patient))

    def start_exam(self) -> ExamSession:
        return self.dispatch(StartExam())

    def cancel_preview(self) -> ExamSession:
        return self.dispatch(CancelPreview())

    def record_response(self, item_id: str, status: PerformanceStatus) -> ExamSession:
        return self.dispatch(RecordResponse(item_id=item_id, status=PerformanceStatus(status)))

    def update_notes(self, notes: str) -> ExamSession:
        return self.dispatch(UpdateNotes(notes=notes))

    def tick(self) -> ExamSession:
        """Ручний тік (без фонового таймера)"""
        return self.dispatch(TimerTick())

    def finish_exam(self) -> ExamSession:
        return self.dispatch(FinishExam())

    def set_final_score(self, value: float) -> ExamSession:
        return self.dispatch(SetFinalScore(value=value))

    def set_justification(self, text: str) -> ExamSession:
        return self.dispatch(SetJustification(text=text))

    def set_evaluator_name(self, name: str) -> ExamSession:
        return self.dispatch(SetEvaluatorName(name=name))

    def reset(self) -> ExamSession:
        return self.dispatch(Reset())

    # =========================================================================
    # REPORT
    # =========================================================================

    def _results_snapshot(self):
        session = self.session
        if session.stage is not Stage.RESULTS:
            raise ReportError(f"Report is available only in RESULTS stage (current: {session.stage.value})")
        return session.snapshot()

    def report_bytes(self, generated_at: Optional[datetime] = None) -> bytes:
        """PDF звіт у пам'яті"""
        return build_report(
            self._results_snapshot(),
            config=self.config.report,
            generated_at=generated_at,
        )

    def save_report(self, output_dir: Optional[str] = None, generated_at: Optional[datetime] = None) -> Path:
        """Зберегти PDF звіт; ім'я файлу — з ПІБ та документа студента"""
        return write_report(
            self._results_snapshot(),
            output_dir=output_dir or self.config.report.output_dir,
            config=self.config.report,
            generated_at=generated_at,
        )

    def close(self) -> None:
        self.timer.stop()

    def __repr__(self) -> str:
        return f"ExamController({self.session!r})"
