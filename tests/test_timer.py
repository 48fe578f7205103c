"""
Тести для модуля exam_engine.timer

Запуск: pytest tests/test_timer.py -v
Або демо: python tests/test_timer.py
"""

import threading
import time

import fakes  # noqa: F401  (корінь проекту в sys.path)


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_start_and_stop():
    """Таймер тікає після start і зупиняється після stop"""
    from surgi_eval.exam_engine import CountdownTimer

    calls = []
    timer = CountdownTimer(on_tick=lambda: calls.append(1), interval=0.01)

    assert not timer.is_running
    timer.start()
    assert timer.is_running
    assert _wait_for(lambda: len(calls) >= 3)

    timer.stop()
    assert not timer.is_running

    count = len(calls)
    time.sleep(0.05)
    assert len(calls) == count

    print(f"✓ {count} ticks, none after stop")


def test_start_is_idempotent():
    """Повторний start не створює другий потік"""
    from surgi_eval.exam_engine import CountdownTimer

    timer = CountdownTimer(on_tick=lambda: None, interval=0.01)
    timer.start()
    first = timer._thread
    timer.start()

    assert timer._thread is first

    timer.stop()
    timer.stop()
    assert not timer.is_running

    print("✓ start/stop idempotent")


def test_stop_from_tick():
    """stop() зсередини on_tick не блокує потік таймера"""
    from surgi_eval.exam_engine import CountdownTimer

    done = threading.Event()
    holder = {}

    def on_tick():
        holder["timer"].stop()
        done.set()

    timer = CountdownTimer(on_tick=on_tick, interval=0.01)
    holder["timer"] = timer
    timer.start()

    assert done.wait(2.0)
    assert not timer.is_running
    assert _wait_for(lambda: not timer._thread.is_alive())
    assert timer.ticks == 1

    print("✓ Stop from inside tick")


def test_restart_after_stop():
    """Після stop таймер можна запустити знову"""
    from surgi_eval.exam_engine import CountdownTimer

    calls = []
    timer = CountdownTimer(on_tick=lambda: calls.append(1), interval=0.01)

    timer.start()
    assert _wait_for(lambda: len(calls) >= 1)
    timer.stop()

    before = len(calls)
    timer.start()
    assert _wait_for(lambda: len(calls) > before)
    timer.stop()

    print("✓ Restart")


def test_controller_timer_expiry():
    """Фоновий таймер контролера доводить станцію до RESULTS"""
    from surgi_eval.config import SurgiEvalConfig
    from surgi_eval.exam_engine import ExamController, Stage
    from surgi_eval.schemas import ExamMode
    from fakes import FakeClient

    config = SurgiEvalConfig()
    config.timer.station_duration_seconds = 3
    config.timer.tick_interval_seconds = 0.01

    controller = ExamController(FakeClient(), config=config)
    controller.login("Ana", "123")
    controller.select_mode(ExamMode.CASE)
    controller.select_topic("Trauma de tórax")
    controller.start_exam()

    assert controller.timer.is_running
    assert _wait_for(lambda: controller.session.stage is Stage.RESULTS)

    assert controller.session.time_remaining == 0
    assert not controller.timer.is_running
    assert len(controller.client.feedback_calls) == 1

    controller.close()

    print(f"✓ Expired: {controller.session.time_display}")


def test_controller_finish_stops_timer():
    """Завершення вручну зупиняє таймер"""
    from surgi_eval.config import SurgiEvalConfig
    from surgi_eval.exam_engine import ExamController
    from surgi_eval.schemas import ExamMode
    from fakes import FakeClient

    config = SurgiEvalConfig()
    config.timer.tick_interval_seconds = 0.01

    controller = ExamController(FakeClient(), config=config)
    controller.login("Ana", "123")
    controller.select_mode(ExamMode.PROCEDURE)
    controller.select_topic("Sutura de herida")
    controller.start_exam()
    assert _wait_for(lambda: controller.session.time_remaining < 480)

    controller.finish_exam()
    assert not controller.timer.is_running

    remaining = controller.session.time_remaining
    time.sleep(0.05)
    assert controller.session.time_remaining == remaining

    print(f"✓ Finished at {controller.session.time_display}")


def demo():
    print("=" * 60)
    print("SurgiEval — Тест таймера")
    print("=" * 60)

    test_start_and_stop()
    test_start_is_idempotent()
    test_stop_from_tick()
    test_restart_after_stop()
    test_controller_timer_expiry()
    test_controller_finish_stops_timer()

    print("=" * 60)
    print("✅ Всі тести пройдено!")


if __name__ == "__main__":
    demo()
