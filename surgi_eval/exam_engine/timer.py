"""
SurgiEval — Таймер станції

CountdownTimer — скасовуваний повторюваний тік:
- start(): запускає daemon-потік, що викликає on_tick раз на interval
- stop(): синхронний — після повернення жоден тік вже не виконається
- stop() можна викликати зсередини on_tick (закінчення часу)

Тік виконується під спільним lock'ом (RLock контролера), тому тік
і дії користувача не перетинаються, а зупинка не гониться з декрементом.
"""

import threading
from typing import Callable, Optional


class CountdownTimer:
    """
    Приклад:
        timer = CountdownTimer(on_tick=lambda: controller.dispatch(TimerTick()))
        timer.start()
        ...
        timer.stop()
    """

    def __init__(
        self,
        on_tick: Callable[[], None],
        interval: float = 1.0,
        lock: Optional[threading.RLock] = None,
    ):
        self.on_tick = on_tick
        self.interval = interval
        self._lock = lock or threading.RLock()
        self._stop_event = threading.Event()
        self._stop_event.set()
        self._thread: Optional[threading.Thread] = None
        self.ticks = 0

    @property
    def is_running(self) -> bool:
        return not self._stop_event.is_set()

    def start(self) -> None:
        """Запустити (повторний виклик на працюючому таймері нічого не робить)"""
        with self._lock:
            if self.is_running:
                return
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._run,
                args=(stop_event,),
                name="surgi-eval-timer",
                daemon=True,
            )
            self._thread.start()

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            with self._lock:
                # Зупинку могли викликати, поки чекали на lock
                if stop_event.is_set():
                    break
                self.ticks += 1
                self.on_tick()

    def stop(self) -> None:
        """Зупинити; ідемпотентно"""
        self._stop_event.set()
        # Чекаємо, поки завершиться тік, що вже виконується
        with self._lock:
            pass

    def cancel(self) -> None:
        """Синонім stop()"""
        self.stop()
