# hybrid_cart/client/debounce.py
import threading
from typing import Any, Callable


class Debouncer:
    """
    Skleja serie wywolan w jedno po okresie ciszy.

    Stan jest jawny: pending_timer + latest_payload. Kazde schedule()
    anuluje czekajacy timer, nadpisuje payload i startuje nowy timer,
    wiec akcja dostaje tylko ostatni stan, nigdy posredni.
    """

    def __init__(self, delay: float, action: Callable[[Any], None]):
        self.delay = delay
        self.action = action
        self.pending_timer: threading.Timer | None = None
        self.latest_payload: Any = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self.pending_timer is not None

    def schedule(self, payload: Any) -> None:
        with self._lock:
            if self.pending_timer is not None:
                self.pending_timer.cancel()
            self.latest_payload = payload
            timer = threading.Timer(self.delay, self._fire)
            timer.args = (timer,)
            timer.daemon = True
            self.pending_timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self.pending_timer is not None:
                self.pending_timer.cancel()
            self.pending_timer = None
            self.latest_payload = None

    def flush(self) -> None:
        """Odpala czekajaca akcje od razu (np. przy zamykaniu klienta)."""
        with self._lock:
            timer = self.pending_timer
            if timer is None:
                return
            timer.cancel()
        self._fire(timer)

    def _fire(self, timer: threading.Timer) -> None:
        with self._lock:
            #timer zdazyl wystartowac zanim schedule() go anulowal - ignoruj
            if self.pending_timer is not timer:
                return
            payload = self.latest_payload
            self.pending_timer = None
            self.latest_payload = None
        self.action(payload)
