"""Background timer that repeats until cancelled"""

import threading
from typing import Callable


class RepeatingTimer(threading.Thread):
    """
    Call `function` every `interval()` seconds on a daemon thread.

    The interval is re-evaluated before each wait so a changed cadence
    applies from the next tick onward.
    """

    def __init__(self, interval: Callable[[], float], function: Callable[[], None], name: str = "repeating-timer"):
        super().__init__(name=name, daemon=True)
        self._interval = interval
        self._function = function
        self._finished = threading.Event()

    def cancel(self) -> None:
        self._finished.set()

    @property
    def cancelled(self) -> bool:
        return self._finished.is_set()

    def run(self) -> None:
        while not self._finished.wait(self._interval()):
            self._function()
