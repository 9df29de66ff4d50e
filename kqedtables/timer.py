"""Wall-clock timing of operations and the current GMT date."""

from __future__ import annotations

import sys
import time

__all__ = ["Timer", "get_date"]


class Timer:
    """Measures elapsed wall time since the last :meth:`start`.

    The timer starts when it is created.
    """

    def __init__(self) -> None:
        self._t0 = 0.0
        self.start()

    def start(self) -> None:
        """Reset the reference point to now."""
        self._t0 = time.perf_counter()

    def elapsed(self) -> float:
        """Seconds since the last :meth:`start`."""
        return time.perf_counter() - self._t0

    def report(self, stream=None) -> float:
        """Write the elapsed time to ``stream`` (stdout by default) and return it."""
        diff = self.elapsed()
        out = sys.stdout if stream is None else stream
        out.write(f"\n[TIMER] elapsed :: {diff:e} s \n")
        return diff


def get_date() -> str:
    """Current date in GMT, in ``asctime`` form without a trailing newline."""
    return time.asctime(time.gmtime(time.time()))