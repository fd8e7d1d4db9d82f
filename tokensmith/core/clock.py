"""Injectable time sources returning Unix seconds."""

import time
from collections.abc import Callable

Clock = Callable[[], int]


def system_clock() -> int:
    """Return the current wall-clock time in whole Unix seconds."""
    return int(time.time())


class FixedClock:
    """Clock pinned to a timestamp, for deterministic tests and replays."""

    def __init__(self, timestamp: int) -> None:
        self._timestamp = timestamp

    def __call__(self) -> int:
        return self._timestamp
