import threading


class Tracker:
    """Converted/errored counters shared by all walker threads.

    Each counter only ever increases. Read them once the walk has joined.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._converted = 0
        self._errored = 0

    def mark_completed(self) -> None:
        with self._lock:
            self._converted += 1

    def mark_failed(self) -> None:
        with self._lock:
            self._errored += 1

    @property
    def converted(self) -> int:
        return self._converted

    @property
    def errored(self) -> int:
        return self._errored

    def get_summary(self) -> dict:
        with self._lock:
            return {
                "converted": self._converted,
                "errored": self._errored,
                "total": self._converted + self._errored,
            }
