import time


class SystemClock:
    """Monotonic seconds. Injected wherever a TTL or cool-down is measured."""

    def now(self) -> float:
        return time.monotonic()
