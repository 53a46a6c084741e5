"""Clock adapters - Implement the Clock protocol."""

import time


class SystemClock:
    """Wall-clock time in whole UNIX seconds."""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """
    Manually advanced clock for tests and replays.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, start: int = 0) -> None:
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds
