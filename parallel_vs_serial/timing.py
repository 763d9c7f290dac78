import time
from dataclasses import dataclass


@dataclass
class Timing:
    start_ns: int
    end_ns: int

    def __post_init__(self):
        if self.end_ns < self.start_ns:
            raise ValueError(
                f"Timing ends before it starts: {self.end_ns} < {self.start_ns}"
            )

    @property
    def elapsed_ms(self) -> float:
        return (self.end_ns - self.start_ns) / 1e6


class Stopwatch:
    """Wall-clock timer usable as a context manager.

    The resulting Timing is available as ``.timing`` after the block exits.
    """

    def __init__(self):
        self.start_ns: int | None = None
        self.timing: Timing | None = None

    def __enter__(self) -> "Stopwatch":
        self.start_ns = time.perf_counter_ns()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.timing = Timing(start_ns=self.start_ns, end_ns=time.perf_counter_ns())
