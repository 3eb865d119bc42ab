import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Timing:
    started_at: Optional[float] = None
    stopped_at: Optional[float] = None

    def start(self):
        self.started_at = time.perf_counter()

    def stop(self):
        self.stopped_at = time.perf_counter()

    @property
    def elapsed(self) -> float:
        """Seconds from start() to stop(); 0.0 if either is missing."""
        if self.started_at is None or self.stopped_at is None:
            return 0.0
        return self.stopped_at - self.started_at

    def elapsed_string(self) -> str:
        seconds = self.elapsed
        if seconds < 1e-3:
            return f"{seconds * 1e6:.1f}µs"
        if seconds < 1:
            return f"{seconds * 1e3:.3f}ms"
        return f"{seconds:.3f}s"


@dataclass
class Performance:
    execution: Timing = field(default_factory=Timing)
    parsing: Timing = field(default_factory=Timing)
    sorting: Timing = field(default_factory=Timing)
