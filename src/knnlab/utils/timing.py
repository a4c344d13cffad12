# ============================================
# KNNLab - src/knnlab/utils/timing.py
# Wall-clock timing of recompute stages
# ============================================

import time
import functools
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field

from .logger import get_logger
from .exceptions import BusinessLogicError

logger = get_logger('timing')

@dataclass
class StageTiming:
    """How long one recompute stage took"""
    stage: str
    seconds: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def milliseconds(self) -> float:
        return self.seconds * 1000

class Timer:
    """
    Times one named stage of a recompute pass

    Used as a context manager. The finished StageTiming is kept on
    `timing`; it is logged at debug level, or as a warning when the
    stage raised.
    """

    def __init__(self, stage: str, metadata: Optional[Dict[str, Any]] = None, log: bool = True):
        self.stage = stage
        self.metadata = dict(metadata or {})
        self.log = log

        self._started: Optional[float] = None
        self.timing: Optional[StageTiming] = None

    def start(self) -> 'Timer':
        self._started = time.perf_counter()
        return self

    def stop(self) -> StageTiming:
        if self._started is None:
            raise BusinessLogicError(f"Timer for stage '{self.stage}' was never started")

        self.timing = StageTiming(self.stage, time.perf_counter() - self._started, self.metadata)
        self._started = None
        return self.timing

    def __enter__(self) -> 'Timer':
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        timing = self.stop()
        if not self.log:
            return

        extra = {'stage': self.stage, 'seconds': timing.seconds, **self.metadata}
        if exc_type is None:
            logger.debug(f"{self.stage} took {timing.milliseconds:.2f} ms", extra=extra)
        else:
            logger.warning(
                f"{self.stage} aborted after {timing.milliseconds:.2f} ms: {exc_type.__name__}", extra=extra
            )

def time_it(stage: Optional[str] = None, log: bool = True):
    """Run the decorated function inside a Timer named after the stage (module.function by default)"""
    def decorator(func: Callable) -> Callable:
        name = stage or f"{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with Timer(name, log=log):
                return func(*args, **kwargs)

        return wrapper

    return decorator
