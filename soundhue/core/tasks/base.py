"""
Base classes for Tasks layer.

Signal is the immutable input every task reads.
TaskResult is the base class for all task outputs.
ProgressCallback enables status updates from the pipeline.
"""

import time
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, Callable

from ...errors import InvalidSignalError
from ...utils import get_config, get_logger

logger = get_logger(__name__)


# Type alias for progress callback
# Args: (stage: str, progress: float 0-1, message: str)
ProgressCallback = Callable[[str, float, str], None]


@dataclass(frozen=True, eq=False)
class Signal:
    """
    Decoded, down-mixed audio ready for analysis.

    Attributes:
        samples: Mono samples in [-1, 1] (read-only float32)
        sample_rate: Samples per second (positive)
        channel_count: Channels in the source before down-mix
    """
    samples: np.ndarray
    sample_rate: int
    channel_count: int = 1

    def __post_init__(self):
        """
        Validate and normalize the samples.

        The samples are copied to read-only float32. Isolated non-finite
        samples are zeroed and out-of-range samples clipped; both are logged.

        Raises:
            InvalidSignalError: sample rate <= 0, samples not 1-D, no samples,
                no finite sample, or channel_count < 1
        """
        sr = self.sample_rate
        if sr is None or int(sr) <= 0:
            raise InvalidSignalError("Sample rate must be positive", data={"sample_rate": sr})

        y = np.asarray(self.samples)
        if y.ndim != 1:
            raise InvalidSignalError("Signal samples must be 1-D (mono)", data={"shape": list(y.shape)})
        if y.size == 0:
            raise InvalidSignalError("Signal has no samples", data={"sample_rate": int(sr)})
        if self.channel_count is None or int(self.channel_count) < 1:
            raise InvalidSignalError("Channel count must be at least 1", data={"channel_count": self.channel_count})

        y = np.array(y, dtype=np.float32)

        finite = np.isfinite(y)
        if not finite.any():
            raise InvalidSignalError("Signal has no finite samples", data={"n_samples": int(y.size)})
        if not finite.all():
            logger.warning(f"Replacing {int((~finite).sum())} non-finite samples with 0")
            y[~finite] = 0.0

        peak = float(np.max(np.abs(y)))
        if peak > 1.0:
            logger.warning(f"Clipping samples to [-1, 1] (peak {peak:.3f})")
            np.clip(y, -1.0, 1.0, out=y)

        y.setflags(write=False)
        object.__setattr__(self, 'samples', y)
        object.__setattr__(self, 'sample_rate', int(sr))
        object.__setattr__(self, 'channel_count', int(self.channel_count))

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration_sec(self) -> float:
        """Signal length in seconds."""
        return len(self.samples) / self.sample_rate


def create_signal(
    y: np.ndarray,
    sr: int,
    channel_count: Optional[int] = None,
) -> Signal:
    """
    Down-mix raw samples and wrap them in a Signal.

    Multi-channel input is channels-first (channels, n) and is averaged
    to mono. Signal itself validates and cleans the result.

    Args:
        y: Audio samples, shape (n,) or (channels, n)
        sr: Sample rate
        channel_count: Source channel count when y was already down-mixed

    Returns:
        Signal ready for analysis

    Raises:
        InvalidSignalError: empty samples, no finite sample, sample rate <= 0,
            or more than two dimensions
    """
    y = np.asarray(y)

    if y.ndim == 0 or y.ndim > 2:
        raise InvalidSignalError("Samples must be 1-D or (channels, n)", data={"shape": list(y.shape)})

    channels = channel_count or 1
    if y.ndim == 2:
        channels = max(1, y.shape[0])
        y = np.mean(y, axis=0) if y.shape[0] > 0 else np.zeros(0)

    return Signal(samples=y, sample_rate=sr, channel_count=channels)


@dataclass(frozen=True)
class TaskResult:
    """
    Base result for all tasks.

    All task results inherit from this class and add their specific
    output fields. Timing is excluded from equality.

    Attributes:
        success: Whether the task completed successfully
        task_name: Name of the task
        processing_time_sec: How long the task took
        error: Error message if success is False
    """
    success: bool = True
    task_name: str = ""
    processing_time_sec: float = field(default=0.0, compare=False)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            'success': self.success,
            'task_name': self.task_name,
            'processing_time_sec': self.processing_time_sec,
            'error': self.error
        }


class BaseTask(ABC):
    """
    Abstract base class for all tasks.

    Each task implements execute() and, when it has a meaningful default,
    fallback(). execute_timed() never raises: failures are logged and
    turned into the fallback result.

    Example:
        class MyTask(BaseTask):
            def execute(self, signal: Signal) -> MyResult:
                frames = frame_signal(signal.samples, 2048, 512)
                return MyResult(task_name=self.name, ...)
    """

    def __init__(self, config=None):
        """
        Args:
            config: Config instance; the global config when None
        """
        self.config = config if config is not None else get_config()

    @property
    def name(self) -> str:
        """Task name (class name by default)."""
        return self.__class__.__name__

    @abstractmethod
    def execute(self, signal: Signal) -> TaskResult:
        """
        Execute the task on the given signal.

        Args:
            signal: Validated Signal

        Returns:
            TaskResult subclass with task-specific outputs
        """
        pass

    def fallback(self, error: str) -> TaskResult:
        """Result reported when execute() raised."""
        return TaskResult(success=False, task_name=self.name, error=error)

    def execute_timed(self, signal: Signal) -> TaskResult:
        """
        Execute the task and measure processing time.

        Errors are recovered into fallback() so one failing analysis does
        not block the others.
        """
        start = time.perf_counter()
        try:
            result = self.execute(signal)
        except Exception as e:
            logger.warning(f"[{self.name}] failed, using defaults: {e}", exc_info=True)
            result = self.fallback(str(e))

        elapsed = time.perf_counter() - start
        logger.debug(f"[{self.name}] done in {elapsed:.3f}s")
        return replace(result, processing_time_sec=elapsed)

    def __repr__(self) -> str:
        return f"{self.name}()"
