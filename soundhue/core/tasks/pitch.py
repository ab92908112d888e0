"""
Pitch Estimation Task - fundamental frequency by autocorrelation.

Samples a few evenly spaced segments at two window sizes, takes the
strongest autocorrelation lag of each, and reports the median of the
clearest candidates.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Tuple

from .base import Signal, TaskResult, BaseTask
from ..primitives import apply_window, normalized_autocorrelation, estimate_lag_pitch
from ...utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PitchResult(TaskResult):
    """
    Result of pitch estimation.

    hz is None when no candidate was clear enough; treat that as
    "unknown", not as 0 Hz.

    Attributes:
        hz: Fundamental frequency in [20, 2000], rounded, or None
        clarity: Mean autocorrelation peak of the candidates used (0-1)
        candidate_count: Candidates that survived the clarity filter
    """
    task_name: str = "PitchEstimation"

    hz: Optional[float] = None
    clarity: float = 0.0
    candidate_count: int = 0

    @property
    def is_pitched(self) -> bool:
        return self.hz is not None

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            'hz': None if self.hz is None else float(self.hz),
            'clarity': float(self.clarity),
            'candidate_count': int(self.candidate_count),
        })
        return base


class PitchEstimationTask(BaseTask):
    """Estimate the dominant fundamental frequency of a signal."""

    def __init__(self, config=None):
        super().__init__(config)
        get = self.config.get
        self.window_sizes = [int(w) for w in get('pitch.window_sizes', [2048, 4096])]
        self.num_segments = int(get('pitch.num_segments', 3))
        self.min_lag = int(get('pitch.min_lag', 20))
        self.min_frequency = float(get('pitch.min_frequency', 20))
        self.max_frequency = float(get('pitch.max_frequency', 2000))
        self.accept_clarity = get('pitch.accept_clarity', 0.3)
        self.keep_clarity = get('pitch.keep_clarity', 0.5)
        self.top_candidates = int(get('pitch.top_candidates', 5))

    @property
    def name(self) -> str:
        return "PitchEstimation"

    def fallback(self, error: str) -> PitchResult:
        return PitchResult(success=False, error=error)

    def _candidates(self, signal: Signal) -> List[Tuple[float, float]]:
        y = signal.samples
        n = len(y)
        found = []

        for window_size in self.window_sizes:
            for i in range(self.num_segments):
                start = int(n / self.num_segments * i)
                segment = y[start:start + window_size]
                if len(segment) <= self.min_lag + 1:
                    continue

                corr = normalized_autocorrelation(apply_window(segment, 'hann'))
                estimate = estimate_lag_pitch(corr, signal.sample_rate, self.min_lag)
                if estimate is None:
                    continue

                freq, clarity = estimate
                if self.min_frequency <= freq <= self.max_frequency and clarity > self.accept_clarity:
                    found.append((freq, clarity))

        return found

    def execute(self, signal: Signal) -> PitchResult:
        """
        Estimate pitch.

        Args:
            signal: Input signal

        Returns:
            PitchResult with hz=None when nothing periodic was found
        """
        candidates = [c for c in self._candidates(signal) if c[1] > self.keep_clarity]
        if not candidates:
            logger.debug("No clear pitch candidate")
            return PitchResult()

        top = sorted(candidates, key=lambda c: c[1], reverse=True)[:self.top_candidates]
        frequencies = np.array([freq for freq, _ in top])
        clarities = np.array([clarity for _, clarity in top])

        hz = float(np.round(np.median(frequencies)))
        logger.debug(f"Pitch {hz:.0f} Hz from {len(top)} candidates")

        return PitchResult(
            hz=hz,
            clarity=float(np.clip(clarities.mean(), 0.0, 1.0)),
            candidate_count=len(candidates),
        )
