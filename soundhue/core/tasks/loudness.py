"""
Loudness Task - full-signal RMS and window energy statistics.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Any

from .base import Signal, TaskResult, BaseTask
from ...utils import get_logger

logger = get_logger(__name__)


def compute_rms(y: np.ndarray, window_size: int = 2048) -> float:
    """
    Root mean square of the whole signal.

    Squares are accumulated window by window; the result equals the RMS
    over all samples.
    """
    if len(y) == 0:
        return 0.0

    total = 0.0
    for start in range(0, len(y), window_size):
        block = y[start:start + window_size]
        total += float(np.dot(block, block.astype(np.float64)))

    return float(np.sqrt(total / len(y)))


@dataclass(frozen=True)
class LoudnessResult(TaskResult):
    """
    Result of loudness analysis.

    Attributes:
        rms: Full-signal RMS (>= 0)
        peak: Maximum absolute sample
        low_energy_ratio: Fraction of windows quieter than the mean window
        energy_variance: Squared coefficient of variation of window RMS
    """
    task_name: str = "Loudness"

    rms: float = 0.0
    peak: float = 0.0
    low_energy_ratio: float = 0.0
    energy_variance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            'rms': float(self.rms),
            'peak': float(self.peak),
            'low_energy_ratio': float(self.low_energy_ratio),
            'energy_variance': float(self.energy_variance),
        })
        return base


class LoudnessTask(BaseTask):
    """Measure signal loudness."""

    def __init__(self, config=None):
        super().__init__(config)
        self.window_size = int(self.config.get('loudness.window_size', 2048))

    @property
    def name(self) -> str:
        return "Loudness"

    def fallback(self, error: str) -> LoudnessResult:
        return LoudnessResult(success=False, error=error)

    def execute(self, signal: Signal) -> LoudnessResult:
        y = signal.samples
        rms = compute_rms(y, self.window_size)

        # Per-window RMS for dynamics
        n_windows = len(y) // self.window_size
        if n_windows > 0:
            blocks = y[:n_windows * self.window_size].reshape(n_windows, self.window_size)
            window_rms = np.sqrt(np.mean(blocks.astype(np.float64) ** 2, axis=1))
        else:
            window_rms = np.array([rms])

        mean_rms = window_rms.mean()
        if mean_rms > 0:
            low_energy_ratio = float(np.mean(window_rms < mean_rms))
            energy_variance = float((window_rms.std() / mean_rms) ** 2)
        else:
            low_energy_ratio = 0.0
            energy_variance = 0.0

        logger.debug(f"RMS: {rms:.4f}, low energy ratio: {low_energy_ratio:.2f}")

        return LoudnessResult(
            rms=rms,
            peak=float(np.max(np.abs(y))),
            low_energy_ratio=low_energy_ratio,
            energy_variance=energy_variance,
        )
