"""
Tempo Estimation Task - BPM from adaptive onset detection.

For three window sizes (slow/medium/fast pulse):
- Mean absolute energy envelope of the downsampled signal (50% overlap)
- Adaptive double-threshold onset picking
- Histogram vote over inter-onset intervals
The window size whose winning bin holds the largest share of intervals
decides the tempo.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .base import Signal, TaskResult, BaseTask
from ..primitives import compute_window_energy, detect_onsets, vote_tempo, TempoVote
from ...utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TempoResult(TaskResult):
    """
    Result of tempo estimation.

    Attributes:
        bpm: Beats per minute in [40, 200]
        confidence: Share of inter-onset intervals in the winning bin (0-1)
        onset_count: Onsets detected at the winning window size
        window_sec: Winning analysis window length in seconds
    """
    task_name: str = "TempoEstimation"

    bpm: float = 120.0
    confidence: float = 0.0
    onset_count: int = 0
    window_sec: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            'bpm': float(self.bpm),
            'confidence': float(self.confidence),
            'onset_count': int(self.onset_count),
            'window_sec': float(self.window_sec),
        })
        return base


class TempoEstimationTask(BaseTask):
    """
    Estimate tempo of a fully buffered signal.

    Onset times are measured in seconds of the input signal. A
    refractory gap of one beat at max_bpm keeps overlapping windows from
    reporting the same hit twice.
    """

    def __init__(self, config=None):
        super().__init__(config)
        get = self.config.get
        self.downsample_factor = int(get('tempo.downsample_factor', 4))
        self.std_multiplier = get('tempo.threshold_std_multiplier', 1.5)
        self.window_divisors = list(get('tempo.window_divisors', [4, 8, 16]))
        self.history_size = int(get('tempo.history_size', 43))
        self.local_multiplier = get('tempo.local_mean_multiplier', 1.5)
        self.recent_size = int(get('tempo.recent_size', 3))
        self.recent_multiplier = get('tempo.recent_mean_multiplier', 1.2)
        self.min_bpm = float(get('tempo.min_bpm', 40))
        self.max_bpm = float(get('tempo.max_bpm', 200))
        self.bin_width = float(get('tempo.bin_width', 5))
        self.default_bpm = float(get('tempo.default_bpm', 120))

    @property
    def name(self) -> str:
        return "TempoEstimation"

    def fallback(self, error: str) -> TempoResult:
        return TempoResult(success=False, error=error, bpm=self.default_bpm, confidence=0.0)

    def execute(self, signal: Signal) -> TempoResult:
        """
        Estimate BPM.

        Args:
            signal: Input signal

        Returns:
            TempoResult; default_bpm with confidence 0 when no window size
            yields a usable onset sequence
        """
        factor = self.downsample_factor
        y = signal.samples[::factor]
        effective_sr = signal.sample_rate / factor

        best: Optional[TempoVote] = None
        best_window_sec = 0.0

        for divisor in self.window_divisors:
            window = int(signal.sample_rate / divisor / factor)
            if window < 2:
                continue
            hop = window // 2

            energy = compute_window_energy(y, window, hop)
            min_gap = int(np.ceil(60.0 / self.max_bpm * effective_sr / hop))

            onsets = detect_onsets(
                energy,
                history_size=self.history_size,
                std_multiplier=self.std_multiplier,
                local_multiplier=self.local_multiplier,
                recent_size=self.recent_size,
                recent_multiplier=self.recent_multiplier,
                min_gap=max(1, min_gap),
            )
            onset_times = onsets * hop / effective_sr

            vote = vote_tempo(onset_times, self.min_bpm, self.max_bpm, self.bin_width)
            window_sec = window / effective_sr

            if vote is None:
                logger.debug(f"Window {window_sec:.3f}s: {len(onsets)} onsets, no tempo vote")
                continue

            logger.debug(
                f"Window {window_sec:.3f}s: {vote.onset_count} onsets, "
                f"{vote.bpm:.1f} BPM (confidence {vote.confidence:.2f})"
            )
            if best is None or vote.confidence > best.confidence:
                best = vote
                best_window_sec = window_sec

        if best is None:
            logger.debug(f"No onset sequence found, defaulting to {self.default_bpm:.0f} BPM")
            return TempoResult(bpm=self.default_bpm, confidence=0.0)

        return TempoResult(
            bpm=best.bpm,
            confidence=float(np.clip(best.confidence, 0.0, 1.0)),
            onset_count=best.onset_count,
            window_sec=best_window_sec,
        )
