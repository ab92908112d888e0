"""
Rhythm primitives: energy envelope, adaptive onset picking, tempo voting.
"""

import numpy as np
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional


def compute_window_energy(y: np.ndarray, window: int, hop: int) -> np.ndarray:
    """
    Mean absolute amplitude of each window.

    Args:
        y: Signal
        window: Window length in samples
        hop: Hop between window starts

    Returns:
        Energy per window start (starts 0, hop, 2*hop, ... with a full window)
    """
    if window < 1 or len(y) < window:
        return np.zeros(0)

    cumulative = np.concatenate([[0.0], np.cumsum(np.abs(y), dtype=np.float64)])
    starts = np.arange(0, len(y) - window + 1, hop)
    return (cumulative[starts + window] - cumulative[starts]) / window


def _trailing_mean(values: np.ndarray, size: int) -> np.ndarray:
    """Mean of the last `size` values up to and including each index."""
    cumulative = np.concatenate([[0.0], np.cumsum(values)])
    idx = np.arange(len(values))
    lo = np.maximum(0, idx + 1 - size)
    return (cumulative[idx + 1] - cumulative[lo]) / (idx + 1 - lo)


def detect_onsets(
    energy: np.ndarray,
    history_size: int = 43,
    std_multiplier: float = 1.5,
    local_multiplier: float = 1.5,
    recent_size: int = 3,
    recent_multiplier: float = 1.2,
    min_gap: int = 1,
) -> np.ndarray:
    """
    Adaptive double-threshold onset picking on an energy envelope.

    A window is an onset when its energy exceeds
    max(mean + std_multiplier * std, local_multiplier * history mean) and
    recent_multiplier times the mean of the last `recent_size` windows.
    Both histories include the current window. Onsets closer than
    `min_gap` windows to the previous onset are dropped.

    Returns:
        Indices into `energy`
    """
    if len(energy) == 0:
        return np.zeros(0, dtype=np.int64)

    base_threshold = energy.mean() + std_multiplier * energy.std()
    local_threshold = np.maximum(base_threshold, local_multiplier * _trailing_mean(energy, history_size))
    recent_threshold = recent_multiplier * _trailing_mean(energy, recent_size)

    candidates = np.flatnonzero((energy > local_threshold) & (energy > recent_threshold))

    onsets: List[int] = []
    for idx in candidates:
        if not onsets or idx - onsets[-1] >= min_gap:
            onsets.append(int(idx))

    return np.array(onsets, dtype=np.int64)


@dataclass(frozen=True)
class TempoVote:
    """Winning histogram bin for one onset sequence."""
    bpm: float
    confidence: float
    onset_count: int


def vote_tempo(
    onset_times: np.ndarray,
    min_bpm: float = 40.0,
    max_bpm: float = 200.0,
    bin_width: float = 5.0,
) -> Optional[TempoVote]:
    """
    Histogram vote over inter-onset intervals.

    Intervals are converted to BPM, kept inside [min_bpm, max_bpm] and
    bucketed to the nearest multiple of bin_width. Confidence is the
    winning bucket's share of all intervals, including those outside the
    range. Equal buckets resolve to the one reached first in time.

    Returns:
        TempoVote with the mean BPM of the winning bucket, or None if fewer
        than two onsets or no interval falls in range
    """
    if len(onset_times) < 2:
        return None

    intervals = np.diff(onset_times)
    intervals = intervals[intervals > 0]
    if len(intervals) == 0:
        return None

    bpms = 60.0 / intervals
    in_range = bpms[(bpms >= min_bpm) & (bpms <= max_bpm)]
    if len(in_range) == 0:
        return None

    buckets = np.round(in_range / bin_width) * bin_width
    winner, count = Counter(buckets.tolist()).most_common(1)[0]

    members = in_range[buckets == winner]
    return TempoVote(
        bpm=float(np.clip(members.mean(), min_bpm, max_bpm)),
        confidence=count / len(np.diff(onset_times)),
        onset_count=len(onset_times),
    )
