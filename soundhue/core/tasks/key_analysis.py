"""
Key Detection Task - Detect the musical key of a track.

Segment-vote approach:
- Take up to 5 five-second segments spread evenly over the signal
- Compute a chromagram for each segment
- Estimate key using Krumhansl-Schmuckler profiles
- Majority vote across segments, ties broken by correlation
- Convert to Camelot notation for DJ-friendly display
"""

import numpy as np
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Tuple

from .base import Signal, TaskResult, BaseTask
from ..primitives import MAJOR, PITCH_CLASS_NAMES, compute_chromagram, correlate_key_profiles
from ...utils import get_logger

logger = get_logger(__name__)


class Scale(Enum):
    """Key mode."""
    MAJOR = MAJOR
    MINOR = "minor"

    def __str__(self):
        return self.value

    @property
    def display_name(self):
        return self.value.capitalize()


# Camelot Wheel mapping
CAMELOT_WHEEL = {
    'C': '8B', 'Cm': '5A',
    'C#': '3B', 'C#m': '12A',
    'D': '10B', 'Dm': '7A',
    'D#': '5B', 'D#m': '2A',
    'E': '12B', 'Em': '9A',
    'F': '7B', 'Fm': '4A',
    'F#': '2B', 'F#m': '11A',
    'G': '9B', 'Gm': '6A',
    'G#': '4B', 'G#m': '1A',
    'A': '11B', 'Am': '8A',
    'A#': '6B', 'A#m': '3A',
    'B': '1B', 'Bm': '10A',
}


def key_to_camelot(key: str) -> str:
    """Convert musical key to Camelot notation."""
    return CAMELOT_WHEEL.get(key, '?')


@dataclass(frozen=True)
class KeyResult(TaskResult):
    """
    Result of key detection.

    Attributes:
        root_pitch_class: Tonic as pitch class 0-11 (0 = C)
        scale: Scale.MAJOR or Scale.MINOR
        confidence: Vote share plus winning segment confidence, capped at 1
        root_name: Tonic name, e.g. "F#"
        correlation: Profile correlation of the winning segment
        segment_count: Segments that produced an estimate
    """
    task_name: str = "KeyDetection"

    root_pitch_class: int = 0
    scale: Scale = Scale.MAJOR
    confidence: float = 0.0
    root_name: str = "C"
    correlation: float = 0.0
    segment_count: int = 0

    @property
    def is_minor(self) -> bool:
        return self.scale is Scale.MINOR

    @property
    def key_name(self) -> str:
        """Short key name, e.g. "A" or "F#m"."""
        return self.root_name + ('m' if self.is_minor else '')

    @property
    def camelot(self) -> str:
        return key_to_camelot(self.key_name)

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            'root_pitch_class': int(self.root_pitch_class),
            'scale': str(self.scale),
            'confidence': float(self.confidence),
            'root_name': self.root_name,
            'key_name': self.key_name,
            'camelot': self.camelot,
            'correlation': float(self.correlation),
            'segment_count': int(self.segment_count),
        })
        return base


@dataclass(frozen=True)
class _SegmentKey:
    root: int
    scale: Scale
    correlation: float
    confidence: float


class KeyDetectionTask(BaseTask):
    """
    Detect the key of a track by voting over segments.

    Each segment's key comes from the best of 24 rotated major/minor
    profiles; its confidence is the correlation clamped to [min_confidence, 1].
    """

    def __init__(self, config=None):
        super().__init__(config)
        get = self.config.get
        self.segment_sec = float(get('key.segment_sec', 5.0))
        self.max_segments = int(get('key.max_segments', 5))
        self.fft_size = int(get('key.fft_size', 4096))
        self.hop_length = self.fft_size // int(get('key.hop_divisor', 4))
        self.min_frequency = float(get('key.min_frequency', 27.5))
        self.max_frequency = float(get('key.max_frequency', 4186.0))
        self.min_confidence = float(get('key.min_confidence', 0.3))

    @property
    def name(self) -> str:
        return "KeyDetection"

    def fallback(self, error: str) -> KeyResult:
        return KeyResult(success=False, error=error)

    def _segments(self, signal: Signal) -> List[Tuple[int, int]]:
        """(start, end) of up to max_segments evenly spread segments."""
        n = len(signal.samples)
        segment_length = min(int(self.segment_sec * signal.sample_rate), n)
        if segment_length <= 0:
            return []

        count = max(1, min(self.max_segments, n // segment_length))
        if count == 1:
            return [(0, segment_length)]

        starts = [int((n - segment_length) * i / (count - 1)) for i in range(count)]
        return [(start, start + segment_length) for start in starts]

    def _segment_key(self, signal: Signal, start: int, end: int):
        chroma = compute_chromagram(
            signal.samples[start:end],
            signal.sample_rate,
            n_fft=self.fft_size,
            hop_length=self.hop_length,
            fmin=self.min_frequency,
            fmax=self.max_frequency,
        )
        if not chroma.any():
            return None

        root, mode, correlation = correlate_key_profiles(chroma)
        return _SegmentKey(
            root=root,
            scale=Scale(mode),
            correlation=correlation,
            confidence=float(np.clip(correlation, self.min_confidence, 1.0)),
        )

    def execute(self, signal: Signal) -> KeyResult:
        """
        Detect key.

        Args:
            signal: Input signal

        Returns:
            KeyResult; C major with confidence 0 when no segment carries
            tonal energy
        """
        estimates = []
        for start, end in self._segments(signal):
            estimate = self._segment_key(signal, start, end)
            if estimate is not None:
                estimates.append(estimate)

        if not estimates:
            logger.debug("No tonal segment, key unknown")
            return KeyResult()

        votes: Counter = Counter()
        best = None
        best_count = 0
        for estimate in estimates:
            key = (estimate.root, estimate.scale)
            votes[key] += 1
            count = votes[key]
            if count > best_count or (count == best_count and estimate.correlation > best.correlation):
                best = estimate
                best_count = count

        confidence = min(1.0, best_count / len(estimates) + best.confidence)
        root_name = PITCH_CLASS_NAMES[best.root]

        logger.debug(
            f"Key {root_name} {best.scale} ({best_count}/{len(estimates)} segments, "
            f"correlation {best.correlation:.3f})"
        )

        return KeyResult(
            root_pitch_class=best.root,
            scale=best.scale,
            confidence=float(confidence),
            root_name=root_name,
            correlation=best.correlation,
            segment_count=len(estimates),
        )
