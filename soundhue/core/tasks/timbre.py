"""
Timbre Analysis Task - spectral shape summarized into perceptual scores.

Per frame (Hann window, 25% hop):
- centroid, spread, flatness, rolloff
- spectral peaks (count, spacing, prominence)
- harmonic ratio and inharmonicity against a reference fundamental
- log mel energies (13 filters)

Frame values are aggregated into mean/std/min/max and combined into
complexity, brightness, warmth, roughness and variation, all in [0, 1].
"""

import numpy as np
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, Mapping, Tuple

from .base import Signal, TaskResult, BaseTask
from ..primitives import (
    apply_window,
    frame_signal,
    magnitude_spectrum,
    fft_frequencies,
    compute_centroid,
    compute_spread,
    compute_flatness,
    compute_rolloff,
    compute_spectral_peaks,
    compute_harmonic_ratio,
    mel_filterbank,
    compute_log_mel_energies,
)
from ...utils import get_logger

logger = get_logger(__name__)


SCALAR_FEATURES = (
    'spectral_centroid',
    'spectral_spread',
    'spectral_flatness',
    'spectral_rolloff',
    'peak_count',
    'peak_spacing',
    'peak_prominence',
    'harmonic_ratio',
    'inharmonicity',
)

N_MFCC = 13


@dataclass(frozen=True)
class FeatureStats:
    """Summary of one per-frame feature."""
    mean: float = 0.0
    std: float = 0.0
    min: float = 0.0
    max: float = 0.0

    @classmethod
    def from_values(cls, values: np.ndarray) -> 'FeatureStats':
        if len(values) == 0:
            return cls()
        return cls(
            mean=float(np.mean(values)),
            std=float(np.std(values)),
            min=float(np.min(values)),
            max=float(np.max(values)),
        )

    @property
    def cv(self) -> float:
        """Coefficient of variation (std / mean), 0 when the mean is 0."""
        return self.std / self.mean if self.mean > 0 else 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'mean': self.mean, 'std': self.std, 'min': self.min, 'max': self.max}


@dataclass(frozen=True)
class TimbreResult(TaskResult):
    """
    Result of timbre analysis.

    Attributes:
        complexity: Spectral irregularity and lack of harmonicity (0-1)
        brightness: Mean rolloff relative to Nyquist (0-1)
        warmth: Low rolloff combined with harmonic balance (0-1)
        roughness: Dense, prominent spectral peaks (0-1)
        variation: Mean coefficient of variation over frame features (0-1)
        spectral_centroid_hz: Mean centroid in Hz
        harmonic_ratio: Mean share of energy near harmonics (0-1)
        spectral_flatness: Mean flatness (0-1)
        inharmonicity: Mean relative deviation from harmonics (0-0.5)
        mfcc: Mean log mel energy per filter (13 values)
        feature_stats: mean/std/min/max of every per-frame feature
    """
    task_name: str = "TimbreAnalysis"

    complexity: float = 0.0
    brightness: float = 0.0
    warmth: float = 0.0
    roughness: float = 0.0
    variation: float = 0.0
    spectral_centroid_hz: float = 0.0
    harmonic_ratio: float = 0.0
    spectral_flatness: float = 0.0
    inharmonicity: float = 0.0
    mfcc: Tuple[float, ...] = (0.0,) * N_MFCC
    feature_stats: Mapping[str, FeatureStats] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        object.__setattr__(self, 'feature_stats', MappingProxyType(dict(self.feature_stats)))

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            'complexity': float(self.complexity),
            'brightness': float(self.brightness),
            'warmth': float(self.warmth),
            'roughness': float(self.roughness),
            'variation': float(self.variation),
            'spectral_centroid_hz': float(self.spectral_centroid_hz),
            'harmonic_ratio': float(self.harmonic_ratio),
            'spectral_flatness': float(self.spectral_flatness),
            'inharmonicity': float(self.inharmonicity),
            'mfcc': [float(c) for c in self.mfcc],
            'feature_stats': {k: v.to_dict() for k, v in self.feature_stats.items()},
        })
        return base


def _clip01(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


class TimbreAnalysisTask(BaseTask):
    """Describe the spectral character of a signal."""

    def __init__(self, config=None):
        super().__init__(config)
        get = self.config.get
        self.fft_size = int(get('timbre.fft_size', 2048))
        self.hop_length = self.fft_size // int(get('timbre.hop_divisor', 4))
        self.n_mfcc = int(get('timbre.n_mfcc', N_MFCC))
        self.rolloff_percent = get('timbre.rolloff_percent', 0.85)
        self.peak_threshold = get('timbre.peak_threshold', 0.1)
        self.peak_flank_bins = int(get('timbre.peak_flank_bins', 10))
        self.reference_fundamental = float(get('timbre.reference_fundamental', 440.0))
        self.harmonic_tolerance = get('timbre.harmonic_tolerance', 0.1)
        self.spacing_norm_bins = float(get('timbre.spacing_norm_bins', 100))
        self.prominence_norm = float(get('timbre.prominence_norm', 0.5))
        self.block_frames = int(get('timbre.block_frames', 256))

    @property
    def name(self) -> str:
        return "TimbreAnalysis"

    def empty_result(self, **kwargs) -> TimbreResult:
        return TimbreResult(mfcc=(0.0,) * self.n_mfcc, **kwargs)

    def fallback(self, error: str) -> TimbreResult:
        return self.empty_result(success=False, error=error)

    def _frame_features(self, signal: Signal):
        """Per-frame scalar features, summed log mel energies, frame count, voiced frames."""
        sr = signal.sample_rate
        frames = frame_signal(signal.samples, self.fft_size, self.hop_length)

        freqs = fft_frequencies(sr, self.fft_size)
        filterbank = mel_filterbank(self.n_mfcc, self.fft_size, sr)

        values = {name: [] for name in SCALAR_FEATURES}
        mel_sum = np.zeros(self.n_mfcc)
        voiced = 0

        # Blocks bound the size of the spectrogram held in memory
        for start in range(0, len(frames), self.block_frames):
            block = apply_window(frames[start:start + self.block_frames].astype(np.float64), 'hann')
            S = magnitude_spectrum(block, self.fft_size)
            voiced += int(np.count_nonzero(S.sum(axis=-1) > 0))

            centroid = compute_centroid(S, freqs)
            peaks = compute_spectral_peaks(S, self.peak_threshold, self.peak_flank_bins)
            harmonic, inharmonic = compute_harmonic_ratio(
                S, freqs, self.reference_fundamental, self.harmonic_tolerance
            )

            values['spectral_centroid'].append(centroid)
            values['spectral_spread'].append(compute_spread(S, freqs, centroid))
            values['spectral_flatness'].append(compute_flatness(S))
            values['spectral_rolloff'].append(compute_rolloff(S, freqs, self.rolloff_percent))
            values['peak_count'].append(peaks.count)
            values['peak_spacing'].append(peaks.spacing)
            values['peak_prominence'].append(peaks.prominence)
            values['harmonic_ratio'].append(harmonic)
            values['inharmonicity'].append(inharmonic)

            mel_sum += compute_log_mel_energies(S, filterbank).sum(axis=0)

        merged = {
            name: np.concatenate(parts) if parts else np.zeros(0)
            for name, parts in values.items()
        }
        return merged, mel_sum, len(frames), voiced

    def execute(self, signal: Signal) -> TimbreResult:
        """
        Analyze timbre.

        Args:
            signal: Input signal

        Returns:
            TimbreResult; all zeros when the signal is shorter than one
            frame or silent
        """
        values, mel_sum, n_frames, voiced = self._frame_features(signal)
        if n_frames == 0 or voiced == 0:
            logger.debug(f"No spectral energy in {n_frames} frames, zeroed timbre")
            return self.empty_result()

        stats = {name: FeatureStats.from_values(v) for name, v in values.items()}
        nyquist = signal.sample_rate / 2.0

        centroid = stats['spectral_centroid']
        spread = stats['spectral_spread']
        rolloff = stats['spectral_rolloff']
        harmonic = stats['harmonic_ratio']

        complexity = (spread.cv + (1.0 - harmonic.mean) + centroid.cv) / 3.0
        brightness = rolloff.mean / nyquist

        spacing = min(1.0, stats['peak_spacing'].mean / self.spacing_norm_bins)
        prominence = min(1.0, stats['peak_prominence'].mean / self.prominence_norm)
        roughness = 0.6 * (1.0 - spacing) + 0.4 * prominence

        warmth = min(1.0, 0.7 * (1.0 - rolloff.mean / nyquist) + 0.3 * harmonic.mean)

        cvs = [s.cv for s in stats.values() if s.mean > 0]
        variation = float(np.mean(cvs)) if cvs else 0.0

        logger.debug(
            f"Timbre - complexity: {complexity:.2f}, brightness: {brightness:.2f}, "
            f"warmth: {warmth:.2f}, roughness: {roughness:.2f}, variation: {variation:.2f}"
        )

        return TimbreResult(
            complexity=_clip01(complexity),
            brightness=_clip01(brightness),
            warmth=_clip01(warmth),
            roughness=_clip01(roughness),
            variation=_clip01(variation),
            spectral_centroid_hz=float(np.clip(centroid.mean, 0.0, nyquist)),
            harmonic_ratio=_clip01(harmonic.mean),
            spectral_flatness=_clip01(stats['spectral_flatness'].mean),
            inharmonicity=float(stats['inharmonicity'].mean),
            mfcc=tuple(float(c) for c in mel_sum / n_frames),
            feature_stats=stats,
        )
