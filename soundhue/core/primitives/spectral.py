"""
Spectral primitives.

All functions accept either a single magnitude spectrum (n_bins,) or a
stack of spectra (n_frames, n_bins) and reduce along the last axis.
Zero-energy frames yield 0, never NaN.
"""

import numpy as np
import scipy.fft
from dataclasses import dataclass
from numpy.lib.stride_tricks import sliding_window_view


def magnitude_spectrum(frames: np.ndarray, n_fft: int) -> np.ndarray:
    """
    Amplitude-normalized magnitude spectrum of windowed frames.

    Uses a real FFT; frames shorter than n_fft are zero-padded. Only the
    first n_fft // 2 bins are kept so that bin k maps to k * sr / n_fft.

    Args:
        frames: Windowed frame(s), shape (N,) or (n_frames, N)
        n_fft: FFT size

    Returns:
        Magnitudes, shape (..., n_fft // 2)
    """
    spectrum = scipy.fft.rfft(frames, n=n_fft, axis=-1)
    return np.abs(spectrum[..., : n_fft // 2]) * (2.0 / n_fft)


def fft_frequencies(sr: int, n_fft: int) -> np.ndarray:
    """Centre frequency in Hz of each bin returned by magnitude_spectrum."""
    return np.arange(n_fft // 2) * sr / n_fft


def _safe_ratio(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    numerator = np.asarray(numerator, dtype=np.float64)
    denominator = np.asarray(denominator, dtype=np.float64)
    out = np.zeros(np.broadcast(numerator, denominator).shape)
    np.divide(numerator, denominator, out=out, where=denominator > 0)
    return out


def compute_centroid(S: np.ndarray, freqs: np.ndarray) -> np.ndarray:
    """Magnitude-weighted mean frequency (Hz)."""
    return _safe_ratio(S @ freqs, S.sum(axis=-1))


def compute_spread(S: np.ndarray, freqs: np.ndarray, centroid: np.ndarray) -> np.ndarray:
    """Square root of the magnitude-weighted variance around the centroid (Hz)."""
    deviation = (freqs - np.expand_dims(centroid, -1)) ** 2
    variance = _safe_ratio((S * deviation).sum(axis=-1), S.sum(axis=-1))
    return np.sqrt(variance)


def compute_flatness(S: np.ndarray, eps: float = 1e-6) -> np.ndarray:
    """
    Geometric mean / arithmetic mean of magnitudes.

    Close to 1 for noise, close to 0 for tonal frames.
    """
    arithmetic = S.mean(axis=-1)
    geometric = np.exp(np.mean(np.log(S + eps), axis=-1))
    return np.clip(_safe_ratio(geometric, arithmetic), 0.0, 1.0)


def compute_rolloff(S: np.ndarray, freqs: np.ndarray, roll_percent: float = 0.85) -> np.ndarray:
    """Frequency (Hz) below which roll_percent of the frame energy lies."""
    energy = S.astype(np.float64) ** 2
    cumulative = np.cumsum(energy, axis=-1)
    total = cumulative[..., -1:]

    reached = cumulative >= roll_percent * total
    idx = np.argmax(reached, axis=-1)
    rolloff = freqs[idx]
    return np.where(total[..., 0] > 0, rolloff, 0.0)


@dataclass(frozen=True)
class SpectralPeaks:
    """
    Per-frame peak statistics.

    Attributes:
        count: Number of local maxima above the relative threshold
        spacing: Mean distance between consecutive peaks (bins)
        prominence: Mean height of peaks above the lower flanking minimum
    """
    count: np.ndarray
    spacing: np.ndarray
    prominence: np.ndarray


def _flank_minima(S: np.ndarray, width: int):
    """Minimum over the `width` bins left and right of every bin."""
    n_bins = S.shape[-1]
    pad = np.full(S.shape[:-1] + (width + 1,), np.inf)

    left_padded = np.concatenate([pad[..., :width], S], axis=-1)
    left = sliding_window_view(left_padded, width, axis=-1)[..., :n_bins, :].min(axis=-1)

    right_padded = np.concatenate([S[..., 1:], pad], axis=-1)
    right = sliding_window_view(right_padded, width, axis=-1)[..., :n_bins, :].min(axis=-1)

    return left, right


def compute_spectral_peaks(
    S: np.ndarray,
    threshold: float = 0.1,
    flank_bins: int = 10,
) -> SpectralPeaks:
    """
    Detect local maxima above threshold * frame max.

    Args:
        S: Magnitude spectra, shape (n_frames, n_bins)
        threshold: Relative height a peak must exceed
        flank_bins: Bins searched on each side for the prominence baseline

    Returns:
        SpectralPeaks with one value per frame
    """
    S = np.atleast_2d(S)
    n_frames, n_bins = S.shape

    if n_bins < 3:
        zeros = np.zeros(n_frames)
        return SpectralPeaks(count=zeros, spacing=zeros.copy(), prominence=zeros.copy())

    floor = threshold * S.max(axis=-1, keepdims=True)
    centre = S[:, 1:-1]
    interior = (centre > S[:, :-2]) & (centre > S[:, 2:]) & (centre > floor)

    mask = np.zeros_like(S, dtype=bool)
    mask[:, 1:-1] = interior

    count = mask.sum(axis=-1)

    # Mean gap between consecutive peaks collapses to (last - first) / (count - 1)
    first = np.argmax(mask, axis=-1)
    last = n_bins - 1 - np.argmax(mask[:, ::-1], axis=-1)
    spacing = _safe_ratio(last - first, count - 1)

    left, right = _flank_minima(S, flank_bins)
    prominence = S - np.minimum(left, right)
    prominence = _safe_ratio(np.where(mask, prominence, 0.0).sum(axis=-1), count)

    return SpectralPeaks(count=count.astype(np.float64), spacing=spacing, prominence=prominence)


def compute_harmonic_deviation(freqs: np.ndarray, fundamental: float) -> np.ndarray:
    """Relative distance of each frequency to its nearest harmonic of `fundamental`."""
    ratio = freqs / fundamental
    return np.abs(ratio - np.round(ratio))


def compute_harmonic_ratio(
    S: np.ndarray,
    freqs: np.ndarray,
    fundamental: float = 440.0,
    tolerance: float = 0.1,
):
    """
    Harmonic energy share and inharmonicity per frame.

    A bin counts as harmonic when its relative deviation from the nearest
    multiple of `fundamental` is below `tolerance`.

    Returns:
        Tuple of (harmonic_ratio, inharmonicity), each shape (n_frames,)
    """
    deviation = compute_harmonic_deviation(freqs, fundamental)
    harmonic = (deviation < tolerance).astype(np.float64)

    total = S.sum(axis=-1)
    ratio = _safe_ratio(S @ harmonic, total)
    inharmonicity = _safe_ratio(S @ deviation, total)
    return ratio, inharmonicity
