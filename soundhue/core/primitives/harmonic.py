"""
Harmonic primitives: chromagram and key-profile correlation.

Krumhansl-Schmuckler profiles describe how strongly each pitch class is
expected to sound in a key rooted on C.
"""

import numpy as np
import librosa
from typing import Tuple

from .windowing import apply_window, frame_signal
from .spectral import magnitude_spectrum, fft_frequencies


MAJOR_PROFILE = np.array([6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88])
MINOR_PROFILE = np.array([6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17])

PITCH_CLASS_NAMES = ['C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B']

MAJOR, MINOR = 'major', 'minor'


def pitch_class_map(sr: int, n_fft: int, fmin: float = 27.5, fmax: float = 4186.0) -> np.ndarray:
    """
    Pitch class (0-11) of every FFT bin, or -1 outside (fmin, fmax).

    Bin centre frequencies are rounded to the nearest MIDI note.
    """
    freqs = fft_frequencies(sr, n_fft)
    classes = np.full(len(freqs), -1, dtype=np.int64)

    in_range = (freqs > fmin) & (freqs < fmax)
    midi = np.round(librosa.hz_to_midi(freqs[in_range])).astype(np.int64)
    classes[in_range] = midi % 12
    return classes


def compute_chromagram(
    y: np.ndarray,
    sr: int,
    n_fft: int = 4096,
    hop_length: int = 1024,
    fmin: float = 27.5,
    fmax: float = 4186.0,
) -> np.ndarray:
    """
    12-bin pitch-class distribution of a signal excerpt.

    Sums Hann-windowed magnitude spectra over all frames into pitch
    classes and normalizes to sum 1.

    Returns:
        Chroma vector of shape (12,); all zeros for silent or too-short input
    """
    frames = frame_signal(y, n_fft, hop_length)
    if len(frames) == 0:
        return np.zeros(12)

    S = magnitude_spectrum(apply_window(frames, 'hann'), n_fft)
    classes = pitch_class_map(sr, n_fft, fmin, fmax)
    valid = classes >= 0

    chroma = np.bincount(classes[valid], weights=S.sum(axis=0)[valid], minlength=12)

    total = chroma.sum()
    if total <= 0:
        return np.zeros(12)
    return chroma / total


def _profile_bank() -> Tuple[np.ndarray, list]:
    """All 24 rotated profiles, ordered root-major: (C maj, C min, C# maj, ...)."""
    profiles = []
    labels = []
    for root in range(12):
        profiles.append(np.roll(MAJOR_PROFILE, root))
        labels.append((root, MAJOR))
        profiles.append(np.roll(MINOR_PROFILE, root))
        labels.append((root, MINOR))
    return np.array(profiles), labels


_PROFILES, _PROFILE_LABELS = _profile_bank()


def correlate_key_profiles(chroma: np.ndarray) -> Tuple[int, str, float]:
    """
    Best (root, mode) for a chromagram.

    correlation = sum(chroma * profile) / sqrt(sum(profile^2) * sum(chroma^2))

    Ties resolve to the first candidate in root-major order.

    Returns:
        Tuple of (root pitch class, 'major' or 'minor', correlation)
    """
    chroma_energy = float(np.sum(chroma ** 2))
    if chroma_energy <= 0:
        return 0, MAJOR, 0.0

    norms = np.sqrt(np.sum(_PROFILES ** 2, axis=1) * chroma_energy)
    correlations = (_PROFILES @ chroma) / norms

    best = int(np.argmax(correlations))
    root, mode = _PROFILE_LABELS[best]
    return root, mode, float(correlations[best])
