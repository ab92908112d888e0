"""
Layer 1: PRIMITIVES - Elementary operations

Pure functions over numpy arrays, no configuration and no logging.
Tasks combine them.
"""

from .windowing import (
    WINDOW_TYPES,
    get_window,
    apply_window,
    frame_signal,
)

from .spectral import (
    SpectralPeaks,
    magnitude_spectrum,
    fft_frequencies,
    compute_centroid,
    compute_spread,
    compute_flatness,
    compute_rolloff,
    compute_spectral_peaks,
    compute_harmonic_deviation,
    compute_harmonic_ratio,
)

from .mel import (
    hz_to_mel,
    mel_to_hz,
    mel_filterbank,
    compute_log_mel_energies,
)

from .harmonic import (
    MAJOR_PROFILE,
    MINOR_PROFILE,
    PITCH_CLASS_NAMES,
    MAJOR,
    MINOR,
    pitch_class_map,
    compute_chromagram,
    correlate_key_profiles,
)

from .rhythm import (
    TempoVote,
    compute_window_energy,
    detect_onsets,
    vote_tempo,
)

from .pitch import (
    normalized_autocorrelation,
    estimate_lag_pitch,
)

__all__ = [
    # Windowing
    'WINDOW_TYPES',
    'get_window',
    'apply_window',
    'frame_signal',
    # Spectral
    'SpectralPeaks',
    'magnitude_spectrum',
    'fft_frequencies',
    'compute_centroid',
    'compute_spread',
    'compute_flatness',
    'compute_rolloff',
    'compute_spectral_peaks',
    'compute_harmonic_deviation',
    'compute_harmonic_ratio',
    # Mel
    'hz_to_mel',
    'mel_to_hz',
    'mel_filterbank',
    'compute_log_mel_energies',
    # Harmonic
    'MAJOR_PROFILE',
    'MINOR_PROFILE',
    'PITCH_CLASS_NAMES',
    'MAJOR',
    'MINOR',
    'pitch_class_map',
    'compute_chromagram',
    'correlate_key_profiles',
    # Rhythm
    'TempoVote',
    'compute_window_energy',
    'detect_onsets',
    'vote_tempo',
    # Pitch
    'normalized_autocorrelation',
    'estimate_lag_pitch',
]
