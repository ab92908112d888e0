"""Mel-scale primitives (HTK formula: mel = 2595 * log10(1 + f / 700))."""

import numpy as np
import librosa

from .spectral import fft_frequencies


def hz_to_mel(frequencies):
    """Convert Hz to mels (HTK)."""
    return librosa.hz_to_mel(frequencies, htk=True)


def mel_to_hz(mels):
    """Convert mels back to Hz (HTK)."""
    return librosa.mel_to_hz(mels, htk=True)


def mel_filterbank(n_filters: int, n_fft: int, sr: int) -> np.ndarray:
    """
    Gaussian filters over linear-frequency bins, centres uniform in mel.

    Centres are the n_filters interior points of a mel-uniform grid
    between 0 Hz and Nyquist. Each gaussian's standard deviation is half
    the Hz distance between its two neighbouring grid points, so filters
    widen with frequency the way triangular mel filters do.

    Args:
        n_filters: Number of filters
        n_fft: FFT size (filters cover n_fft // 2 bins)
        sr: Sample rate

    Returns:
        Filter weights, shape (n_filters, n_fft // 2)
    """
    freqs = fft_frequencies(sr, n_fft)
    grid = mel_to_hz(np.linspace(0.0, hz_to_mel(sr / 2.0), n_filters + 2))

    centres = grid[1:-1]
    widths = (grid[2:] - grid[:-2]) / 2.0

    return np.exp(-((freqs[None, :] - centres[:, None]) ** 2) / (2.0 * widths[:, None] ** 2))


def compute_log_mel_energies(S: np.ndarray, filterbank: np.ndarray, eps: float = 1e-6) -> np.ndarray:
    """
    Log of mel-filtered spectral energy per filter.

    Args:
        S: Magnitude spectra, shape (n_frames, n_bins)
        filterbank: Output of mel_filterbank, shape (n_filters, n_bins)

    Returns:
        Shape (n_frames, n_filters)
    """
    return np.log(S @ filterbank.T + eps)
