"""Autocorrelation pitch primitives."""

import numpy as np
import scipy.fft
from typing import Optional, Tuple


def normalized_autocorrelation(x: np.ndarray) -> np.ndarray:
    """
    Autocorrelation for lags 0..N-1 divided by the zero-lag energy.

    Computed through a zero-padded real FFT.

    Returns:
        Array of length N with corr[0] == 1, or all zeros for a silent input
    """
    x = np.asarray(x, dtype=np.float64)
    n = len(x)
    if n == 0:
        return np.zeros(0)

    n_fft = scipy.fft.next_fast_len(2 * n)
    spectrum = scipy.fft.rfft(x, n=n_fft)
    corr = scipy.fft.irfft(spectrum * np.conj(spectrum), n=n_fft)[:n]

    energy = corr[0]
    if energy <= 0:
        return np.zeros(n)
    return corr / energy


def estimate_lag_pitch(
    corr: np.ndarray,
    sr: int,
    min_lag: int = 20,
) -> Optional[Tuple[float, float]]:
    """
    Frequency of the strongest periodicity beyond min_lag.

    Args:
        corr: Normalized autocorrelation
        sr: Sample rate
        min_lag: Lags up to and including this one are ignored

    Returns:
        Tuple of (frequency Hz, clarity) or None when no positive peak exists
    """
    if len(corr) <= min_lag + 1:
        return None

    search = corr[min_lag + 1:]
    offset = int(np.argmax(search))
    clarity = float(search[offset])
    if clarity <= 0:
        return None

    lag = min_lag + 1 + offset
    return sr / lag, clarity
