"""
Windowing primitives.

Frames are read-only strided views over the signal; tapering always
returns a new array.
"""

import numpy as np
import librosa
from functools import lru_cache


WINDOW_TYPES = ('hann', 'hamming')


@lru_cache(maxsize=32)
def get_window(length: int, window: str = 'hann') -> np.ndarray:
    """
    Symmetric raised-cosine taper.

    Hann:    0.5 * (1 - cos(2*pi*i / (N-1)))
    Hamming: 0.54 - 0.46 * cos(2*pi*i / (N-1))

    Args:
        length: Window length N
        window: 'hann' or 'hamming'

    Returns:
        Read-only taper of shape (N,)
    """
    if window not in WINDOW_TYPES:
        raise ValueError(f"Unknown window type: {window!r} (expected one of {WINDOW_TYPES})")
    if length < 1:
        raise ValueError(f"Window length must be positive, got {length}")

    if length == 1:
        taper = np.ones(1)
    else:
        phase = np.cos(2.0 * np.pi * np.arange(length) / (length - 1))
        if window == 'hann':
            taper = 0.5 * (1.0 - phase)
        else:
            taper = 0.54 - 0.46 * phase

    taper.setflags(write=False)
    return taper


def apply_window(frame: np.ndarray, window: str = 'hann') -> np.ndarray:
    """
    Taper a frame (or a stack of frames along the last axis).

    Args:
        frame: Samples, shape (N,) or (n_frames, N)
        window: 'hann' or 'hamming'

    Returns:
        New tapered array, same shape as frame
    """
    return frame * get_window(frame.shape[-1], window)


def frame_signal(y: np.ndarray, frame_length: int, hop_length: int) -> np.ndarray:
    """
    Slice a signal into overlapping frames.

    Args:
        y: Mono signal
        frame_length: Samples per frame
        hop_length: Samples between frame starts

    Returns:
        Read-only view of shape (n_frames, frame_length); n_frames is 0
        when the signal is shorter than one frame.
    """
    if len(y) < frame_length:
        return np.empty((0, frame_length), dtype=y.dtype)

    frames = librosa.util.frame(y, frame_length=frame_length, hop_length=hop_length, axis=0)
    frames.setflags(write=False)
    return frames
