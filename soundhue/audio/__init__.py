"""Audio decoding boundary."""

from .loader import AudioLoader

__all__ = ['AudioLoader']
