"""
Core Audio Analysis Framework

Layers:
1. PRIMITIVES - Elementary operations (pure functions over arrays)
2. TASKS - One analysis each (tempo, pitch, loudness, timbre, key)
3. PIPELINES - Orchestration (fan-out of tasks, then mood)

Usage:
    from soundhue.core import create_signal, analyze

    signal = create_signal(y, sr=44100)
    features = analyze(signal)
    features.tempo.bpm, features.key.key_name, features.mood.emotional_label
"""

from .tasks import Signal, create_signal
from .pipelines import FeatureSet, TrackAnalysisPipeline, analyze

__all__ = [
    'Signal',
    'create_signal',
    'FeatureSet',
    'TrackAnalysisPipeline',
    'analyze',
]
