"""
Layer 2: TASKS - Analysis tasks

Tasks combine primitives to answer one question about a Signal.
Each task:
- Takes a Signal
- Returns a frozen TaskResult subclass
- Recovers from its own failures with a documented default

Usage:
    from soundhue.core.tasks import create_signal, TempoEstimationTask

    signal = create_signal(y, sr=44100)
    tempo = TempoEstimationTask().execute_timed(signal)
"""

from .base import (
    Signal,
    create_signal,
    TaskResult,
    BaseTask,
    ProgressCallback,
)

from .tempo import (
    TempoResult,
    TempoEstimationTask,
)

from .pitch import (
    PitchResult,
    PitchEstimationTask,
)

from .loudness import (
    LoudnessResult,
    LoudnessTask,
    compute_rms,
)

from .timbre import (
    FeatureStats,
    TimbreResult,
    TimbreAnalysisTask,
    SCALAR_FEATURES,
)

from .key_analysis import (
    Scale,
    KeyResult,
    KeyDetectionTask,
    CAMELOT_WHEEL,
    key_to_camelot,
)

__all__ = [
    # Base
    'Signal',
    'create_signal',
    'TaskResult',
    'BaseTask',
    'ProgressCallback',
    # Tempo
    'TempoResult',
    'TempoEstimationTask',
    # Pitch
    'PitchResult',
    'PitchEstimationTask',
    # Loudness
    'LoudnessResult',
    'LoudnessTask',
    'compute_rms',
    # Timbre
    'FeatureStats',
    'TimbreResult',
    'TimbreAnalysisTask',
    'SCALAR_FEATURES',
    # Key
    'Scale',
    'KeyResult',
    'KeyDetectionTask',
    'CAMELOT_WHEEL',
    'key_to_camelot',
]
