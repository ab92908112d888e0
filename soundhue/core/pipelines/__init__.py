"""
Layer 3: PIPELINES - Orchestration

Usage:
    from soundhue.core.pipelines import analyze

    features = analyze(signal)
"""

from .track_analysis import (
    FeatureSet,
    TrackAnalysisPipeline,
    analyze,
)

__all__ = [
    'FeatureSet',
    'TrackAnalysisPipeline',
    'analyze',
]
