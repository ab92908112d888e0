"""soundhue - musical feature extraction for colour generation."""

__version__ = '0.1.0'
__author__ = 'soundhue Team'

from .utils import get_config, setup_logger
from .errors import SoundhueError, InvalidSignalError, AudioLoadError, ConfigurationError
from .core import Signal, create_signal, FeatureSet, TrackAnalysisPipeline, analyze
from .classification import EmotionalLabel, Genre, MoodResult
from .audio import AudioLoader

__all__ = [
    'get_config',
    'setup_logger',
    'SoundhueError',
    'InvalidSignalError',
    'AudioLoadError',
    'ConfigurationError',
    'Signal',
    'create_signal',
    'FeatureSet',
    'TrackAnalysisPipeline',
    'analyze',
    'EmotionalLabel',
    'Genre',
    'MoodResult',
    'AudioLoader',
]
