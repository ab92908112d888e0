"""Mood and genre classification."""

from .types import (
    EmotionalLabel,
    Genre,
    HSLColor,
    GenreColors,
    CulturalAssociation,
    MoodResult,
)
from .rules import MoodRules, GenreRules, normalize_tempo, normalize_loudness
from .associations import ColorAssociations, blend_colors
from .classifier import MoodClassifier

__all__ = [
    'EmotionalLabel',
    'Genre',
    'HSLColor',
    'GenreColors',
    'CulturalAssociation',
    'MoodResult',
    'MoodRules',
    'GenreRules',
    'normalize_tempo',
    'normalize_loudness',
    'ColorAssociations',
    'blend_colors',
    'MoodClassifier',
]
