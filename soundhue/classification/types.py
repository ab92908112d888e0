"""Type definitions for mood classification."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional


class EmotionalLabel(Enum):
    """Discrete emotional states of the arousal/valence/dominance model."""
    ECSTATIC = "ecstatic"
    ANGRY = "angry"
    CONTENT = "content"
    DEPRESSED = "depressed"
    TRIUMPHANT = "triumphant"
    DOMINANT = "dominant"
    PEACEFUL = "peaceful"
    SUBMISSIVE = "submissive"
    NEUTRAL = "neutral"

    def __str__(self):
        return self.value

    @property
    def display_name(self):
        return self.value.capitalize()


class Genre(Enum):
    """Coarse genre tags."""
    CLASSICAL = "classical"
    JAZZ = "jazz"
    ROCK = "rock"
    ELECTRONIC = "electronic"
    FOLK = "folk"
    OTHER = "other"

    def __str__(self):
        return self.value

    @property
    def display_name(self):
        return self.value.capitalize()


@dataclass(frozen=True)
class HSLColor:
    """Hue in degrees, saturation and lightness in percent."""
    h: float
    s: float
    l: float  # noqa: E741

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HSLColor':
        return cls(h=float(data['h']), s=float(data['s']), l=float(data['l']))

    def to_dict(self) -> Dict[str, float]:
        return {'h': self.h, 's': self.s, 'l': self.l}

    def __str__(self):
        return f"hsl({self.h:.0f}, {self.s:.0f}%, {self.l:.0f}%)"


@dataclass(frozen=True)
class GenreColors:
    """Genre colour record."""
    primary: HSLColor
    secondary: HSLColor
    cultural: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'primary': self.primary.to_dict(),
            'secondary': self.secondary.to_dict(),
            'cultural': self.cultural,
        }


@dataclass(frozen=True)
class CulturalAssociation:
    """
    Colour associations for a (label, genre) pair.

    Attributes:
        basic_mood: happy, sad, peaceful or angry
        genre: Genre colour record
        traditions: Mood colour per cultural tradition
        combined: Mean of the genre primary and the western mood colour
    """
    basic_mood: str
    genre: GenreColors
    traditions: Mapping[str, HSLColor] = field(default_factory=lambda: MappingProxyType({}))
    combined: Optional[HSLColor] = None

    def __post_init__(self):
        object.__setattr__(self, 'traditions', MappingProxyType(dict(self.traditions)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'basic_mood': self.basic_mood,
            'genre': self.genre.to_dict(),
            'traditions': {k: v.to_dict() for k, v in self.traditions.items()},
            'combined': self.combined.to_dict() if self.combined else None,
        }


@dataclass(frozen=True)
class MoodResult:
    """
    Result of mood classification.

    Attributes:
        arousal: Activation (0-1)
        valence: Pleasantness (0-1)
        dominance: Power (0-1)
        emotional_label: Discrete label derived from the three dimensions
        genre: Coarse genre estimate
        intensity: (arousal + valence) / 2
        energy: 0.6 * normalized tempo + 0.4 * normalized loudness
        associations: Colour lookup for the label and genre
    """
    arousal: float
    valence: float
    dominance: float
    emotional_label: EmotionalLabel
    genre: Genre
    intensity: float
    energy: float
    associations: Optional[CulturalAssociation] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'arousal': float(self.arousal),
            'valence': float(self.valence),
            'dominance': float(self.dominance),
            'emotional_label': str(self.emotional_label),
            'genre': str(self.genre),
            'intensity': float(self.intensity),
            'energy': float(self.energy),
            'associations': self.associations.to_dict() if self.associations else None,
        }

    def __str__(self):
        return (
            f"{self.emotional_label.display_name} / {self.genre.display_name} "
            f"(arousal {self.arousal:.2f}, valence {self.valence:.2f}, dominance {self.dominance:.2f})"
        )
