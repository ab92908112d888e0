"""Genre and cultural colour associations loaded from configuration."""

from typing import Dict

from .types import CulturalAssociation, EmotionalLabel, Genre, GenreColors, HSLColor
from ..errors import ConfigurationError
from ..utils import get_logger

logger = get_logger(__name__)


DEFAULT_BASIC_MOOD = 'peaceful'


def blend_colors(first: HSLColor, second: HSLColor) -> HSLColor:
    """Component-wise mean of two HSL colours."""
    return HSLColor(
        h=(first.h + second.h) / 2.0,
        s=(first.s + second.s) / 2.0,
        l=(first.l + second.l) / 2.0,
    )


class ColorAssociations:
    """
    Lookup of the `colors` config section.

    The tables are presentation data for downstream colour layers; this
    class only resolves them for a given label and genre.
    """

    def __init__(self, config):
        section = config.get('colors', {}) or {}

        try:
            self.genres: Dict[str, GenreColors] = {
                name: GenreColors(
                    primary=HSLColor.from_dict(entry['primary']),
                    secondary=HSLColor.from_dict(entry['secondary']),
                    cultural=entry.get('cultural', ''),
                )
                for name, entry in (section.get('genres') or {}).items()
            }
            self.moods: Dict[str, Dict[str, HSLColor]] = {
                tradition: {mood: HSLColor.from_dict(color) for mood, color in table.items()}
                for tradition, table in (section.get('moods') or {}).items()
            }
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError("Invalid 'colors' configuration", cause=e) from e

        self.basic_moods: Dict[str, str] = dict(section.get('basic_moods') or {})

    def basic_mood(self, label: EmotionalLabel) -> str:
        """Collapse an emotional label to happy, sad, peaceful or angry."""
        return self.basic_moods.get(label.value, DEFAULT_BASIC_MOOD)

    def lookup(self, label: EmotionalLabel, genre: Genre) -> CulturalAssociation:
        """
        Resolve colour associations.

        Unknown genres fall back to the 'other' record.
        """
        genre_colors = self.genres.get(genre.value)
        if genre_colors is None:
            logger.warning(f"No colour record for genre {genre}, using '{Genre.OTHER}'")
            genre_colors = self.genres.get(Genre.OTHER.value)
        if genre_colors is None:
            raise ConfigurationError("No colour record for genre", data={"genre": genre.value})

        mood = self.basic_mood(label)
        traditions = {
            tradition: table[mood]
            for tradition, table in self.moods.items()
            if mood in table
        }

        western = traditions.get('western')
        combined = blend_colors(genre_colors.primary, western) if western else None

        return CulturalAssociation(
            basic_mood=mood,
            genre=genre_colors,
            traditions=traditions,
            combined=combined,
        )
