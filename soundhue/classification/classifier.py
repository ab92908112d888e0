"""Main mood classifier."""

from .types import MoodResult
from .rules import MoodRules, GenreRules, normalize_tempo, normalize_loudness
from .associations import ColorAssociations
from ..core.tasks import TempoResult, LoudnessResult, KeyResult, TimbreResult
from ..utils import get_config, get_logger

logger = get_logger(__name__)


class MoodClassifier:
    """
    Combine tempo, loudness, key and timbre into a MoodResult.

    Runs after the independent analyses; it never touches the signal.
    """

    def __init__(self, config=None):
        """
        Initialize classifier.

        Args:
            config: Configuration object (global config when None)
        """
        self.config = config if config is not None else get_config()
        self.mood_rules = MoodRules(self.config)
        self.genre_rules = GenreRules(self.config)
        self.associations = ColorAssociations(self.config)

    def classify(
        self,
        tempo: TempoResult,
        loudness: LoudnessResult,
        key: KeyResult,
        timbre: TimbreResult,
    ) -> MoodResult:
        """
        Classify mood.

        Args:
            tempo: Tempo estimate
            loudness: Loudness measurement
            key: Key estimate
            timbre: Timbre summary

        Returns:
            MoodResult with colour associations attached
        """
        arousal, valence, dominance = self.mood_rules.dimensions(tempo.bpm, loudness.rms, key, timbre)
        label = self.mood_rules.label(arousal, valence, dominance)
        genre = self.genre_rules.classify(tempo.bpm, timbre, key.confidence)

        energy = (
            0.6 * normalize_tempo(tempo.bpm, self.mood_rules.min_bpm, self.mood_rules.max_bpm)
            + 0.4 * normalize_loudness(loudness.rms)
        )

        result = MoodResult(
            arousal=arousal,
            valence=valence,
            dominance=dominance,
            emotional_label=label,
            genre=genre,
            intensity=(arousal + valence) / 2.0,
            energy=energy,
            associations=self.associations.lookup(label, genre),
        )

        logger.info(f"Mood: {result}")
        return result
