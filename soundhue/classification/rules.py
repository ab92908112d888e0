"""Rule-based mood and genre logic."""

from typing import Tuple

from .types import EmotionalLabel, Genre
from ..core.tasks import KeyResult, TimbreResult
from ..utils import get_logger

logger = get_logger(__name__)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def normalize_tempo(bpm: float, min_bpm: float = 40.0, max_bpm: float = 200.0) -> float:
    """Map BPM onto [0, 1] over [min_bpm, max_bpm]."""
    return _clamp((bpm - min_bpm) / (max_bpm - min_bpm))


def normalize_loudness(rms: float) -> float:
    """Map RMS onto [0, 1]; full-scale sine RMS (~0.707) saturates."""
    return _clamp(rms * 2.0)


class MoodRules:
    """Arousal/valence/dominance model with threshold-based labels."""

    def __init__(self, config):
        """
        Initialize mood rules.

        Args:
            config: Configuration object with mood thresholds
        """
        self.config = config

        self.high = config.get('mood.high_threshold', 0.7)
        self.low = config.get('mood.low_threshold', 0.3)
        self.valence_split = config.get('mood.valence_split', 0.5)
        self.minor_penalty = config.get('mood.minor_valence_penalty', 0.3)
        self.min_bpm = float(config.get('tempo.min_bpm', 40))
        self.max_bpm = float(config.get('tempo.max_bpm', 200))

    def dimensions(
        self,
        bpm: float,
        rms: float,
        key: KeyResult,
        timbre: TimbreResult,
    ) -> Tuple[float, float, float]:
        """
        Compute (arousal, valence, dominance), each in [0, 1].
        """
        tempo = normalize_tempo(bpm, self.min_bpm, self.max_bpm)
        loudness = normalize_loudness(rms)

        arousal = (
            0.3 * tempo
            + 0.3 * loudness
            + 0.2 * timbre.brightness
            + 0.2 * timbre.roughness
        )

        mode_factor = 1.0 - self.minor_penalty * (1.0 if key.is_minor else 0.0)
        valence = mode_factor * (
            0.3 * timbre.warmth
            + 0.2 * (1.0 - timbre.roughness)
            + 0.2 * key.confidence
            + 0.3 * (1.0 - timbre.complexity)
        )

        dominance = 0.4 * loudness + 0.3 * timbre.complexity + 0.3 * timbre.roughness

        return _clamp(arousal), _clamp(valence), _clamp(dominance)

    def label(self, arousal: float, valence: float, dominance: float) -> EmotionalLabel:
        """Map the three dimensions to a discrete label."""
        high, low = self.high, self.low

        if arousal > high and valence > high:
            return EmotionalLabel.ECSTATIC
        if arousal > high and valence < low:
            return EmotionalLabel.ANGRY
        if arousal < low and valence > high:
            return EmotionalLabel.CONTENT
        if arousal < low and valence < low:
            return EmotionalLabel.DEPRESSED

        if dominance > high:
            return EmotionalLabel.TRIUMPHANT if valence > self.valence_split else EmotionalLabel.DOMINANT
        if dominance < low:
            return EmotionalLabel.PEACEFUL if valence > self.valence_split else EmotionalLabel.SUBMISSIVE

        return EmotionalLabel.NEUTRAL


class GenreRules:
    """
    Hand-tuned genre heuristics over tempo, timbre and key confidence.

    Rules are checked in order; the first match wins.
    """

    def __init__(self, config):
        self.config = config

        self.classical_max_bpm = config.get('genre.classical_max_bpm', 85)
        self.classical_min_complexity = config.get('genre.classical_min_complexity', 0.7)
        self.classical_min_key_confidence = config.get('genre.classical_min_key_confidence', 0.8)

        self.electronic_min_bpm = config.get('genre.electronic_min_bpm', 120)
        self.electronic_min_brightness = config.get('genre.electronic_min_brightness', 0.7)

        self.rock_min_bpm = config.get('genre.rock_min_bpm', 100)
        self.rock_min_roughness = config.get('genre.rock_min_roughness', 0.6)

        self.folk_min_warmth = config.get('genre.folk_min_warmth', 0.7)
        self.folk_max_complexity = config.get('genre.folk_max_complexity', 0.4)

        self.jazz_min_complexity = config.get('genre.jazz_min_complexity', 0.6)
        self.jazz_min_key_confidence = config.get('genre.jazz_min_key_confidence', 0.6)

    def classify(self, bpm: float, timbre: TimbreResult, key_confidence: float) -> Genre:
        genre = self._match(bpm, timbre, key_confidence)
        logger.debug(
            f"Genre {genre} (tempo {bpm:.1f}, complexity {timbre.complexity:.2f}, "
            f"brightness {timbre.brightness:.2f}, key confidence {key_confidence:.2f})"
        )
        return genre

    def _match(self, bpm: float, timbre: TimbreResult, key_confidence: float) -> Genre:
        if (bpm < self.classical_max_bpm
                and timbre.complexity > self.classical_min_complexity
                and key_confidence > self.classical_min_key_confidence):
            return Genre.CLASSICAL
        if bpm > self.electronic_min_bpm and timbre.brightness > self.electronic_min_brightness:
            return Genre.ELECTRONIC
        if bpm > self.rock_min_bpm and timbre.roughness > self.rock_min_roughness:
            return Genre.ROCK
        if timbre.warmth > self.folk_min_warmth and timbre.complexity < self.folk_max_complexity:
            return Genre.FOLK
        if timbre.complexity > self.jazz_min_complexity and key_confidence > self.jazz_min_key_confidence:
            return Genre.JAZZ
        return Genre.OTHER
