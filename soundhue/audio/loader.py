"""Audio file loading - decodes files into Signals."""

import librosa
import numpy as np
from pathlib import Path
from typing import Optional
import soundfile as sf

from ..core.tasks import Signal, create_signal
from ..errors import AudioLoadError
from ..utils import get_logger

logger = get_logger(__name__)


class AudioLoader:
    """Decode audio files into validated Signals."""

    SUPPORTED_FORMATS = {'.mp3', '.wav', '.flac', '.m4a', '.mp4', '.ogg', '.aiff', '.aif'}

    def __init__(self, sample_rate: Optional[int] = None):
        """
        Initialize audio loader.

        Args:
            sample_rate: Target sample rate; None keeps the file's native rate
        """
        self.sample_rate = sample_rate

    @classmethod
    def is_supported_format(cls, file_path: str) -> bool:
        """True if the file extension is a supported audio format."""
        suffix = Path(file_path).suffix.lower()
        return suffix in cls.SUPPORTED_FORMATS

    def load(
        self,
        file_path: str,
        duration: Optional[float] = None,
        offset: float = 0.0
    ) -> Signal:
        """
        Load audio file.

        Channels are kept through decoding so the Signal records the
        source channel count; create_signal down-mixes them.

        Args:
            file_path: Path to audio file
            duration: Duration to load in seconds (None = entire file)
            offset: Start offset in seconds

        Returns:
            Signal

        Raises:
            AudioLoadError: missing file, unsupported format or decode failure
            InvalidSignalError: decoded audio is empty or unusable
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise AudioLoadError(f"Audio file not found: {file_path}", data={"path": str(file_path)})

        if not self.is_supported_format(str(file_path)):
            raise AudioLoadError(
                f"Unsupported format: {file_path.suffix}. "
                f"Supported: {', '.join(sorted(self.SUPPORTED_FORMATS))}",
                data={"path": str(file_path)},
            )

        try:
            logger.info(f"Loading audio: {file_path.name}")

            y, sr = librosa.load(
                str(file_path),
                sr=self.sample_rate,
                duration=duration,
                offset=offset,
                mono=False
            )
        except Exception as e:
            raise AudioLoadError(
                f"Failed to load audio file: {e}",
                data={"path": str(file_path)},
                cause=e,
            ) from e

        y = np.asarray(y)
        channels = y.shape[0] if y.ndim == 2 else 1
        logger.info(
            f"Loaded {file_path.name}: {y.shape[-1] / sr:.2f}s, "
            f"{sr}Hz, {channels} channel(s)"
        )

        return create_signal(y, int(sr))

    def get_duration(self, file_path: str) -> float:
        """
        Get audio file duration without decoding the whole file.

        Raises:
            AudioLoadError: If the file is missing or the duration cannot be determined
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise AudioLoadError(f"Audio file not found: {file_path}", data={"path": str(file_path)})

        try:
            return sf.info(str(file_path)).duration
        except Exception:
            # Formats libsndfile cannot read (mp3 on old builds, m4a)
            try:
                return librosa.get_duration(path=str(file_path))
            except Exception as e:
                raise AudioLoadError(
                    f"Failed to get audio duration: {e}",
                    data={"path": str(file_path)},
                    cause=e,
                ) from e
