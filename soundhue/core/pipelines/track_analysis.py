"""
Track Analysis Pipeline - Signal -> FeatureSet.

Fan-out/fan-in:
    Tempo, Pitch, Loudness, Timbre, Key   (independent, parallel)
                      |
                     Mood                  (needs tempo, loudness, key, timbre)
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

from ..tasks import (
    Signal,
    BaseTask,
    ProgressCallback,
    TempoResult,
    TempoEstimationTask,
    PitchResult,
    PitchEstimationTask,
    LoudnessResult,
    LoudnessTask,
    TimbreResult,
    TimbreAnalysisTask,
    KeyResult,
    KeyDetectionTask,
)
from ...classification import MoodClassifier, MoodResult
from ...errors import InvalidSignalError
from ...utils import get_config, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FeatureSet:
    """
    Everything the analysis knows about one signal.

    Attributes:
        duration_sec: Signal length in seconds
        sample_rate: Sample rate of the analyzed signal
        channel_count: Channels in the source before down-mix
        tempo: Tempo estimate
        pitch: Pitch estimate (pitch.hz is None when unknown)
        loudness: Loudness measurement
        timbre: Timbre summary
        key: Key estimate
        mood: Mood, genre and colour associations
    """
    duration_sec: float
    sample_rate: int
    channel_count: int
    tempo: TempoResult
    pitch: PitchResult
    loudness: LoudnessResult
    timbre: TimbreResult
    key: KeyResult
    mood: MoodResult

    @property
    def rms(self) -> float:
        return self.loudness.rms

    def to_dict(self) -> Dict[str, Any]:
        return {
            'duration_sec': float(self.duration_sec),
            'sample_rate': int(self.sample_rate),
            'channel_count': int(self.channel_count),
            'tempo': self.tempo.to_dict(),
            'pitch': self.pitch.to_dict(),
            'loudness': self.loudness.to_dict(),
            'timbre': self.timbre.to_dict(),
            'key': self.key.to_dict(),
            'mood': self.mood.to_dict(),
        }


class TrackAnalysisPipeline:
    """
    Run the five signal analyses, then mood classification.

    Usage:
        pipeline = TrackAnalysisPipeline()
        features = pipeline.run(signal)
    """

    def __init__(
        self,
        config=None,
        parallel: Optional[bool] = None,
        max_workers: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize pipeline.

        Args:
            config: Config instance (global config when None)
            parallel: Run analyses on a thread pool (performance.parallel when None)
            max_workers: Pool size (performance.max_workers when None)
            progress_callback: Called as (stage, progress 0-1, message) after each analysis
        """
        self.config = config if config is not None else get_config()
        self.parallel = parallel if parallel is not None else bool(self.config.get('performance.parallel', True))
        self.max_workers = max_workers or int(self.config.get('performance.max_workers', 5))
        self.progress_callback = progress_callback
        self.name = "TrackAnalysis"

        self.tempo_task = TempoEstimationTask(self.config)
        self.pitch_task = PitchEstimationTask(self.config)
        self.loudness_task = LoudnessTask(self.config)
        self.timbre_task = TimbreAnalysisTask(self.config)
        self.key_task = KeyDetectionTask(self.config)

        # Fixed order; sequential runs and result logging follow it
        self.tasks: List[BaseTask] = [
            self.tempo_task,
            self.pitch_task,
            self.loudness_task,
            self.timbre_task,
            self.key_task,
        ]
        self.mood_classifier = MoodClassifier(self.config)

    def _report(self, stage: str, progress: float, message: str = ""):
        if self.progress_callback:
            self.progress_callback(stage, progress, message)

    def _run_sequential(self, signal: Signal) -> Dict[str, Any]:
        results = {}
        for i, task in enumerate(self.tasks):
            results[task.name] = task.execute_timed(signal)
            self._report(task.name, (i + 1) / (len(self.tasks) + 1), "done")
        return results

    def _run_parallel(self, signal: Signal) -> Dict[str, Any]:
        results = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_task = {
                executor.submit(task.execute_timed, signal): task
                for task in self.tasks
            }
            try:
                for done, future in enumerate(as_completed(future_to_task), start=1):
                    task = future_to_task[future]
                    results[task.name] = future.result()
                    self._report(task.name, done / (len(self.tasks) + 1), "done")
            except BaseException:
                # Caller gave up (e.g. KeyboardInterrupt): drop what has not started
                for future in future_to_task:
                    future.cancel()
                raise
        return results

    def run(self, signal: Signal) -> FeatureSet:
        """
        Analyze a signal.

        Args:
            signal: Validated Signal

        Returns:
            FeatureSet
        """
        start = time.perf_counter()
        logger.info(
            f"[{self.name}] Starting analysis of {signal.duration_sec:.1f}s "
            f"@ {signal.sample_rate} Hz ({'parallel' if self.parallel else 'sequential'})"
        )

        results = self._run_parallel(signal) if self.parallel else self._run_sequential(signal)
        for task in self.tasks:
            result = results[task.name]
            logger.info(f"[{self.name}] {task.name} done in {result.processing_time_sec:.2f}s")

        tempo: TempoResult = results[self.tempo_task.name]
        pitch: PitchResult = results[self.pitch_task.name]
        loudness: LoudnessResult = results[self.loudness_task.name]
        timbre: TimbreResult = results[self.timbre_task.name]
        key: KeyResult = results[self.key_task.name]

        mood = self.mood_classifier.classify(tempo, loudness, key, timbre)
        self._report("Mood", 1.0, str(mood.emotional_label))

        features = FeatureSet(
            duration_sec=signal.duration_sec,
            sample_rate=signal.sample_rate,
            channel_count=signal.channel_count,
            tempo=tempo,
            pitch=pitch,
            loudness=loudness,
            timbre=timbre,
            key=key,
            mood=mood,
        )

        logger.info(f"[{self.name}] Analysis complete in {time.perf_counter() - start:.2f}s")
        return features


def analyze(
    signal: Signal,
    config=None,
    parallel: Optional[bool] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> FeatureSet:
    """
    Analyze a Signal built with create_signal().

    Args:
        signal: Signal to analyze
        config: Optional Config instance
        parallel: Override performance.parallel
        progress_callback: Optional progress callback

    Returns:
        FeatureSet

    Raises:
        InvalidSignalError: signal is not a usable Signal
    """
    if not isinstance(signal, Signal):
        raise InvalidSignalError(
            "analyze() expects a Signal; build one with create_signal()",
            data={"type": type(signal).__name__},
        )

    pipeline = TrackAnalysisPipeline(config=config, parallel=parallel, progress_callback=progress_callback)
    return pipeline.run(signal)
