"""
Pytest configuration for soundhue tests.

Automatically adds project root to sys.path so that 'from soundhue...' imports work.
Defines markers and shared fixtures.
"""
import sys
import numpy as np
import pytest
from pathlib import Path
from typing import Tuple

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


SR = 44100


# =============================================================================
# Pytest Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "invariant: Properties that must hold for every signal")
    config.addinivalue_line("markers", "slow: Slow tests (long signals)")
    config.addinivalue_line("markers", "e2e: End-to-end tests (files on disk, CLI)")


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return project root path."""
    return PROJECT_ROOT


@pytest.fixture
def config():
    """Fresh default configuration (not the global instance)."""
    from soundhue.utils import Config
    return Config()


@pytest.fixture
def sine_440() -> Tuple[np.ndarray, int]:
    """Pure 440 Hz sine, 2 seconds at 44.1 kHz."""
    t = np.arange(int(2.0 * SR)) / SR
    y = (0.8 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)
    return y, SR


@pytest.fixture
def silence() -> Tuple[np.ndarray, int]:
    """All-zero signal, 1 second at 44.1 kHz."""
    return np.zeros(SR, dtype=np.float32), SR


@pytest.fixture
def click_train_120() -> Tuple[np.ndarray, int]:
    """10 ms 1 kHz bursts every 0.5 s (120 BPM) over 10 seconds."""
    duration = 10.0
    y = np.zeros(int(duration * SR), dtype=np.float32)

    click_len = int(0.01 * SR)
    click = 0.9 * np.sin(2 * np.pi * 1000.0 * np.arange(click_len) / SR)

    for beat in range(int(duration * 2)):
        start = int(beat * 0.5 * SR)
        y[start:start + click_len] = click[: len(y) - start]

    return y, SR


@pytest.fixture
def c_major_chord() -> Tuple[np.ndarray, int]:
    """C4-E4-G4 triad, 12 seconds."""
    t = np.arange(int(12.0 * SR)) / SR
    y = sum(0.25 * np.sin(2 * np.pi * f * t) for f in (261.63, 329.63, 392.00))
    return y.astype(np.float32), SR


@pytest.fixture
def white_noise() -> Tuple[np.ndarray, int]:
    """Deterministic white noise, 3 seconds."""
    rng = np.random.default_rng(42)
    y = (0.3 * rng.standard_normal(int(3.0 * SR))).astype(np.float32)
    return np.clip(y, -1.0, 1.0), SR


@pytest.fixture
def make_signal():
    """Factory: (samples, sr) -> Signal."""
    from soundhue.core.tasks import create_signal

    def _make(audio: Tuple[np.ndarray, int]):
        y, sr = audio
        return create_signal(y, sr)

    return _make
