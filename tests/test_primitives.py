"""
Tests for Layer 1 primitives.

Known-frequency test tones check every spectral measure against the
value it must have by construction.
"""

import numpy as np
import pytest


SR = 44100
N_FFT = 2048


def bin_tone(bin_index: int, n: int = N_FFT, sr: int = SR, amplitude: float = 1.0) -> np.ndarray:
    """Sine exactly on an FFT bin centre."""
    freq = bin_index * sr / n
    return amplitude * np.sin(2 * np.pi * freq * np.arange(n) / sr)


# =============================================================================
# Windowing
# =============================================================================

@pytest.mark.unit
class TestWindowing:
    """Window tapers and framing."""

    def test_hann_shape(self):
        from soundhue.core.primitives import get_window

        w = get_window(9, 'hann')
        assert w[0] == pytest.approx(0.0)
        assert w[-1] == pytest.approx(0.0)
        assert w[4] == pytest.approx(1.0)
        np.testing.assert_allclose(w, w[::-1])

    def test_hamming_endpoints(self):
        from soundhue.core.primitives import get_window

        w = get_window(9, 'hamming')
        assert w[0] == pytest.approx(0.08)
        assert w[4] == pytest.approx(1.0)

    def test_length_one_window(self):
        from soundhue.core.primitives import get_window

        np.testing.assert_array_equal(get_window(1, 'hann'), [1.0])

    def test_unknown_window_rejected(self):
        from soundhue.core.primitives import get_window

        with pytest.raises(ValueError):
            get_window(16, 'blackman')

    def test_window_is_read_only(self):
        from soundhue.core.primitives import get_window

        w = get_window(32, 'hann')
        with pytest.raises(ValueError):
            w[0] = 1.0

    def test_apply_window_does_not_mutate(self):
        from soundhue.core.primitives import apply_window

        frame = np.ones(64)
        tapered = apply_window(frame, 'hann')

        np.testing.assert_array_equal(frame, np.ones(64))
        assert tapered[0] == pytest.approx(0.0)

    def test_apply_window_on_frame_stack(self):
        from soundhue.core.primitives import apply_window, get_window

        frames = np.ones((3, 16))
        tapered = apply_window(frames, 'hamming')
        for row in tapered:
            np.testing.assert_allclose(row, get_window(16, 'hamming'))

    def test_frame_signal_shape(self):
        from soundhue.core.primitives import frame_signal

        y = np.arange(10000, dtype=np.float32)
        frames = frame_signal(y, 2048, 512)

        assert frames.shape == (1 + (10000 - 2048) // 512, 2048)
        np.testing.assert_array_equal(frames[1], y[512:512 + 2048])

    def test_frame_signal_short_input(self):
        from soundhue.core.primitives import frame_signal

        frames = frame_signal(np.zeros(100, dtype=np.float32), 2048, 512)
        assert frames.shape == (0, 2048)


# =============================================================================
# Spectral
# =============================================================================

@pytest.mark.unit
class TestSpectral:
    """Magnitude spectrum and spectral descriptors."""

    def test_spectrum_length_and_mapping(self):
        from soundhue.core.primitives import magnitude_spectrum, fft_frequencies

        S = magnitude_spectrum(bin_tone(100), N_FFT)
        freqs = fft_frequencies(SR, N_FFT)

        assert len(S) == N_FFT // 2
        assert len(freqs) == N_FFT // 2
        assert int(np.argmax(S)) == 100
        assert freqs[100] == pytest.approx(100 * SR / N_FFT)

    def test_rectangular_amplitude_normalization(self):
        from soundhue.core.primitives import magnitude_spectrum

        S = magnitude_spectrum(bin_tone(64, amplitude=0.5), N_FFT)
        assert S[64] == pytest.approx(0.5, rel=1e-6)

    def test_centroid_of_tone(self):
        from soundhue.core.primitives import magnitude_spectrum, fft_frequencies, compute_centroid

        S = magnitude_spectrum(bin_tone(200), N_FFT)
        centroid = compute_centroid(S, fft_frequencies(SR, N_FFT))
        assert centroid == pytest.approx(200 * SR / N_FFT, rel=0.01)

    def test_silent_frame_is_zero_not_nan(self):
        from soundhue.core.primitives import (
            fft_frequencies, compute_centroid, compute_spread, compute_flatness, compute_rolloff,
        )

        S = np.zeros((2, N_FFT // 2))
        freqs = fft_frequencies(SR, N_FFT)
        centroid = compute_centroid(S, freqs)

        for values in (centroid, compute_spread(S, freqs, centroid), compute_flatness(S),
                       compute_rolloff(S, freqs)):
            assert np.all(np.isfinite(values))
            np.testing.assert_array_equal(values, 0.0)

    def test_flatness_noise_above_tone(self):
        from soundhue.core.primitives import magnitude_spectrum, apply_window, compute_flatness

        rng = np.random.default_rng(0)
        noise = magnitude_spectrum(apply_window(rng.standard_normal(N_FFT)), N_FFT)
        tone = magnitude_spectrum(apply_window(bin_tone(100)), N_FFT)

        assert compute_flatness(noise) > 0.3
        assert compute_flatness(tone) < 0.05
        assert 0.0 <= compute_flatness(noise) <= 1.0

    def test_rolloff_of_tone(self):
        from soundhue.core.primitives import magnitude_spectrum, fft_frequencies, compute_rolloff

        S = magnitude_spectrum(bin_tone(300), N_FFT)
        rolloff = compute_rolloff(S, fft_frequencies(SR, N_FFT), 0.85)
        assert rolloff == pytest.approx(300 * SR / N_FFT, abs=2 * SR / N_FFT)

    def test_spread_of_two_tones(self):
        from soundhue.core.primitives import fft_frequencies, compute_centroid, compute_spread

        freqs = fft_frequencies(SR, N_FFT)
        S = np.zeros(N_FFT // 2)
        S[100] = S[300] = 1.0

        centroid = compute_centroid(S, freqs)
        spread = compute_spread(S, freqs, centroid)
        assert spread == pytest.approx(100 * SR / N_FFT)

    def test_spectral_peaks(self):
        from soundhue.core.primitives import compute_spectral_peaks

        S = np.full((1, 200), 0.01)
        S[0, [40, 60, 80]] = 1.0

        peaks = compute_spectral_peaks(S, threshold=0.1, flank_bins=10)
        assert peaks.count[0] == 3
        assert peaks.spacing[0] == pytest.approx(20.0)
        assert peaks.prominence[0] == pytest.approx(0.99)

    def test_spectral_peaks_below_threshold_ignored(self):
        from soundhue.core.primitives import compute_spectral_peaks

        S = np.zeros((1, 100))
        S[0, 20] = 1.0
        S[0, 50] = 0.05

        peaks = compute_spectral_peaks(S, threshold=0.1)
        assert peaks.count[0] == 1
        assert peaks.spacing[0] == 0.0

    def test_harmonic_ratio(self):
        from soundhue.core.primitives import fft_frequencies, compute_harmonic_ratio

        freqs = np.array([440.0, 660.0, 880.0])
        S = np.array([[0.0, 0.0, 1.0], [0.0, 1.0, 0.0]])

        ratio, inharmonicity = compute_harmonic_ratio(S, freqs, fundamental=440.0, tolerance=0.1)
        np.testing.assert_allclose(ratio, [1.0, 0.0])
        np.testing.assert_allclose(inharmonicity, [0.0, 0.5])

        silent_ratio, _ = compute_harmonic_ratio(np.zeros((1, 1024)), fft_frequencies(SR, N_FFT))
        assert silent_ratio[0] == 0.0


# =============================================================================
# Mel
# =============================================================================

@pytest.mark.unit
class TestMel:
    """Mel scale and filterbank."""

    def test_htk_formula(self):
        from soundhue.core.primitives import hz_to_mel, mel_to_hz

        assert hz_to_mel(700.0) == pytest.approx(2595 * np.log10(2))
        assert mel_to_hz(hz_to_mel(1234.0)) == pytest.approx(1234.0)

    def test_filterbank_shape_and_order(self):
        from soundhue.core.primitives import mel_filterbank

        fb = mel_filterbank(13, N_FFT, SR)
        assert fb.shape == (13, N_FFT // 2)

        centres = np.argmax(fb, axis=1)
        assert np.all(np.diff(centres) > 0)
        assert np.all(fb <= 1.0) and np.all(fb >= 0.0)

    def test_log_mel_energies(self):
        from soundhue.core.primitives import mel_filterbank, compute_log_mel_energies

        fb = mel_filterbank(13, N_FFT, SR)
        energies = compute_log_mel_energies(np.zeros((4, N_FFT // 2)), fb)

        assert energies.shape == (4, 13)
        np.testing.assert_allclose(energies, np.log(1e-6))


# =============================================================================
# Harmonic
# =============================================================================

@pytest.mark.unit
class TestHarmonic:
    """Chromagram and key profiles."""

    def test_chroma_of_a440(self, sine_440):
        from soundhue.core.primitives import compute_chromagram

        y, sr = sine_440
        chroma = compute_chromagram(y, sr)

        assert chroma.shape == (12,)
        assert chroma.sum() == pytest.approx(1.0)
        assert int(np.argmax(chroma)) == 9

    def test_chroma_of_silence(self):
        from soundhue.core.primitives import compute_chromagram

        np.testing.assert_array_equal(compute_chromagram(np.zeros(SR), SR), np.zeros(12))

    def test_profile_recovers_rotation(self):
        from soundhue.core.primitives import MAJOR_PROFILE, MINOR_PROFILE, correlate_key_profiles

        root, mode, corr = correlate_key_profiles(np.roll(MAJOR_PROFILE, 7))
        assert (root, mode) == (7, 'major')
        assert corr == pytest.approx(1.0)

        root, mode, corr = correlate_key_profiles(np.roll(MINOR_PROFILE, 9))
        assert (root, mode) == (9, 'minor')

    def test_zero_chroma(self):
        from soundhue.core.primitives import correlate_key_profiles

        assert correlate_key_profiles(np.zeros(12)) == (0, 'major', 0.0)

    def test_pitch_class_map(self):
        from soundhue.core.primitives import pitch_class_map, fft_frequencies

        classes = pitch_class_map(SR, 4096)
        freqs = fft_frequencies(SR, 4096)

        assert classes[0] == -1
        assert np.all(classes[freqs >= 4186.0] == -1)
        assert classes[int(round(440.0 * 4096 / SR))] == 9


# =============================================================================
# Rhythm
# =============================================================================

@pytest.mark.unit
class TestRhythm:
    """Energy envelope, onsets and tempo vote."""

    def test_window_energy(self):
        from soundhue.core.primitives import compute_window_energy

        y = np.full(1000, -0.5)
        energy = compute_window_energy(y, 100, 50)

        assert len(energy) == 19
        np.testing.assert_allclose(energy, 0.5)

    def test_window_energy_short_signal(self):
        from soundhue.core.primitives import compute_window_energy

        assert len(compute_window_energy(np.zeros(10), 100, 50)) == 0

    def test_detect_onsets_on_pulses(self):
        from soundhue.core.primitives import detect_onsets

        energy = np.zeros(200)
        energy[20::20] = 1.0

        onsets = detect_onsets(energy)
        np.testing.assert_array_equal(onsets, np.arange(20, 200, 20))

    def test_refractory_gap(self):
        from soundhue.core.primitives import detect_onsets

        energy = np.zeros(100)
        energy[[30, 31, 60]] = [1.0, 1.0, 1.0]

        onsets = detect_onsets(energy, min_gap=5)
        assert 31 not in onsets
        assert 60 in onsets

    def test_vote_tempo(self):
        from soundhue.core.primitives import vote_tempo

        vote = vote_tempo(np.arange(0, 10, 0.5))
        assert vote.bpm == pytest.approx(120.0)
        assert vote.confidence == pytest.approx(1.0)
        assert vote.onset_count == 20

    def test_vote_needs_two_onsets(self):
        from soundhue.core.primitives import vote_tempo

        assert vote_tempo(np.array([1.0])) is None

    def test_vote_out_of_range_intervals(self):
        from soundhue.core.primitives import vote_tempo

        # 0.05 s apart -> 1200 BPM, outside [40, 200]
        assert vote_tempo(np.arange(0, 1, 0.05)) is None

    def test_confidence_counts_all_intervals(self):
        from soundhue.core.primitives import vote_tempo

        # Four 0.5 s gaps, one 0.05 s gap
        vote = vote_tempo(np.array([0.0, 0.5, 1.0, 1.05, 1.55, 2.05]))
        assert vote.bpm == pytest.approx(120.0)
        assert vote.confidence == pytest.approx(4 / 5)


# =============================================================================
# Pitch
# =============================================================================

@pytest.mark.unit
class TestAutocorrelation:
    """Normalized autocorrelation and lag picking."""

    def test_zero_lag_is_one(self):
        from soundhue.core.primitives import normalized_autocorrelation

        rng = np.random.default_rng(1)
        corr = normalized_autocorrelation(rng.standard_normal(512))
        assert corr[0] == pytest.approx(1.0)
        assert np.all(np.abs(corr) <= 1.0 + 1e-9)

    def test_matches_direct_sum(self):
        from soundhue.core.primitives import normalized_autocorrelation

        rng = np.random.default_rng(2)
        x = rng.standard_normal(64)
        direct = np.array([np.dot(x[:64 - lag], x[lag:]) for lag in range(64)]) / np.dot(x, x)

        np.testing.assert_allclose(normalized_autocorrelation(x), direct, atol=1e-10)

    def test_whole_frame_energy_normalization(self):
        from soundhue.core.primitives import normalized_autocorrelation

        # 32 whole periods; at half the frame only half the energy overlaps
        x = np.sin(2 * np.pi * np.arange(1024) / 32)
        corr = normalized_autocorrelation(x)

        assert corr[32] == pytest.approx(992 / 1024, abs=1e-9)
        assert corr[512] == pytest.approx(0.5, abs=1e-9)

    def test_silence(self):
        from soundhue.core.primitives import normalized_autocorrelation, estimate_lag_pitch

        corr = normalized_autocorrelation(np.zeros(256))
        np.testing.assert_array_equal(corr, 0.0)
        assert estimate_lag_pitch(corr, SR) is None

    def test_lag_pitch_of_sine(self):
        from soundhue.core.primitives import apply_window, normalized_autocorrelation, estimate_lag_pitch

        x = np.sin(2 * np.pi * 441.0 * np.arange(2048) / SR)
        freq, clarity = estimate_lag_pitch(normalized_autocorrelation(apply_window(x)), SR)

        assert freq == pytest.approx(441.0, abs=1.0)
        assert clarity > 0.8
