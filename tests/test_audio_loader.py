"""End-to-end tests: files on disk through AudioLoader and the CLI."""

import json

import numpy as np
import pytest
import soundfile as sf

from soundhue.audio import AudioLoader
from soundhue.errors import AudioLoadError

SR = 22050


@pytest.fixture
def stereo_wav(tmp_path):
    """Two-channel 2 s wav: 440 Hz left, silence right."""
    t = np.arange(2 * SR) / SR
    left = 0.5 * np.sin(2 * np.pi * 440.0 * t)
    data = np.stack([left, np.zeros_like(left)], axis=1)

    path = tmp_path / "stereo.wav"
    sf.write(str(path), data, SR)
    return path


@pytest.mark.e2e
class TestAudioLoader:
    """Decoding into Signals."""

    def test_load_keeps_channel_count(self, stereo_wav):
        signal = AudioLoader().load(str(stereo_wav))

        assert signal.channel_count == 2
        assert signal.sample_rate == SR
        assert signal.duration_sec == pytest.approx(2.0, abs=0.01)
        assert np.max(np.abs(signal.samples)) == pytest.approx(0.25, abs=0.01)

    def test_resample(self, stereo_wav):
        signal = AudioLoader(sample_rate=11025).load(str(stereo_wav))
        assert signal.sample_rate == 11025

    def test_offset_and_duration(self, stereo_wav):
        signal = AudioLoader().load(str(stereo_wav), duration=0.5, offset=1.0)
        assert signal.duration_sec == pytest.approx(0.5, abs=0.01)

    def test_duration_without_decoding(self, stereo_wav):
        assert AudioLoader().get_duration(str(stereo_wav)) == pytest.approx(2.0, abs=0.01)

    def test_missing_file(self, tmp_path):
        with pytest.raises(AudioLoadError):
            AudioLoader().load(str(tmp_path / "missing.wav"))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not audio", encoding="utf-8")

        with pytest.raises(AudioLoadError):
            AudioLoader().load(str(path))

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "corrupt.wav"
        path.write_bytes(b"RIFF0000WAVEjunk")

        with pytest.raises(AudioLoadError):
            AudioLoader().load(str(path))

    @pytest.mark.parametrize("name,supported", [
        ("a.mp3", True), ("b.FLAC", True), ("c.aif", True), ("d.txt", False), ("e", False),
    ])
    def test_is_supported_format(self, name, supported):
        assert AudioLoader.is_supported_format(name) is supported


@pytest.mark.e2e
class TestCLI:
    """soundhue analyze ..."""

    def test_writes_json_per_file(self, stereo_wav, tmp_path):
        from soundhue.cli import main

        out_dir = tmp_path / "results"
        assert main(["analyze", str(stereo_wav), "-o", str(out_dir), "--sequential"]) == 0

        document = json.loads((out_dir / "stereo.json").read_text(encoding="utf-8"))
        assert document['file'] == str(stereo_wav)
        assert document['channel_count'] == 2
        assert abs(document['pitch']['hz'] - 440.0) <= 5.0

    def test_stdout(self, stereo_wav, capsys):
        from soundhue.cli import main

        assert main(["analyze", str(stereo_wav), "--log-level", "ERROR"]) == 0

        document = json.loads(capsys.readouterr().out)
        assert document['sample_rate'] == SR
        assert 'mood' in document

    def test_failed_file_sets_exit_code(self, stereo_wav, tmp_path):
        from soundhue.cli import main

        out_dir = tmp_path / "results"
        missing = tmp_path / "missing.wav"
        code = main(["analyze", str(stereo_wav), str(missing), "-o", str(out_dir)])

        assert code == 1
        assert (out_dir / "stereo.json").exists()
        error = json.loads((out_dir / "missing.json").read_text(encoding="utf-8"))
        assert error['error'] == "AudioLoadError"

    def test_bad_config(self, stereo_wav, tmp_path):
        from soundhue.cli import main

        assert main(["analyze", str(stereo_wav), "--config", str(tmp_path / "none.yaml")]) == 1
