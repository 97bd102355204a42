"""Tests for alert sound generation and the non-blocking beeper."""

import threading
import wave
from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest

from herald.audio.beeper import (
    DEFAULT_SOUND_URI,
    Beeper,
    NullAudio,
    generate_beep,
    load_wav,
    sound_path,
)


class TestGenerateBeep:
    def test_returns_int16_array(self):
        audio = generate_beep()
        assert isinstance(audio, np.ndarray)
        assert audio.dtype == np.int16

    def test_correct_duration(self):
        sample_rate = 22050
        audio = generate_beep(sample_rate=sample_rate)
        assert len(audio) == int(sample_rate * 0.35)

    def test_not_silent(self):
        assert np.abs(generate_beep()).max() > 0

    def test_volume_affects_amplitude(self):
        quiet = generate_beep(volume=0.1)
        loud = generate_beep(volume=0.9)
        assert np.abs(loud).max() > np.abs(quiet).max()


class TestSoundPath:
    def test_default_uri(self):
        assert sound_path(DEFAULT_SOUND_URI) is None

    def test_file_uri(self):
        assert sound_path("file:///tmp/ding.wav") == Path("/tmp/ding.wav")

    def test_plain_path(self):
        assert sound_path("/tmp/ding.wav") == Path("/tmp/ding.wav")

    def test_other_scheme(self):
        assert sound_path("content://settings/system/notification_sound") is None


class TestLoadWav:
    def test_reads_16_bit_mono(self, tmp_path):
        path = tmp_path / "ding.wav"
        samples = generate_beep(sample_rate=8000)
        with wave.open(str(path), "wb") as wf:
            wf.setnchannels(1)
            wf.setsampwidth(2)
            wf.setframerate(8000)
            wf.writeframes(samples.tobytes())

        audio, rate = load_wav(path)
        assert rate == 8000
        assert np.array_equal(audio, samples)

    def test_rejects_8_bit(self, tmp_path):
        path = tmp_path / "ding8.wav"
        with wave.open(str(path), "wb") as wf:
            wf.setnchannels(1)
            wf.setsampwidth(1)
            wf.setframerate(8000)
            wf.writeframes(b"\x80" * 100)

        with pytest.raises(ValueError, match="sample width"):
            load_wav(path)


class TestBeeper:
    def test_beep_plays_default_sound_in_background(self):
        played = threading.Event()

        with patch("herald.audio.beeper.play_sound", side_effect=lambda a, r: played.set()) as mock_play:
            Beeper(volume=0.2, sample_rate=8000).beep("com.chat", DEFAULT_SOUND_URI)
            assert played.wait(timeout=2)

        audio, rate = mock_play.call_args.args
        assert rate == 8000
        assert len(audio) == int(8000 * 0.35)

    def test_overlapping_beep_dropped(self):
        release = threading.Event()
        started = threading.Event()
        calls = []

        def slow_play(audio, rate):
            calls.append(rate)
            started.set()
            release.wait(timeout=2)

        with patch("herald.audio.beeper.play_sound", side_effect=slow_play):
            beeper = Beeper(sample_rate=8000)
            beeper.beep("com.a", DEFAULT_SOUND_URI)
            assert started.wait(timeout=2)
            beeper.beep("com.b", DEFAULT_SOUND_URI)
            release.set()

        assert calls == [8000]

    def test_missing_file_falls_back_to_default(self, tmp_path):
        beeper = Beeper(sample_rate=8000)
        audio, rate = beeper._resolve(str(tmp_path / "missing.wav"))
        assert rate == 8000
        assert audio.dtype == np.int16

    def test_playback_failure_is_logged_not_raised(self):
        done = threading.Event()

        def fail(audio, rate):
            done.set()
            raise RuntimeError("no device")

        with patch("herald.audio.beeper.play_sound", side_effect=fail):
            beeper = Beeper(sample_rate=8000)
            beeper.beep("com.chat", DEFAULT_SOUND_URI)
            assert done.wait(timeout=2)


class TestNullAudio:
    def test_beep_is_silent(self):
        with patch("herald.audio.beeper.play_sound") as mock_play:
            NullAudio().beep("com.chat", DEFAULT_SOUND_URI)
        mock_play.assert_not_called()
