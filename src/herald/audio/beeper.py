"""Alert sounds for heads-up notifications.

The default channel sound is a two-note beep synthesized at runtime as a
numpy int16 array, so no audio files are needed. Sound URIs that point to a
WAV file are played from disk. Playback goes through sounddevice, with a
temp wav fallback, on a background thread so the heads-up timeline never
waits for audio.
"""

import logging
import tempfile
import threading
import wave
from pathlib import Path
from urllib.parse import urlparse

import numpy as np

from herald.collaborators.base import AudioAlert

logger = logging.getLogger(__name__)

DEFAULT_SOUND_URI = "default"


def generate_beep(
    sample_rate: int = 22050,
    volume: float = 0.3,
) -> np.ndarray:
    """Generate a short two-note descending beep (E6 → C6).

    Args:
        sample_rate: Audio sample rate in Hz.
        volume: Volume multiplier (0.0–1.0).

    Returns:
        Audio data as int16 numpy array.
    """
    duration = 0.35  # seconds
    n_samples = int(sample_rate * duration)
    t = np.linspace(0, duration, n_samples, dtype=np.float64)
    half = n_samples // 2

    # E6 (1319 Hz) then C6 (1047 Hz)
    note1 = np.sin(2 * np.pi * 1319 * t[:half]) * volume
    note2 = np.sin(2 * np.pi * 1047 * t[half:]) * volume

    # Quick attack, short release
    tenth = n_samples // 10
    envelope = np.concatenate([
        np.linspace(0, 1, tenth),
        np.ones(n_samples - 2 * tenth),
        np.linspace(1, 0, tenth),
    ])[:n_samples]

    audio = np.concatenate([note1, note2]) * envelope
    return (audio * 32767).astype(np.int16)


def sound_path(sound_uri: str) -> Path | None:
    """Return the local file a sound URI points to, or None for the default beep."""
    if sound_uri == DEFAULT_SOUND_URI:
        return None
    parsed = urlparse(sound_uri)
    if parsed.scheme in ("", "file"):
        return Path(parsed.path)
    return None


def load_wav(path: Path) -> tuple[np.ndarray, int]:
    """Read a 16-bit PCM wav file.

    Returns:
        Tuple of (int16 samples, sample rate). Multi-channel audio is
        returned with shape (frames, channels).

    Raises:
        ValueError: If the file is not 16-bit PCM.
    """
    with wave.open(str(path), "rb") as wf:
        if wf.getsampwidth() != 2:
            raise ValueError(f"Unsupported sample width in {path}: {wf.getsampwidth()}")
        channels = wf.getnchannels()
        sample_rate = wf.getframerate()
        frames = wf.readframes(wf.getnframes())

    audio = np.frombuffer(frames, dtype=np.int16)
    if channels > 1:
        audio = audio.reshape(-1, channels)
    return audio, sample_rate


def play_sound(audio: np.ndarray, sample_rate: int = 22050) -> None:
    """Play an audio array through the default output device.

    Tries sounddevice first, falls back to writing a temp wav file
    and playing via system command.

    Args:
        audio: int16 numpy audio array.
        sample_rate: Sample rate of the audio data.
    """
    try:
        import sounddevice as sd
        sd.play(audio, samplerate=sample_rate)
        sd.wait()
        return
    except Exception as exc:
        logger.warning("sounddevice playback failed: %s", exc)

    _play_via_temp_wav(audio, sample_rate)


def _play_via_temp_wav(audio: np.ndarray, sample_rate: int) -> None:
    """Write audio to a temp wav file and play via system command."""
    import platform
    import subprocess

    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as tmp:
            tmp_path = Path(tmp.name)
            with wave.open(str(tmp_path), "wb") as wf:
                wf.setnchannels(1 if audio.ndim == 1 else audio.shape[1])
                wf.setsampwidth(2)  # int16 = 2 bytes
                wf.setframerate(sample_rate)
                wf.writeframes(audio.tobytes())

        system = platform.system()
        if system == "Linux":
            subprocess.run(["aplay", "-q", str(tmp_path)], capture_output=True, timeout=10)
        elif system == "Darwin":
            subprocess.run(["afplay", str(tmp_path)], capture_output=True, timeout=10)
        else:
            logger.warning("Unsupported platform for wav playback: %s", system)
    except Exception as exc:
        logger.warning("Wav fallback playback failed: %s", exc)
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)


class Beeper(AudioAlert):
    """Plays channel sounds without blocking the caller.

    One sound plays at a time; a beep requested while another is still
    playing is dropped.
    """

    def __init__(self, volume: float = 0.3, sample_rate: int = 22050) -> None:
        self._volume = volume
        self._sample_rate = sample_rate
        self._playing = threading.Lock()

    def beep(self, package_name: str, sound_uri: str) -> None:
        if not self._playing.acquire(blocking=False):
            logger.debug("Beep for %s dropped, another sound is playing", package_name)
            return

        thread = threading.Thread(
            target=self._play,
            args=(package_name, sound_uri),
            name="herald-beep",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError:
            self._playing.release()
            raise

    def _play(self, package_name: str, sound_uri: str) -> None:
        try:
            audio, sample_rate = self._resolve(sound_uri)
            logger.debug("Playing %s for %s", sound_uri, package_name)
            play_sound(audio, sample_rate)
        except Exception:
            logger.exception("Beep for %s failed", package_name)
        finally:
            self._playing.release()

    def _resolve(self, sound_uri: str) -> tuple[np.ndarray, int]:
        path = sound_path(sound_uri)
        if path is not None and path.is_file():
            return load_wav(path)
        if path is not None:
            logger.warning("Sound file %s not found, using default beep", path)
        return generate_beep(self._sample_rate, self._volume), self._sample_rate


class NullAudio(AudioAlert):
    """Audio alert that stays silent; used when beeping is disabled."""

    def beep(self, package_name: str, sound_uri: str) -> None:
        logger.debug("Beep suppressed for %s (%s)", package_name, sound_uri)
