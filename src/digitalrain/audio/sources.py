"""
Audio inputs for the reactive color flash.

Every source exposes read_energy() -> float in [0, 255], polled once per
frame, and close(). The band-pass filter is applied inside the source so
the analyzer only deals with a scalar.
"""

import threading
from pathlib import Path

import numpy as np
from scipy import signal as scipy_signal

from digitalrain.audio.spectrum import band_energy, design_bandpass
from digitalrain.config import RainConfig


class AudioUnavailableError(RuntimeError):
    """Raised when no audio input can be opened."""


class SilentSource:
    """No-op source used when audio is disabled or unavailable."""

    def read_energy(self) -> float:
        return 0.0

    def close(self):
        pass


class _FilteredReader:
    """Stateful band-pass + band energy over successive blocks."""

    def __init__(self, cfg: RainConfig, sample_rate: int):
        self.cfg = cfg
        self.sample_rate = sample_rate
        self.sos = design_bandpass(sample_rate, cfg.filter_freq, cfg.filter_width)
        self.zi = np.zeros((self.sos.shape[0], 2))

    def energy(self, block: np.ndarray) -> float:
        if len(block) == 0:
            return 0.0
        filtered, self.zi = scipy_signal.sosfilt(self.sos, block, zi=self.zi)
        return band_energy(filtered, self.sample_rate, self.cfg.frequency_min, self.cfg.frequency_max)


class MicrophoneSource:
    """
    Live microphone input through sounddevice.

    The stream callback runs on the audio thread and only stores the most
    recent block; filtering happens on the render thread when polled.
    """

    def __init__(self, cfg: RainConfig, device=None):
        import sounddevice as sd

        self.cfg = cfg
        self._reader = _FilteredReader(cfg, cfg.sample_rate)
        self._lock = threading.Lock()
        self._latest: np.ndarray | None = None
        self._last_energy = 0.0

        try:
            self.stream = sd.InputStream(
                device=device,
                channels=1,
                samplerate=cfg.sample_rate,
                blocksize=cfg.block_size,
                dtype="float32",
                callback=self._callback,
            )
            self.stream.start()
        except (sd.PortAudioError, ValueError) as e:
            raise AudioUnavailableError(f"Couldn't start audio stream: {e}") from e

    def _callback(self, indata, frames, time_info, status):
        block = indata[:, 0].copy() if indata.ndim > 1 else indata.copy()
        with self._lock:
            self._latest = block

    def read_energy(self) -> float:
        with self._lock:
            block, self._latest = self._latest, None
        if block is not None:
            self._last_energy = self._reader.energy(block)
        return self._last_energy

    def close(self):
        self.stream.stop()
        self.stream.close()


class FileSource:
    """
    Replays an audio file one frame-sized block at a time.

    Used for offline renders so the flash follows a soundtrack.
    """

    def __init__(self, path: Path, cfg: RainConfig, sample_rate: int = 22050):
        import librosa

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        try:
            self.y, self.sr = librosa.load(path, sr=sample_rate, mono=True)
        except Exception as e:
            raise AudioUnavailableError(f"Couldn't decode audio file {path}: {e}") from e
        self.fps = cfg.fps
        self.window = max(self.sr // cfg.fps, cfg.block_size * self.sr // cfg.sample_rate)
        self.frame = 0
        self.cfg = cfg
        sos = design_bandpass(self.sr, cfg.filter_freq, cfg.filter_width)
        self._filtered = scipy_signal.sosfilt(sos, self.y)

    @property
    def duration(self) -> float:
        return len(self.y) / self.sr

    @property
    def position(self) -> int:
        """Sample offset of the next frame, rounded from frame * sr / fps."""
        return round(self.frame * self.sr / self.fps)

    def read_energy(self) -> float:
        start = self.position
        self.frame += 1
        end = self.position
        if start >= len(self._filtered):
            return 0.0
        block = self._filtered[max(0, end - self.window):end]
        return band_energy(block, self.sr, self.cfg.frequency_min, self.cfg.frequency_max)

    def close(self):
        pass


def open_microphone(cfg: RainConfig, device=None) -> MicrophoneSource:
    """Open the default input device, raising AudioUnavailableError on failure."""
    try:
        return MicrophoneSource(cfg, device=device)
    except (ImportError, OSError) as e:
        raise AudioUnavailableError(f"No audio input available: {e}") from e
