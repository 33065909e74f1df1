"""
Band-limited energy readings.

A Butterworth band-pass isolates the region of interest, then the
energy inside a narrower frequency band is read back from a windowed
FFT on the byte scale used by browser analysers (0-255 over -100..-30 dB).
"""

import numpy as np
from scipy import signal as scipy_signal

MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0


def design_bandpass(sample_rate: int, center: float, width: float, order: int = 4) -> np.ndarray:
    """
    Design a band-pass filter around center with the given width in Hz.

    Returns second-order sections for scipy.signal.sosfilt.
    """
    nyquist = sample_rate / 2

    low = max(center - width / 2, 1.0)
    high = center + width / 2

    # Normalize frequencies
    low_norm = low / nyquist
    high_norm = min(high / nyquist, 0.99)

    if low_norm >= high_norm:
        raise ValueError(
            f"Band-pass {low:.1f}-{high:.1f} Hz is invalid at {sample_rate} Hz"
        )

    return scipy_signal.butter(
        order,
        [low_norm, high_norm],
        btype="band",
        output="sos",
    )


def band_energy(block: np.ndarray, sample_rate: int, fmin: float, fmax: float) -> float:
    """
    Average spectral level of block between fmin and fmax, in [0, 255].

    When the band is narrower than the FFT bin spacing the nearest bin
    to its center is used.
    """
    block = np.asarray(block, dtype=np.float32)
    if block.ndim > 1:
        block = block.mean(axis=1)
    n = len(block)
    if n == 0:
        return 0.0

    windowed = block * np.hanning(n)
    magnitude = np.abs(np.fft.rfft(windowed)) / n
    freqs = np.fft.rfftfreq(n, d=1.0 / sample_rate)

    db = 20 * np.log10(magnitude + 1e-12)
    levels = np.clip(
        (db - MIN_DECIBELS) / (MAX_DECIBELS - MIN_DECIBELS) * 255.0, 0.0, 255.0
    )

    mask = (freqs >= fmin) & (freqs <= fmax)
    if not np.any(mask):
        idx = int(np.argmin(np.abs(freqs - (fmin + fmax) / 2)))
        return float(levels[idx])
    return float(np.mean(levels[mask]))
