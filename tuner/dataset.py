"""
Synthetic guitar-like tones for driving the tuner without a microphone.

WHY SYNTHETIC AUDIO?
Tests and the app's demo mode need audio with a known pitch. A plucked string
is roughly:
  1. A fundamental frequency (the note's pitch)
  2. Harmonics (integer multiples of the fundamental; these give
     instruments their timbre)
  3. Some noise from the room and the microphone
"""

import numpy as np

from tuner.audio import AudioWindow
from tuner.config import FRAME_SIZE, SAMPLE_RATE


def generate_harmonic_tone(f0, duration=1.0, sr=SAMPLE_RATE, n_harmonics=5,
                           noise_level=0.01, seed=None):
    """
    Generate an audio signal that mimics a plucked string.

    Args:
        f0: Fundamental frequency in Hz (the "pitch" we hear)
        duration: Length in seconds
        sr: Sample rate
        n_harmonics: Number of partials including the fundamental.
                     1 gives a pure sine wave.
        noise_level: How much random noise to add (0 = clean)
        seed: Seed for the noise, for reproducible tests

    Returns:
        numpy array of audio samples (float32), peak-normalized
    """
    t = np.arange(int(round(sr * duration))) / sr
    signal = np.zeros_like(t)

    # A guitar string vibrating at 110 Hz (A2) also produces energy at
    # 220 Hz, 330 Hz, 440 Hz, etc. Each harmonic is quieter than the last.
    for h in range(1, n_harmonics + 1):
        amplitude = 1.0 / h  # 1, 1/2, 1/3, ...
        signal += amplitude * np.sin(2 * np.pi * f0 * h * t)

    if noise_level > 0:
        rng = np.random.default_rng(seed)
        signal += noise_level * rng.standard_normal(len(signal))

    # Normalize to [-1, 1] range (standard for audio)
    peak = np.max(np.abs(signal)) if signal.size else 0.0
    if peak > 0:
        signal = signal / peak

    return signal.astype(np.float32)


def generate_window(f0, n_samples=FRAME_SIZE, sr=SAMPLE_RATE, amplitude=0.5, **kwargs):
    """One capture-sized AudioWindow of a synthetic tone at f0."""
    tone = generate_harmonic_tone(f0, duration=n_samples / sr, sr=sr, **kwargs)
    return AudioWindow(amplitude * tone[:n_samples], sr)


def generate_silence(n_samples=FRAME_SIZE, sr=SAMPLE_RATE):
    return AudioWindow(np.zeros(n_samples, dtype=np.float32), sr)
