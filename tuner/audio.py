"""
Audio windows: the unit of work handed to the evaluator.

Capture code gives us either float arrays (sounddevice) or raw 16-bit PCM
bytes (most native recorders). Both end up as a mono float32 array in [-1, 1].
"""

from dataclasses import dataclass

import numpy as np

from tuner.config import SAMPLE_RATE

# int16 full scale: dividing by this maps [-32768, 32767] into [-1, 1)
PCM16_SCALE = 32768.0


def pcm16_to_float(data):
    """Decode little-endian signed 16-bit PCM bytes into float32 samples."""
    if len(data) % 2:
        raise ValueError(f"PCM16 data must have an even byte count, got {len(data)}")
    ints = np.frombuffer(data, dtype="<i2")
    return ints.astype(np.float32) / PCM16_SCALE


@dataclass(frozen=True, eq=False)
class AudioWindow:
    samples: np.ndarray
    sample_rate: int = SAMPLE_RATE

    def __post_init__(self):
        samples = np.asarray(self.samples, dtype=np.float32)
        # sounddevice hands back (frames, 1) for mono input
        if samples.ndim == 2 and samples.shape[1] == 1:
            samples = samples[:, 0]
        if samples.ndim != 1:
            raise ValueError(f"AudioWindow must be mono, got shape {samples.shape}")
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")
        # Float capture can overshoot full scale slightly; keep samples in [-1, 1]
        samples = np.clip(samples, -1.0, 1.0)
        # frozen dataclass: bypass __setattr__ to store the normalized array
        object.__setattr__(self, "samples", samples)

    @classmethod
    def from_pcm16(cls, data, sample_rate=SAMPLE_RATE):
        return cls(pcm16_to_float(data), sample_rate)

    def __len__(self):
        return len(self.samples)

    @property
    def duration(self):
        """Length in seconds."""
        return len(self.samples) / self.sample_rate

    @property
    def rms(self):
        if len(self.samples) == 0:
            return 0.0
        return float(np.sqrt(np.mean(np.square(self.samples))))
