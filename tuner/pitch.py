"""
Pitch estimation: the capability the evaluator delegates to.

Two detectors:
  1. YINDetector: probabilistic YIN (pYIN) from librosa. A time-domain method
     that resists octave errors, which matters for guitar: the 2nd harmonic of
     a low E is often louder than the fundamental.
  2. CREPEDetector: the pre-trained CREPE network via torchcrepe (heavier,
     more robust in noisy rooms).

Both expose the same .detect(samples, sr) interface and return either a
frequency in Hz or None ("no pitch found"), so the evaluator can swap between
them or take any other object with that method.
"""

import logging

import librosa
import numpy as np
import torch
import torchcrepe

from tuner.config import (
    CONFIDENCE_THRESHOLD,
    CREPE_HOP_LENGTH,
    ESTIMATOR_FMAX,
    ESTIMATOR_FMIN,
    SAMPLE_RATE,
    SILENCE_RMS,
    YIN_FRAME_LENGTH,
)

logger = logging.getLogger(__name__)


def _is_silent(audio, threshold):
    if audio.size == 0:
        return True
    return float(np.sqrt(np.mean(np.square(audio)))) < threshold


class YINDetector:
    """
    Pitch detection using pYIN.

    pYIN runs YIN on overlapping frames, then an HMM decides which frames are
    voiced. We return the median over the voiced frames of the window, which
    smooths out single-frame octave slips.
    """

    def __init__(self, fmin=ESTIMATOR_FMIN, fmax=ESTIMATOR_FMAX,
                 frame_length=YIN_FRAME_LENGTH, silence_rms=SILENCE_RMS):
        self.fmin = fmin
        self.fmax = fmax
        self.frame_length = frame_length
        self.silence_rms = silence_rms

    def detect(self, audio, sr=SAMPLE_RATE):
        """
        Detect pitch from an audio window.

        Returns:
            frequency in Hz, or None for silence / unvoiced audio
        """
        audio = np.asarray(audio, dtype=np.float32)
        if _is_silent(audio, self.silence_rms):
            logger.debug("Window below silence gate, skipping pYIN")
            return None

        # pyin needs at least one full analysis frame
        if audio.size < self.frame_length:
            audio = np.pad(audio, (0, self.frame_length - audio.size))

        f0, voiced_flag, _ = librosa.pyin(
            audio,
            fmin=self.fmin,
            fmax=self.fmax,
            sr=sr,
            frame_length=self.frame_length,
        )

        voiced = f0[voiced_flag & np.isfinite(f0)]
        if voiced.size == 0:
            return None
        return float(np.median(voiced))


class CREPEDetector:
    """
    Pitch detection using CREPE (Convolutional Representation for Pitch Estimation).

    CREPE is a 6-layer CNN trained on millions of audio samples. It takes raw
    audio and outputs a probability distribution over 360 pitch bins spanning
    C1 to B7. Each bin = 20 cents. torchcrepe resamples our 44.1kHz input to
    the 16kHz the model expects.

    We use the 'tiny' model variant for speed (fewer parameters).
    """

    def __init__(self, model_capacity="tiny", fmin=ESTIMATOR_FMIN, fmax=ESTIMATOR_FMAX,
                 silence_rms=SILENCE_RMS):
        self.device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
        self.model_capacity = model_capacity
        self.fmin = fmin
        self.fmax = fmax
        self.silence_rms = silence_rms
        logger.info("CREPE detector using %s model on %s", model_capacity, self.device)

    def detect(self, audio, sr=SAMPLE_RATE):
        """
        Detect pitch from an audio window.

        Returns:
            frequency in Hz, or None when no frame is confident enough
        """
        audio = np.asarray(audio, dtype=np.float32)
        if _is_silent(audio, self.silence_rms):
            logger.debug("Window below silence gate, skipping CREPE")
            return None

        audio_tensor = torch.from_numpy(audio).unsqueeze(0).to(self.device)

        # torchcrepe returns pitch (Hz) and periodicity (confidence 0-1)
        frequency, confidence = torchcrepe.predict(
            audio_tensor,
            sr,
            hop_length=CREPE_HOP_LENGTH,
            fmin=self.fmin,
            fmax=self.fmax,
            model=self.model_capacity,
            batch_size=1,
            device=self.device,
            return_periodicity=True,
        )

        # Filter out low-confidence frames and take the median
        freq_np = np.atleast_1d(frequency.squeeze().cpu().numpy())
        conf_np = np.atleast_1d(confidence.squeeze().cpu().numpy())
        mask = conf_np > CONFIDENCE_THRESHOLD
        if not mask.any():
            return None
        return float(np.median(freq_np[mask]))
