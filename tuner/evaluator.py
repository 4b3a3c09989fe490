"""
Tuning evaluator: one audio window in, one TuningReading (or None) out.

Pipeline per window:
  1. Ask the pitch estimator for a fundamental (or None)
  2. Validity filter: drop None / NaN and anything outside [60, 450) Hz
  3. Find the nearest open string
  4. Compute the cents deviation from that string
  5. In tune iff |cents| < 3

Silence, noise and out-of-range pitches all come back as None so the display
can simply show its "listening" state. Only broken reference tables raise.
"""

import logging
import math

from tuner.config import MAX_FREQUENCY, MIN_FREQUENCY, SAMPLE_RATE
from tuner.tuning import (
    STANDARD_STRINGS,
    TuningReading,
    calculate_cents,
    find_closest_string,
    is_in_tune,
    validate_reference_table,
)

logger = logging.getLogger(__name__)


def is_valid_frequency(freq):
    """True if freq is a plausible guitar fundamental: MIN_FREQUENCY <= freq < MAX_FREQUENCY."""
    if freq is None:
        return False
    freq = float(freq)
    if not math.isfinite(freq):
        return False
    return MIN_FREQUENCY <= freq < MAX_FREQUENCY


def evaluate_frequency(freq, strings=STANDARD_STRINGS):
    """
    Turn a raw frequency estimate into a reading.

    Args:
        freq: Detected frequency in Hz, or None if the estimator found nothing
        strings: Reference table (tuple of StringReference)

    Returns:
        TuningReading, or None when freq is missing or out of range
    """
    if not is_valid_frequency(freq):
        logger.debug("Rejected frequency estimate: %s", freq)
        return None

    freq = float(freq)
    closest = find_closest_string(freq, strings)
    cents = calculate_cents(freq, closest.frequency)

    return TuningReading(
        detected_frequency=freq,
        matched_string=closest,
        cents_deviation=cents,
        is_in_tune=is_in_tune(cents),
    )


class TuningEvaluator:
    """
    Runs the pitch estimator on each window and evaluates the result.

    Holds no state between calls; the same evaluator can serve any number of
    capture callbacks.
    """

    def __init__(self, detector, strings=STANDARD_STRINGS, sample_rate=SAMPLE_RATE):
        """
        Args:
            detector: Any object with .detect(samples, sr) -> float | None
            strings: Reference table; validated here so a bad table fails at startup
            sample_rate: The rate every incoming window must use
        """
        validate_reference_table(strings)
        self.detector = detector
        self.strings = tuple(strings)
        self.sample_rate = sample_rate

    def evaluate(self, window):
        """
        Evaluate one AudioWindow.

        Returns:
            TuningReading, or None for silence / noise / out-of-range pitch
        """
        if window.sample_rate != self.sample_rate:
            raise ValueError(
                f"Window sample rate {window.sample_rate} Hz does not match "
                f"evaluator rate {self.sample_rate} Hz"
            )

        freq = self.detector.detect(window.samples, window.sample_rate)
        return self.evaluate_frequency(freq)

    def evaluate_frequency(self, freq):
        return evaluate_frequency(freq, self.strings)
