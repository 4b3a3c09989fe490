"""
Tuning model: reference strings, readings, and the pitch math between them.

A reading answers three questions about one detected frequency:
  1. Which open string is it closest to? (smallest distance in Hz)
  2. How far off is it? Measured in cents, the musician's unit:
       cents = 1200 * log2(detected / target)
     100 cents = 1 semitone, 1200 cents = 1 octave. Positive = sharp,
     negative = flat.
  3. Is that close enough to call it in tune? (|cents| < 3)
"""

import enum
import math
from dataclasses import dataclass

from tuner.config import CLOSE_CENTS, IN_TUNE_CENTS, NUM_STRINGS, STANDARD_TUNING


class TuningConfigError(ValueError):
    """A reference table broke its invariants. This is a setup bug, not bad audio."""


@dataclass(frozen=True)
class StringReference:
    """One open string: its note name, target pitch and position (1 = highest)."""

    note: str
    frequency: float
    string_index: int


class TuningStatus(enum.Enum):
    IN_TUNE = "in_tune"
    CLOSE = "close"
    OFF = "off"


@dataclass(frozen=True)
class TuningReading:
    """Result of evaluating one audio window."""

    detected_frequency: float
    matched_string: StringReference
    cents_deviation: float
    is_in_tune: bool

    @property
    def note(self):
        return self.matched_string.note

    @property
    def target_frequency(self):
        return self.matched_string.frequency

    @property
    def string_index(self):
        return self.matched_string.string_index

    @property
    def status(self):
        if self.is_in_tune:
            return TuningStatus.IN_TUNE
        if abs(self.cents_deviation) < CLOSE_CENTS:
            return TuningStatus.CLOSE
        return TuningStatus.OFF

    @property
    def direction(self):
        """'flat' means tune up, 'sharp' means tune down."""
        if self.is_in_tune:
            return "in tune"
        return "sharp" if self.cents_deviation > 0 else "flat"


def validate_reference_table(strings):
    """
    Check the invariants every reference table must hold.

    Raises:
        TuningConfigError: wrong length, non-positive or non-increasing
            frequencies, or string indices not running 6..1.
    """
    if len(strings) != NUM_STRINGS:
        raise TuningConfigError(
            f"Expected {NUM_STRINGS} strings, got {len(strings)}"
        )

    expected_indices = list(range(NUM_STRINGS, 0, -1))
    if [s.string_index for s in strings] != expected_indices:
        raise TuningConfigError(
            f"String indices must run {expected_indices}, got "
            f"{[s.string_index for s in strings]}"
        )

    previous = 0.0
    for s in strings:
        if not math.isfinite(s.frequency) or s.frequency <= 0:
            raise TuningConfigError(f"{s.note}: frequency must be positive, got {s.frequency}")
        if s.frequency <= previous:
            raise TuningConfigError(
                f"{s.note}: frequencies must increase from string 6 to string 1"
            )
        previous = s.frequency


def build_string_references(tuning=None):
    """
    Turn a tuning profile into a validated reference table.

    Args:
        tuning: Dict of {note_label: target_hz}, low string first.
                Defaults to STANDARD_TUNING.

    Returns:
        Tuple of StringReference, lowest pitch (string 6) first.
    """
    if tuning is None:
        tuning = STANDARD_TUNING

    strings = tuple(
        StringReference(note=note, frequency=float(freq), string_index=len(tuning) - i)
        for i, (note, freq) in enumerate(tuning.items())
    )
    validate_reference_table(strings)
    return strings


STANDARD_STRINGS = build_string_references(STANDARD_TUNING)


def find_closest_string(freq, strings=STANDARD_STRINGS):
    """
    Find the reference string nearest to freq in Hz.

    Ties go to the first entry in table order (the lower string).
    """
    if not strings:
        raise TuningConfigError("Reference table is empty")

    closest = strings[0]
    for s in strings[1:]:
        if abs(s.frequency - freq) < abs(closest.frequency - freq):
            closest = s
    return closest


def calculate_cents(freq, target_freq):
    """Signed distance from target_freq to freq in cents (> 0 is sharp)."""
    if freq <= 0 or target_freq <= 0:
        raise ValueError(
            f"Cents need positive frequencies, got {freq} and {target_freq}"
        )
    return 1200 * math.log2(freq / target_freq)


def is_in_tune(cents):
    # exactly +/-3 cents is still out of tune
    return abs(cents) < IN_TUNE_CENTS
