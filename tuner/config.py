# Tuning profiles: dict of { note_label: frequency_hz } per string (low to high)
# The lowest entry is string 6, the highest is string 1.
TUNINGS = {
    "Standard": {
        "E2": 82.41,
        "A2": 110.00,
        "D3": 146.83,
        "G3": 196.00,
        "B3": 246.94,
        "E4": 329.63,
    },
    "Drop D": {
        "D2": 73.42,
        "A2": 110.00,
        "D3": 146.83,
        "G3": 196.00,
        "B3": 246.94,
        "E4": 329.63,
    },
    "Half-step down": {
        "Eb2": 77.78,
        "Ab2": 103.83,
        "Db3": 138.59,
        "Gb3": 185.00,
        "Bb3": 233.08,
        "Eb4": 311.13,
    },
}

# Default tuning
STANDARD_TUNING = TUNINGS["Standard"]

NUM_STRINGS = 6

# Audio settings
# Capture and pitch estimation share one sample rate for the whole process
SAMPLE_RATE = 44100

# Samples per captured window (~93ms at 44.1kHz)
FRAME_SIZE = 4096

# Validity band for a detected fundamental: MIN_FREQUENCY <= f < MAX_FREQUENCY
# Guitar fundamentals sit between ~82 Hz and ~330 Hz. The band is wider to
# tolerate estimator jitter, but still drops mains hum, rumble and fret noise.
MIN_FREQUENCY = 60.0
MAX_FREQUENCY = 450.0

# |cents| below this counts as in tune
IN_TUNE_CENTS = 3.0

# |cents| below this is "close" (amber on the display)
CLOSE_CENTS = 10.0

# Pitch estimator search range. Slightly wider than the validity band so that
# the filter, not the estimator, decides what is out of range.
ESTIMATOR_FMIN = 50.0
ESTIMATOR_FMAX = 550.0

# YIN analysis frame inside one captured window
YIN_FRAME_LENGTH = 2048

# RMS below this is treated as silence before running the estimator.
# Sensitivity knob: lower it for quiet pickups, raise it in noisy rooms.
SILENCE_RMS = 0.003

# CREPE frames with periodicity at or below this are discarded
CONFIDENCE_THRESHOLD = 0.5

# CREPE hop length in samples at the capture rate
CREPE_HOP_LENGTH = 512
