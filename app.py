"""
Streamlit app for G-Tuner.

Run with:  streamlit run app.py

Real-time mode: uses st.rerun() to create a continuous listen-detect-display
loop. Each cycle records one capture window, hands it to the evaluator, shows
the reading (or the "listening" state when there is none), then reruns the
script to capture the next window.
"""

import logging

import sounddevice as sd
import streamlit as st

from tuner.audio import AudioWindow
from tuner.config import FRAME_SIZE, SAMPLE_RATE, TUNINGS
from tuner.dataset import generate_window
from tuner.evaluator import TuningEvaluator
from tuner.pitch import CREPEDetector, YINDetector
from tuner.tuning import TuningStatus, build_string_references

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

st.set_page_config(page_title="G-Tuner", layout="centered")
st.title("G-Tuner")
st.caption("Guitar tuner")

# --- Session state init ---
if "listening" not in st.session_state:
    st.session_state.listening = False
if "reading" not in st.session_state:
    st.session_state.reading = None

# --- Tuning and detector selection ---
col_tuning, col_model = st.columns(2)
with col_tuning:
    tuning_name = st.selectbox("Tuning", list(TUNINGS.keys()))
with col_model:
    model_choice = st.selectbox("Detector", ["YIN", "CREPE"])

strings = build_string_references(TUNINGS[tuning_name])


@st.cache_resource
def load_yin():
    return YINDetector()


@st.cache_resource
def load_crepe():
    return CREPEDetector()


# --- Show target frequencies, string 6 on the left ---
st.subheader(tuning_name)
cols = st.columns(len(strings))
for col, s in zip(cols, strings):
    col.metric(f"{s.note} ({s.string_index})", f"{s.frequency:.2f} Hz")

demo_freq = st.sidebar.number_input(
    "Demo tone (Hz, 0 = use microphone)", min_value=0.0, max_value=1000.0, value=0.0,
)

st.divider()


# --- Start / Stop toggle ---
def toggle_listening():
    st.session_state.listening = not st.session_state.listening
    if not st.session_state.listening:
        st.session_state.reading = None


if st.session_state.listening:
    st.button("Stop Listening", on_click=toggle_listening, type="primary")
else:
    st.button("Start Listening", on_click=toggle_listening, type="primary")

# --- Display results ---
reading = st.session_state.reading

with st.empty().container():
    if reading is None:
        st.info("Listening..." if st.session_state.listening else "Press Start to tune")
    else:
        col1, col2, col3 = st.columns(3)
        col1.metric("Note", f"{reading.note} (string {reading.string_index})")
        col2.metric("Frequency", f"{reading.detected_frequency:.1f} Hz")
        col3.metric("Cents Off", f"{reading.cents_deviation:+.1f}")

        # Needle: map -50..+50 cents onto the progress bar
        st.progress(min(max((reading.cents_deviation + 50) / 100, 0.0), 1.0))

        if reading.status is TuningStatus.IN_TUNE:
            st.success("In tune!")
        elif reading.direction == "sharp":
            st.warning(f"Sharp by {reading.cents_deviation:.1f} cents -- tune down")
        else:
            st.warning(f"Flat by {abs(reading.cents_deviation):.1f} cents -- tune up")

# --- Continuous listening loop ---
if st.session_state.listening:
    detector = load_yin() if model_choice == "YIN" else load_crepe()
    evaluator = TuningEvaluator(detector, strings=strings, sample_rate=SAMPLE_RATE)

    if demo_freq > 0:
        window = generate_window(demo_freq, noise_level=0.01)
    else:
        audio = sd.rec(FRAME_SIZE, samplerate=SAMPLE_RATE, channels=1, dtype="float32")
        sd.wait()
        window = AudioWindow(audio, SAMPLE_RATE)

    st.session_state.reading = evaluator.evaluate(window)

    # Rerun to capture the next window; this creates the continuous loop
    st.rerun()
