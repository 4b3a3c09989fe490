import numpy as np
import pytest
import torch
import torchcrepe

from tuner.audio import AudioWindow
from tuner.config import SILENCE_RMS
from tuner.dataset import generate_silence, generate_window
from tuner.evaluator import TuningEvaluator
from tuner.pitch import CREPEDetector, YINDetector
from tuner.tuning import STANDARD_STRINGS


@pytest.fixture(scope="module")
def detector():
    return YINDetector()


@pytest.fixture(scope="module")
def crepe():
    return CREPEDetector("tiny")


def test_silence_has_no_pitch(detector) -> None:
    window = generate_silence()
    assert detector.detect(window.samples, window.sample_rate) is None


def test_quiet_noise_has_no_pitch(detector) -> None:
    rng = np.random.default_rng(0)
    noise = (0.001 * rng.standard_normal(4096)).astype(np.float32)
    assert detector.detect(noise, 44100) is None


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_loud_noise_is_unvoiced(detector, seed) -> None:
    rng = np.random.default_rng(seed)
    noise = (0.3 * rng.standard_normal(4096)).astype(np.float32)
    assert detector.detect(noise, 44100) is None
    assert TuningEvaluator(detector).evaluate(AudioWindow(noise, 44100)) is None


def test_quiet_note_passes_silence_gate(detector) -> None:
    window = generate_window(110.0, amplitude=0.012, n_harmonics=3, noise_level=0.0)
    assert SILENCE_RMS < window.rms < 0.01
    freq = detector.detect(window.samples, window.sample_rate)
    assert freq is not None
    assert abs(freq - 110.0) / 110.0 < 0.02


def test_empty_window_has_no_pitch(detector) -> None:
    assert detector.detect(np.zeros(0, dtype=np.float32), 44100) is None


@pytest.mark.parametrize("ref", STANDARD_STRINGS, ids=lambda s: s.note)
def test_detects_open_strings(detector, ref) -> None:
    window = generate_window(ref.frequency, n_harmonics=3, noise_level=0.005, seed=1)
    freq = detector.detect(window.samples, window.sample_rate)
    assert freq is not None
    assert abs(freq - ref.frequency) / ref.frequency < 0.02


def test_end_to_end_with_yin(detector) -> None:
    evaluator = TuningEvaluator(detector)

    assert evaluator.evaluate(generate_silence()) is None

    reading = evaluator.evaluate(generate_window(112.0, n_harmonics=3, noise_level=0.005, seed=2))
    assert reading is not None
    assert reading.note == "A2"
    assert reading.direction == "sharp"


def test_crepe_silence_has_no_pitch(crepe) -> None:
    window = generate_silence()
    assert crepe.detect(window.samples, window.sample_rate) is None


def test_crepe_detects_a_string(crepe) -> None:
    window = generate_window(110.0, n_harmonics=3, noise_level=0.005, seed=3)
    freq = crepe.detect(window.samples, window.sample_rate)
    assert freq is not None
    assert abs(freq - 110.0) / 110.0 < 0.02


def test_crepe_end_to_end(crepe) -> None:
    reading = TuningEvaluator(crepe).evaluate(generate_window(196.0, n_harmonics=3, seed=4))
    assert reading is not None
    assert reading.note == "G3"


def test_crepe_drops_low_confidence_frames(crepe, monkeypatch) -> None:
    def predict(audio, sr, **kwargs):
        return torch.tensor([[110.0, 220.0, 111.0]]), torch.tensor([[0.9, 0.2, 0.8]])

    monkeypatch.setattr(torchcrepe, "predict", predict)
    window = generate_window(110.0)
    assert crepe.detect(window.samples, window.sample_rate) == pytest.approx(110.5)


def test_crepe_no_confident_frame_gives_none(crepe, monkeypatch) -> None:
    def predict(audio, sr, **kwargs):
        return torch.tensor([[110.0, 220.0]]), torch.tensor([[0.1, 0.5]])

    monkeypatch.setattr(torchcrepe, "predict", predict)
    window = generate_window(110.0)
    assert crepe.detect(window.samples, window.sample_rate) is None


def test_crepe_single_frame_output(crepe, monkeypatch) -> None:
    def predict(audio, sr, **kwargs):
        return torch.tensor([[147.0]]), torch.tensor([[0.95]])

    monkeypatch.setattr(torchcrepe, "predict", predict)
    window = generate_window(147.0)
    assert crepe.detect(window.samples, window.sample_rate) == pytest.approx(147.0)
