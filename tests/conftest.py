"""Shared fixtures for FSL previewer tests."""

import os

import numpy as np
import pytest
from pydub import AudioSegment

from fsl_previewer.audio import AudioLoadError

SAMPLE_RATE = 8000


def make_clip(pattern, sample_rate=SAMPLE_RATE, channels=1):
    """Build a 16-bit clip from (seconds, amplitude) blocks of a 220Hz tone.

    Amplitude 0 gives digital silence.
    """
    chunks = []
    for seconds, amplitude in pattern:
        n = int(round(seconds * sample_rate))
        t = np.arange(n) / sample_rate
        chunks.append(amplitude * np.sin(2 * np.pi * 220.0 * t))
    data = np.concatenate(chunks) if chunks else np.zeros(0)
    pcm = (data * 32767).astype(np.int16)
    if channels > 1:
        pcm = np.repeat(pcm, channels)
    return AudioSegment(
        data=pcm.tobytes(),
        sample_width=2,
        frame_rate=sample_rate,
        channels=channels,
    )


class FakeLibrary:
    """In-memory stand-in for AudioLibrary with fixed durations and cut points."""

    def __init__(self, durations=None, points=None, fail_on=None):
        self.durations = durations or {}
        self.points = points or {}
        self.fail_on = set(fail_on or ())
        self.preloaded = []

    def preload_all(self, paths):
        self.preloaded.append(list(paths))
        for path in paths:
            if path in self.fail_on:
                raise AudioLoadError(path)

    def get_duration(self, path):
        return self.durations[path]

    def get_low_energy_points(self, path):
        return list(self.points.get(path, []))


@pytest.fixture
def clip_file(tmp_path):
    """Factory: write a WAV built by make_clip() and return its path."""

    def factory(pattern, name="clip.wav", **kwargs):
        path = tmp_path / name
        make_clip(pattern, **kwargs).export(str(path), format="wav")
        return str(path)

    return factory


@pytest.fixture
def assets_dir(tmp_path):
    """Asset tree with mario (neutral, happy) and luigi (neutral, empty sad)."""
    base = tmp_path / "assets"
    layout = {
        ("mario", "neutral"): [(0.5, 0.0), (1.0, 0.5), (0.5, 0.0), (1.0, 0.5), (0.5, 0.0)],
        ("mario", "happy"): [(0.3, 0.0), (2.0, 0.6), (0.3, 0.0)],
        ("luigi", "neutral"): [(0.2, 0.0), (1.5, 0.4), (0.3, 0.0)],
    }
    for (character, state), pattern in layout.items():
        audio_dir = base / "characters" / character / "states" / state / "audio"
        audio_dir.mkdir(parents=True)
        make_clip(pattern).export(str(audio_dir / "take1.wav"), format="wav")
    os.makedirs(base / "characters" / "luigi" / "states" / "sad" / "audio")
    return str(base)


@pytest.fixture
def sample_fsl():
    return (
        "seed: 42\n"
        "@park\n"
        "mario: Hello there.\n"
        "mario: [happy] Nice day!\n"
        "luigi: [sad] Yeah...\n"
    )
