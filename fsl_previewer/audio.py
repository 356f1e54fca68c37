"""Audio loading, caching, and per-clip energy profiles."""

import logging
from threading import Lock

import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from fsl_previewer.constants import ENERGY_WINDOW_MS, ENERGY_THRESHOLD
from fsl_previewer.energy import EnergyCache, analyze_energy
from fsl_previewer.models import TimingConfig

logger = logging.getLogger(__name__)


class AudioLoadError(RuntimeError):
    """Raised when an audio resource cannot be read, decoded, or is not loaded."""

    def __init__(self, path: str, message: str = "Failed to load audio"):
        super().__init__(f"{message}: {path}")
        self.path = path


def audio_to_samples(audio: AudioSegment) -> np.ndarray:
    """First channel of an AudioSegment as floats in [-1, 1]."""
    samples = np.array(audio.get_array_of_samples(), dtype=np.float32)

    if audio.channels > 1:
        samples = samples.reshape((-1, audio.channels))[:, 0]

    full_scale = float(1 << (8 * audio.sample_width - 1))
    return samples / full_scale


class AudioLibrary:
    """Decoded clips keyed by path, plus their low-energy cut points.

    The energy cache can be shared between libraries; each clip is analyzed
    at most once per cache.
    """

    def __init__(
        self,
        energy_cache: EnergyCache | None = None,
        window_ms: int = ENERGY_WINDOW_MS,
        threshold: float = ENERGY_THRESHOLD,
    ):
        self.energy_cache = energy_cache if energy_cache is not None else EnergyCache()
        self.window_ms = window_ms
        self.threshold = threshold
        self._segments: dict[str, AudioSegment] = {}
        self._lock = Lock()

    @classmethod
    def from_config(cls, config: TimingConfig, energy_cache: EnergyCache | None = None) -> "AudioLibrary":
        """A library analyzing clips with the energy settings of config."""
        return cls(
            energy_cache=energy_cache,
            window_ms=config.energy_window_ms,
            threshold=config.energy_threshold,
        )

    def load(self, path: str) -> AudioSegment:
        """Decode and cache a clip, analyzing its energy on first load."""
        with self._lock:
            cached = self._segments.get(path)
        if cached is not None:
            return cached

        try:
            audio = AudioSegment.from_file(path)
        except (OSError, CouldntDecodeError) as e:
            raise AudioLoadError(path) from e
        logger.debug("Decoded %s (%.2fs, %dHz)", path, audio.duration_seconds, audio.frame_rate)

        self.energy_cache.get_or_compute(path, lambda: self._analyze(path, audio))

        with self._lock:
            self._segments.setdefault(path, audio)
            return self._segments[path]

    def _analyze(self, path: str, audio: AudioSegment) -> list[float]:
        points = analyze_energy(
            audio_to_samples(audio),
            audio.frame_rate,
            window_ms=self.window_ms,
            threshold=self.threshold,
        )
        logger.debug("Energy analysis for %s: %d low-energy points", path, len(points))
        return points

    def preload_all(self, paths) -> None:
        """Load every path. Stops at the first failure and raises it."""
        for path in paths:
            self.load(path)

    def get_segment(self, path: str) -> AudioSegment:
        with self._lock:
            audio = self._segments.get(path)
        if audio is None:
            raise AudioLoadError(path, "Audio not loaded")
        return audio

    def get_duration(self, path: str) -> float:
        """Clip length in seconds."""
        return self.get_segment(path).duration_seconds

    def get_samples(self, path: str) -> np.ndarray:
        return audio_to_samples(self.get_segment(path))

    def get_low_energy_points(self, path: str) -> list[float]:
        """Cached cut points for path, or an empty list if never analyzed."""
        return list(self.energy_cache.get(path) or ())
