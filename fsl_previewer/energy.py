"""Energy analysis: find low-amplitude timestamps that are safe cut points."""

import math
from threading import Lock

import numpy as np

from fsl_previewer.constants import ENERGY_WINDOW_MS, ENERGY_THRESHOLD


def analyze_energy(
    samples,
    sample_rate: int,
    window_ms: int = ENERGY_WINDOW_MS,
    threshold: float = ENERGY_THRESHOLD,
) -> list[float]:
    """Return ascending window-start timestamps (seconds) whose RMS is below threshold.

    Samples are the first channel as floats in [-1, 1]. The last window may be
    shorter than window_ms; its RMS is taken over the samples it has.
    """
    window = math.floor(sample_rate * window_ms / 1000)
    if window <= 0:
        raise ValueError(f"Energy window too small: {window_ms}ms at {sample_rate}Hz")

    data = np.asarray(samples, dtype=np.float64)
    if data.size == 0:
        return []

    starts = np.arange(0, data.size, window)
    sums = np.add.reduceat(data * data, starts)
    counts = np.diff(np.append(starts, data.size))
    rms = np.sqrt(sums / counts)

    low = starts[rms < threshold]
    return (low / sample_rate).tolist()


class EnergyCache:
    """Read-through cache of energy profiles keyed by resource identifier.

    Each key is computed at most once, even when several threads ask for the
    same resource at the same time: late arrivals wait on the per-key lock
    and then read the stored profile.
    """

    def __init__(self):
        self._profiles: dict[str, tuple[float, ...]] = {}
        self._guard = Lock()
        self._key_locks: dict[str, Lock] = {}

    def get_or_compute(self, key: str, compute) -> tuple[float, ...]:
        with self._guard:
            if key in self._profiles:
                return self._profiles[key]
            lock = self._key_locks.setdefault(key, Lock())

        with lock:
            with self._guard:
                if key in self._profiles:
                    return self._profiles[key]
            profile = tuple(compute())
            with self._guard:
                self._profiles[key] = profile
                self._key_locks.pop(key, None)
        return profile

    def get(self, key: str) -> tuple[float, ...] | None:
        with self._guard:
            return self._profiles.get(key)

    def __contains__(self, key: str) -> bool:
        with self._guard:
            return key in self._profiles

    def __len__(self) -> int:
        with self._guard:
            return len(self._profiles)
