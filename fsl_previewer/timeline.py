"""Turn a parsed Script into a Timeline with start/end times for every event.

Text events also get a slice of their character's voice clip. The slice start
is drawn from the seeded generator, then nudged onto nearby low-energy points
so playback never starts or stops mid-syllable.
"""

import logging

from fsl_previewer.constants import DEFAULT_SEED, DEFAULT_STATE, MIN_AUDIO_DURATION
from fsl_previewer.models import Script, Timeline, TimelineEntry, TimingConfig
from fsl_previewer.seeded_random import SeededRandom, create_random

logger = logging.getLogger(__name__)


def estimate_duration(text: str, ms_per_word: int, min_duration_ms: int) -> int:
    """How long a line should take to speak, in ms."""
    words = text.split()
    return max(min_duration_ms, len(words) * ms_per_word)


def find_low_energy_after(time: float, low_points, max_search: float) -> float:
    """First low-energy point in [time, time + max_search], else time."""
    max_time = time + max_search
    for point in low_points:
        if point > max_time:
            break
        if point >= time:
            return point
    return time


def find_low_energy_before(time: float, low_points, max_search: float) -> float:
    """Last low-energy point in [time - max_search, time], else time."""
    min_time = time - max_search
    best = time
    for point in low_points:
        if point > time:
            break
        if point >= min_time:
            best = point
    return best


def pick_audio_window(
    clip_duration: float,
    target_len: float,
    low_points,
    random: SeededRandom,
    search_range: float,
) -> tuple[float, float]:
    """Choose (audio_start, audio_duration) in seconds inside a clip.

    The start only ever moves later than the random draw and the end only
    ever moves earlier than start + target_len. Both stay inside the clip.
    A clip shorter than MIN_AUDIO_DURATION is played whole.
    """
    latest_start = max(0.0, clip_duration - MIN_AUDIO_DURATION)
    max_start = max(0.0, clip_duration - max(target_len, MIN_AUDIO_DURATION))
    raw_start = random.range(0, max_start)

    start_candidates = [p for p in low_points if p <= latest_start]
    snapped_start = find_low_energy_after(raw_start, start_candidates, search_range)

    target_end = snapped_start + target_len
    snapped_end = min(find_low_energy_before(target_end, low_points, search_range), clip_duration)

    audio_duration = max(MIN_AUDIO_DURATION, snapped_end - snapped_start)
    audio_duration = min(audio_duration, clip_duration - snapped_start)
    return snapped_start, audio_duration


def _speaker_gap(character: str, state: str, last_speaker, last_state, config: TimingConfig) -> int:
    if last_speaker is None:
        return 0
    if last_speaker != character:
        return config.speaker_gap_ms
    if last_state is not None and last_state != state:
        return config.state_change_gap_ms
    return 0


def collect_audio_paths(script: Script, resolve_resource) -> list:
    """Resolve every text event once. Returns one path (or None) per event."""
    paths = []
    for event in script.events:
        if event.type == "text":
            paths.append(resolve_resource(event.character, event.state or DEFAULT_STATE))
        else:
            paths.append(None)
    return paths


def generate_timeline(
    script: Script,
    resolve_resource,
    library,
    random: SeededRandom | None = None,
    config: TimingConfig | None = None,
) -> Timeline:
    """Build a Timeline from a parsed Script.

    resolve_resource(character, state) returns a resource path or None.
    library must provide preload_all(paths), get_duration(path) and
    get_low_energy_points(path); any error raised by preload_all aborts
    the whole generation. The library owns energy analysis, so
    config.energy_window_ms and config.energy_threshold only take effect
    through the library (see AudioLibrary.from_config). The remaining
    config fields drive timing and snapping here.
    """
    if config is None:
        config = TimingConfig()
    seed = script.seed or DEFAULT_SEED
    if random is None:
        random = create_random(seed)

    # Pass 1: resolve and load every clip up front
    resolved = collect_audio_paths(script, resolve_resource)
    unique_paths = list(dict.fromkeys(p for p in resolved if p))
    logger.debug("Preloading %d audio resources", len(unique_paths))
    library.preload_all(unique_paths)

    # Pass 2: walk the events on a running clock
    current_time = 0
    last_speaker = None
    last_state = None
    entries = []

    for event, audio_path in zip(script.events, resolved):
        entry = TimelineEntry(event=event, duration=0, start_time=0)

        if event.type == "text":
            state = event.state or DEFAULT_STATE
            current_time += _speaker_gap(event.character, state, last_speaker, last_state, config)
            last_speaker = event.character
            last_state = state

            entry.duration = estimate_duration(event.text, config.ms_per_word, config.min_duration_ms)

            if audio_path:
                start, length = pick_audio_window(
                    library.get_duration(audio_path),
                    entry.duration / 1000,
                    library.get_low_energy_points(audio_path),
                    random,
                    config.energy_search_range,
                )
                entry.audio_path = audio_path
                entry.audio_start = start
                entry.audio_duration = length

        elif event.type == "pause":
            entry.duration = event.duration or config.pause_duration_ms

        elif event.type == "location":
            entry.duration = config.location_duration_ms
            last_speaker = None
            last_state = None

        entry.start_time = current_time
        current_time = entry.end_time
        entries.append(entry)

    return Timeline(seed=seed, total_duration=current_time, events=entries)
