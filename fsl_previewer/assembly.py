"""Render a Timeline to a single audio mix."""

from pydub import AudioSegment

from fsl_previewer.constants import AUDIO_FADE_MS
from fsl_previewer.models import Timeline

DEFAULT_FRAME_RATE = 44100


def _clip_slice(audio: AudioSegment, start: float, duration: float, fade_ms: int) -> AudioSegment:
    """Cut [start, start + duration] seconds out of a clip with micro-fades.

    Fades are skipped when the slice is too short to hold both.
    """
    start_ms = int(round(start * 1000))
    end_ms = start_ms + int(round(duration * 1000))
    clip = audio[start_ms:end_ms]

    if fade_ms > 0 and len(clip) > 2 * fade_ms:
        clip = clip.fade_in(fade_ms).fade_out(fade_ms)
    return clip


def _mix_frame_rate(timeline: Timeline, library) -> int:
    for entry in timeline.events:
        if entry.audio_path is not None:
            return library.get_segment(entry.audio_path).frame_rate
    return DEFAULT_FRAME_RATE


def render_timeline(timeline: Timeline, library, fade_ms: int = AUDIO_FADE_MS) -> AudioSegment:
    """Lay every audio-bearing entry onto a silent bed at its start time.

    The bed is exactly timeline.total_duration ms long; entries without audio
    (captions, pauses, shots, locations) stay silent.
    """
    result = AudioSegment.silent(
        duration=timeline.total_duration,
        frame_rate=_mix_frame_rate(timeline, library),
    )

    for entry in timeline.events:
        if entry.audio_path is None:
            continue
        clip = _clip_slice(
            library.get_segment(entry.audio_path),
            entry.audio_start,
            entry.audio_duration,
            fade_ms,
        )
        result = result.overlay(clip, position=entry.start_time)

    return result
