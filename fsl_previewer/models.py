"""Data models for script parsing and timeline generation."""

import re
from dataclasses import dataclass, field, fields

from fsl_previewer.constants import (
    MS_PER_WORD,
    MIN_DURATION_MS,
    PAUSE_DURATION_MS,
    SPEAKER_GAP_MS,
    STATE_CHANGE_GAP_MS,
    LOCATION_DURATION_MS,
    ENERGY_WINDOW_MS,
    ENERGY_THRESHOLD,
    ENERGY_SEARCH_RANGE,
)


@dataclass(frozen=True)
class LocationEvent:
    location: str
    type: str = field(default="location", init=False)

    def to_dict(self) -> dict:
        return {"type": self.type, "location": self.location}


@dataclass(frozen=True)
class TextEvent:
    character: str
    state: str
    text: str
    type: str = field(default="text", init=False)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "character": self.character,
            "state": self.state,
            "text": self.text,
        }


@dataclass(frozen=True)
class PauseEvent:
    character: str
    state: str
    duration: int | None = None   # ms; None means "use the configured default"
    type: str = field(default="pause", init=False)

    def to_dict(self) -> dict:
        data = {"type": self.type, "character": self.character, "state": self.state}
        if self.duration is not None:
            data["duration"] = self.duration
        return data


@dataclass(frozen=True)
class ShotEvent:
    shot: str
    type: str = field(default="shot", init=False)

    def to_dict(self) -> dict:
        return {"type": self.type, "shot": self.shot}


Event = LocationEvent | TextEvent | PauseEvent | ShotEvent


@dataclass(frozen=True)
class Script:
    seed: int | None
    events: tuple[Event, ...] = ()

    def to_dict(self) -> dict:
        return {"seed": self.seed, "events": [e.to_dict() for e in self.events]}


@dataclass
class TimelineEntry:
    """An event stamped with its place on the episode clock.

    Times are milliseconds from episode start. The audio fields are seconds
    into the clip and are only set for text events with a resolved resource.
    """

    event: Event
    duration: int
    start_time: int
    audio_path: str | None = None
    audio_start: float | None = None
    audio_duration: float | None = None

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration

    @property
    def type(self) -> str:
        return self.event.type

    def to_dict(self) -> dict:
        data = self.event.to_dict()
        data["duration"] = self.duration
        data["startTime"] = self.start_time
        data["endTime"] = self.end_time
        if self.audio_path is not None:
            data["audioPath"] = self.audio_path
            data["audioStart"] = self.audio_start
            data["audioDuration"] = self.audio_duration
        return data


@dataclass
class Timeline:
    seed: int
    total_duration: int
    events: list[TimelineEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "totalDuration": self.total_duration,
            "events": [e.to_dict() for e in self.events],
        }


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass
class TimingConfig:
    ms_per_word: int = MS_PER_WORD
    min_duration_ms: int = MIN_DURATION_MS
    pause_duration_ms: int = PAUSE_DURATION_MS
    speaker_gap_ms: int = SPEAKER_GAP_MS
    state_change_gap_ms: int = STATE_CHANGE_GAP_MS
    location_duration_ms: int = LOCATION_DURATION_MS
    energy_window_ms: int = ENERGY_WINDOW_MS
    energy_threshold: float = ENERGY_THRESHOLD
    energy_search_range: float = ENERGY_SEARCH_RANGE

    @classmethod
    def from_dict(cls, data: dict) -> "TimingConfig":
        """Build a config from a partial mapping.

        Keys may be camelCase ("msPerWord") or snake_case ("ms_per_word").
        Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)
