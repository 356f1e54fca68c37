"""Parse FSL script text into a Script of ordered events.

Lines are matched against an ordered table of line shapes; the first match
wins and anything unmatched is dropped. Dialogue lines carry inline tags:

    mario: Hey [happy] there [shot: wide] friend [...]

Plain-word tags change the speaker's sticky state, ``shot: x`` emits a shot
event, ``...`` emits a pause, and any other ``key: value`` tag is ignored.
"""

import re
from dataclasses import dataclass, field

from fsl_previewer.constants import DEFAULT_STATE
from fsl_previewer.models import (
    Script,
    LocationEvent,
    TextEvent,
    PauseEvent,
    ShotEvent,
)

COMMENT_RE = re.compile(r"^#")
SEED_RE = re.compile(r"^seed:\s*(\d+)$", re.ASCII)
LOCATION_RE = re.compile(r"^@([\w-]+)$", re.ASCII)
DIALOGUE_RE = re.compile(r"^(\w+):\s*(.*)$", re.ASCII)

# Byte-order mark; str.strip() does not remove it
BOM = "\ufeff"

# Capturing group keeps tag contents at odd indices after re.split()
_TAG_SPLIT_RE = re.compile(r"\[([^\]]+)\]")
_KEYED_TAG_RE = re.compile(r"^(\w+):\s*(.+)$", re.ASCII)

PAUSE_TAG = "..."


@dataclass(frozen=True)
class Tag:
    kind: str                 # "state", "shot", "pause" or "unknown"
    value: str | None = None


@dataclass
class _ParseContext:
    """Everything one parse accumulates. Never shared between parses."""

    seed: int | None = None
    events: list = field(default_factory=list)
    character_states: dict[str, str] = field(default_factory=dict)


def categorize_tag(content: str) -> Tag:
    """Classify the text between a pair of brackets."""
    if content == PAUSE_TAG:
        return Tag("pause")

    keyed = _KEYED_TAG_RE.match(content)
    if keyed:
        key, value = keyed.groups()
        if key == "shot":
            return Tag("shot", value)
        return Tag("unknown", content)

    return Tag("state", content)


def parse_dialogue_line(character: str, text: str, current_state: str) -> tuple[list, str]:
    """Split one line of dialogue into events.

    Returns (events, last_state) where last_state is the state in effect
    after the final segment, whether or not any text followed it.
    """
    events = []
    state = current_state

    for i, part in enumerate(_TAG_SPLIT_RE.split(text)):
        if i % 2 == 1:
            tag = categorize_tag(part)
            if tag.kind == "state":
                state = tag.value
            elif tag.kind == "shot":
                events.append(ShotEvent(shot=tag.value))
            elif tag.kind == "pause":
                events.append(PauseEvent(character=character, state=state))
            continue

        content = part.strip()
        if content:
            events.append(TextEvent(character=character, state=state, text=content))

    return events, state


def _handle_comment(match: re.Match, ctx: _ParseContext) -> None:
    pass


def _handle_seed(match: re.Match, ctx: _ParseContext) -> None:
    # Later seed lines overwrite earlier ones
    ctx.seed = int(match.group(1))


def _handle_location(match: re.Match, ctx: _ParseContext) -> None:
    ctx.events.append(LocationEvent(location=match.group(1)))


def _handle_dialogue(match: re.Match, ctx: _ParseContext) -> None:
    character, text = match.groups()
    current = ctx.character_states.get(character, DEFAULT_STATE)
    events, last_state = parse_dialogue_line(character, text, current)
    ctx.character_states[character] = last_state
    ctx.events.extend(events)


# Priority order matters: "seed: 1" would also match DIALOGUE_RE.
LINE_HANDLERS = (
    (COMMENT_RE, _handle_comment),
    (SEED_RE, _handle_seed),
    (LOCATION_RE, _handle_location),
    (DIALOGUE_RE, _handle_dialogue),
)


def _dispatch_line(line: str, ctx: _ParseContext) -> None:
    for pattern, handler in LINE_HANDLERS:
        match = pattern.match(line)
        if match:
            handler(match, ctx)
            return


def parse_script(text: str) -> Script:
    """Parse FSL text into a Script.

    Blank lines, comments and unrecognized lines produce nothing. Never raises
    on malformed input.
    """
    ctx = _ParseContext()
    for line in text.split("\n"):
        stripped = line.strip().strip(BOM).strip()
        if not stripped:
            continue
        _dispatch_line(stripped, ctx)

    return Script(seed=ctx.seed, events=tuple(ctx.events))
