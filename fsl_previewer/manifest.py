"""Asset manifest scanning and (character, state) -> audio path resolution."""

import json
import logging
import os
from datetime import datetime, timezone

from fsl_previewer.constants import (
    ASSETS_DIR,
    AUDIO_EXTENSIONS,
    VIDEO_EXTENSIONS,
    DEFAULT_STATE,
)

logger = logging.getLogger(__name__)


def _files_with_extensions(directory: str, extensions: tuple[str, ...]) -> list[str]:
    if not os.path.isdir(directory):
        return []
    return sorted(f for f in os.listdir(directory) if f.lower().endswith(extensions))


def scan_characters(assets_dir: str = ASSETS_DIR) -> dict:
    """Walk <assets>/characters/<name>/states/<state>/{audio,video}/.

    Returns {name: {"states": {state: {"audio": [...], "video": [...]}}}}.
    Characters without a states/ folder are left out.
    """
    characters_dir = os.path.join(assets_dir, "characters")
    if not os.path.isdir(characters_dir):
        return {}

    characters = {}
    for char_name in sorted(os.listdir(characters_dir)):
        states_dir = os.path.join(characters_dir, char_name, "states")
        if not os.path.isdir(states_dir):
            continue

        states = {}
        for state_name in sorted(os.listdir(states_dir)):
            state_path = os.path.join(states_dir, state_name)
            if not os.path.isdir(state_path):
                continue
            states[state_name] = {
                "audio": _files_with_extensions(os.path.join(state_path, "audio"), AUDIO_EXTENSIONS),
                "video": _files_with_extensions(os.path.join(state_path, "video"), VIDEO_EXTENSIONS),
            }
        characters[char_name] = {"states": states}

    return characters


def generate_manifest(assets_dir: str = ASSETS_DIR) -> dict:
    return {
        "generated": datetime.now(timezone.utc).isoformat(),
        "characters": scan_characters(assets_dir),
    }


def write_manifest(assets_dir: str = ASSETS_DIR) -> str:
    """Scan assets_dir and write manifest.json into it. Returns the path."""
    manifest = generate_manifest(assets_dir)
    path = os.path.join(assets_dir, "manifest.json")
    with open(path, "w") as f:
        json.dump(manifest, f, indent=2)
    return path


def load_manifest(assets_dir: str = ASSETS_DIR) -> dict:
    """Read manifest.json from assets_dir, scanning the tree if it is absent."""
    path = os.path.join(assets_dir, "manifest.json")
    if not os.path.exists(path):
        return generate_manifest(assets_dir)
    with open(path) as f:
        return json.load(f)


def _audio_file_path(assets_dir: str, character: str, state: str, filename: str) -> str:
    return os.path.join(assets_dir, "characters", character, "states", state, "audio", filename)


def resolve_audio_path(
    character: str,
    state: str,
    manifest: dict,
    assets_dir: str = ASSETS_DIR,
) -> str | None:
    """Resolve a character/state pair to the first audio file for it.

    Falls back to the character's neutral state when the requested state is
    missing or has no audio. Returns None when even that fails.
    """
    char_key = character.lower()
    state_key = state.lower()

    char_data = manifest.get("characters", {}).get(char_key)
    if not char_data:
        logger.warning("Character not found in manifest: %s", character)
        return None

    states = char_data.get("states", {})
    state_data = states.get(state_key)
    if state_data and state_data.get("audio"):
        return _audio_file_path(assets_dir, char_key, state_key, state_data["audio"][0])

    if state_data is None:
        logger.warning("State not found for %s: %s", character, state)
    else:
        logger.warning("No audio files for %s/%s", character, state)

    neutral = states.get(DEFAULT_STATE)
    if state_key != DEFAULT_STATE and neutral and neutral.get("audio"):
        return _audio_file_path(assets_dir, char_key, DEFAULT_STATE, neutral["audio"][0])

    logger.warning("No neutral fallback audio for %s", character)
    return None


def make_resolver(manifest: dict, assets_dir: str = ASSETS_DIR):
    """Bind a manifest into a resolve(character, state) -> path | None callable."""

    def resolve(character: str, state: str) -> str | None:
        return resolve_audio_path(character, state, manifest, assets_dir)

    return resolve
