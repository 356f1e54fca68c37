"""Output directory management and JSON artifacts."""

import json
import os
import re

from fsl_previewer.constants import OUTPUT_DIR
from fsl_previewer.models import TimingConfig


def slug_from_path(script_path: str) -> str:
    """Convert a script filename to an output directory slug.

    "First Life.episode" → "first_life"
    "/path/to/rainbow-cafe.fsl" → "rainbow_cafe"
    """
    basename = os.path.splitext(os.path.basename(script_path))[0]
    slug = re.sub(r"[^a-zA-Z0-9]+", "_", basename).strip("_").lower()
    return slug


def init_output_dir(script_path: str, output_base: str = OUTPUT_DIR) -> str:
    """Create output/<slug>/ and return its path."""
    project_dir = os.path.join(output_base, slug_from_path(script_path))
    os.makedirs(project_dir, exist_ok=True)
    return project_dir


def write_artifact(project_dir: str, filename: str, data: dict) -> str:
    """Write JSON artifact to project_dir/filename.

    Returns path to the written file.
    """
    path = os.path.join(project_dir, filename)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return path


def load_artifact(project_dir: str, filename: str) -> dict | None:
    """Read JSON artifact. Returns None if file doesn't exist."""
    path = os.path.join(project_dir, filename)
    if not os.path.exists(path):
        return None
    with open(path) as f:
        return json.load(f)


def load_config(config_path: str | None) -> TimingConfig:
    """Load timing overrides from a JSON file, or defaults when no path is given."""
    if not config_path:
        return TimingConfig()
    if not os.path.exists(config_path):
        raise FileNotFoundError(config_path)
    data = load_artifact(os.path.dirname(config_path) or ".", os.path.basename(config_path))
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object: {config_path}")
    return TimingConfig.from_dict(data)
