"""Export a rendered preview as MP3 with a provenance manifest."""

import json
import os
from datetime import datetime, timezone

from pydub import AudioSegment

from fsl_previewer.constants import OUTPUT_BITRATE, VERSION
from fsl_previewer.models import Timeline


def export_preview(
    rendered: AudioSegment,
    project_dir: str,
    slug: str,
    timeline: Timeline,
    source: str = "",
) -> str:
    """Write the rendered mix and its manifest.

    Creates:
      - <project_dir>/<slug>.mp3
      - <project_dir>/output.json

    Returns path to the MP3 file.
    """
    os.makedirs(project_dir, exist_ok=True)
    output_path = os.path.join(project_dir, f"{slug}.mp3")

    rendered.export(
        output_path,
        format="mp3",
        bitrate=OUTPUT_BITRATE,
        tags={"title": slug},
    )

    entries = timeline.events
    characters = sorted({e.event.character for e in entries if e.type == "text"})
    manifest = {
        "project": slug,
        "source": source,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "previewer_version": VERSION,
        "seed": timeline.seed,
        "characters": characters,
        "stats": {
            "events": len(entries),
            "lines": sum(1 for e in entries if e.type == "text"),
            "captions_only": sum(1 for e in entries if e.type == "text" and e.audio_path is None),
            "duration_seconds": round(timeline.total_duration / 1000, 1),
        },
    }

    manifest_path = os.path.join(project_dir, "output.json")
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)

    return output_path
