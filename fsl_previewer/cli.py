"""CLI interface with subcommand routing."""

import argparse
import json
import logging
import os
import shutil
import sys

from fsl_previewer.constants import ASSETS_DIR, OUTPUT_DIR, VERSION
from fsl_previewer.parser import parse_script
from fsl_previewer.manifest import load_manifest, make_resolver, write_manifest
from fsl_previewer.audio import AudioLibrary, AudioLoadError
from fsl_previewer.timeline import generate_timeline
from fsl_previewer.assembly import render_timeline
from fsl_previewer.exporter import export_preview
from fsl_previewer.artifacts import (
    init_output_dir,
    slug_from_path,
    write_artifact,
    load_config,
)


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not shutil.which("ffmpeg"):
        print("Error: ffmpeg is required but not found.", file=sys.stderr)
        print("Install with: brew install ffmpeg", file=sys.stderr)
        raise SystemExit(1)


def _read_script(file_path: str) -> str:
    if not os.path.exists(file_path):
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    with open(file_path, encoding="utf-8-sig") as f:
        return f.read()


def _build_timeline(args):
    """Parse, resolve, load and time a script. Returns (script, timeline, library)."""
    text = _read_script(args.file)
    script = parse_script(text)
    if not script.events:
        print(f"Error: No events in script: {args.file}", file=sys.stderr)
        raise SystemExit(1)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: Could not read config: {e}", file=sys.stderr)
        raise SystemExit(1)

    manifest = load_manifest(args.assets)
    library = AudioLibrary.from_config(config)

    try:
        timeline = generate_timeline(
            script,
            make_resolver(manifest, args.assets),
            library,
            config=config,
        )
    except AudioLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    return script, timeline, library


def _print_summary(slug: str, timeline) -> None:
    lines = [e for e in timeline.events if e.type == "text"]
    captions = sum(1 for e in lines if e.audio_path is None)
    seconds = timeline.total_duration / 1000
    print(f"Episode: {slug} (seed {timeline.seed})")
    print(f"Events: {len(timeline.events)} ({len(lines)} lines, {captions} caption-only)")
    print(f"Duration: {int(seconds // 60)}:{int(seconds % 60):02d}")


def cmd_parse(args):
    """Print the parsed script as JSON."""
    script = parse_script(_read_script(args.file))
    print(json.dumps(script.to_dict(), indent=2))


def cmd_manifest(args):
    """Scan an assets folder and write manifest.json."""
    if not os.path.isdir(args.assets_dir):
        print(f"Error: Assets folder not found: {args.assets_dir}", file=sys.stderr)
        raise SystemExit(1)
    path = write_manifest(args.assets_dir)
    print(f"Manifest generated: {path}")


def cmd_timeline(args):
    """Generate script.json and timeline.json for an episode."""
    script, timeline, _ = _build_timeline(args)
    slug = slug_from_path(args.file)
    project_dir = init_output_dir(args.file, output_base=args.output)

    write_artifact(project_dir, "script.json", script.to_dict())
    path = write_artifact(project_dir, "timeline.json", timeline.to_dict())

    _print_summary(slug, timeline)
    print(f"Timeline written to {path}")


def cmd_render(args):
    """Generate the timeline and render it to an MP3 preview."""
    _check_ffmpeg()

    script, timeline, library = _build_timeline(args)
    slug = slug_from_path(args.file)
    project_dir = init_output_dir(args.file, output_base=args.output)

    write_artifact(project_dir, "script.json", script.to_dict())
    write_artifact(project_dir, "timeline.json", timeline.to_dict())

    rendered = render_timeline(timeline, library)
    output_path = export_preview(
        rendered, project_dir, slug, timeline,
        source=os.path.abspath(args.file),
    )

    _print_summary(slug, timeline)
    print(f"Done: {output_path}")


def _add_episode_args(sub):
    sub.add_argument("file", help="Path to the FSL script")
    sub.add_argument("--assets", default=ASSETS_DIR, help="Assets folder (default: %(default)s)")
    sub.add_argument("--config", help="JSON file with timing overrides")
    sub.add_argument("--output", default=OUTPUT_DIR, help="Output folder (default: %(default)s)")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="fsl-previewer",
        description="FSL Previewer: turn dialogue scripts into timed voice-clip timelines",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse
    parse_parser = subparsers.add_parser("parse", help="Print the parsed script as JSON")
    parse_parser.add_argument("file", help="Path to the FSL script")
    parse_parser.set_defaults(func=cmd_parse)

    # manifest
    manifest_parser = subparsers.add_parser("manifest", help="Scan assets and write manifest.json")
    manifest_parser.add_argument("assets_dir", nargs="?", default=ASSETS_DIR, help="Assets folder")
    manifest_parser.set_defaults(func=cmd_manifest)

    # timeline
    timeline_parser = subparsers.add_parser("timeline", help="Generate the episode timeline")
    _add_episode_args(timeline_parser)
    timeline_parser.set_defaults(func=cmd_timeline)

    # render
    render_parser = subparsers.add_parser("render", help="Render the episode to an MP3 preview")
    _add_episode_args(render_parser)
    render_parser.set_defaults(func=cmd_render)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)
