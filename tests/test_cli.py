"""Tests for CLI module."""

import json
import os
import shutil

import pytest

from fsl_previewer.cli import main

needs_ffmpeg = pytest.mark.skipif(shutil.which("ffmpeg") is None, reason="ffmpeg not installed")


def _write_episode(tmp_path, content, name="park_day.episode"):
    path = tmp_path / name
    path.write_text(content)
    return str(path)


def _run_timeline(tmp_path, episode, assets_dir, *extra):
    output = str(tmp_path / "output")
    main(["timeline", episode, "--assets", assets_dir, "--output", output, *extra])
    with open(os.path.join(output, "park_day", "timeline.json")) as f:
        return json.load(f)


def test_no_command_prints_help(capsys):
    """No subcommand shows usage."""
    main([])
    assert "usage" in capsys.readouterr().out


def test_parse_prints_json(tmp_path, capsys, sample_fsl):
    """parse dumps the Script as JSON."""
    main(["parse", _write_episode(tmp_path, sample_fsl)])
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 42
    assert [e["type"] for e in data["events"]] == ["location", "text", "text", "text"]


def test_parse_missing_file(tmp_path):
    """A missing script exits with an error."""
    with pytest.raises(SystemExit):
        main(["parse", str(tmp_path / "missing.episode")])


def test_parse_file_with_byte_order_mark(tmp_path, capsys):
    """A UTF-8 file saved with a BOM keeps its seed line."""
    path = tmp_path / "park_day.episode"
    path.write_text("seed: 42\nmario: Hi.\n", encoding="utf-8-sig")
    main(["parse", str(path)])
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 42
    assert len(data["events"]) == 1


def test_manifest_command(assets_dir, capsys):
    """manifest writes manifest.json into the assets folder."""
    main(["manifest", assets_dir])
    assert os.path.exists(os.path.join(assets_dir, "manifest.json"))
    assert "Manifest generated" in capsys.readouterr().out


def test_timeline_writes_artifacts(tmp_path, assets_dir, sample_fsl, capsys):
    """timeline writes script.json and timeline.json with audio windows."""
    data = _run_timeline(tmp_path, _write_episode(tmp_path, sample_fsl), assets_dir)
    project_dir = tmp_path / "output" / "park_day"
    assert (project_dir / "script.json").exists()

    assert data["seed"] == 42
    lines = [e for e in data["events"] if e["type"] == "text"]
    assert len(lines) == 3
    assert all("audioPath" in e for e in lines)
    # luigi has no sad audio, so the neutral take is used
    assert lines[2]["audioPath"].endswith(os.path.join("luigi", "states", "neutral", "audio", "take1.wav"))
    assert "Episode: park_day (seed 42)" in capsys.readouterr().out


def test_timeline_is_reproducible(tmp_path, assets_dir, sample_fsl):
    """Running twice gives identical timelines."""
    episode = _write_episode(tmp_path, sample_fsl)
    assert _run_timeline(tmp_path, episode, assets_dir) == _run_timeline(tmp_path, episode, assets_dir)


def test_timeline_config_override(tmp_path, assets_dir):
    """--config changes the timing."""
    config = tmp_path / "timing.json"
    config.write_text(json.dumps({"msPerWord": 1000}))
    episode = _write_episode(tmp_path, "mario: one two three\n")
    data = _run_timeline(tmp_path, episode, assets_dir, "--config", str(config))
    assert data["events"][0]["duration"] == 3000


def test_timeline_config_not_an_object(tmp_path, assets_dir, capsys):
    """A config file holding a JSON array exits with an error, not a traceback."""
    config = tmp_path / "timing.json"
    config.write_text("[1]")
    episode = _write_episode(tmp_path, "mario: Hi.\n")
    with pytest.raises(SystemExit):
        _run_timeline(tmp_path, episode, assets_dir, "--config", str(config))
    assert "Could not read config" in capsys.readouterr().err


def test_timeline_empty_script(tmp_path, assets_dir):
    """A script with no events is an error."""
    with pytest.raises(SystemExit):
        _run_timeline(tmp_path, _write_episode(tmp_path, "# nothing here\n"), assets_dir)


def test_timeline_load_failure(tmp_path, capsys, sample_fsl):
    """A manifest pointing at a missing clip aborts with an error."""
    assets = tmp_path / "assets"
    assets.mkdir()
    manifest = {"characters": {"mario": {"states": {"neutral": {"audio": ["gone.wav"]}}}}}
    (assets / "manifest.json").write_text(json.dumps(manifest))

    with pytest.raises(SystemExit):
        _run_timeline(tmp_path, _write_episode(tmp_path, sample_fsl), str(assets))
    assert "Failed to load audio" in capsys.readouterr().err
    assert not (tmp_path / "output" / "park_day" / "timeline.json").exists()


@needs_ffmpeg
def test_render_writes_mp3(tmp_path, assets_dir, sample_fsl):
    """render produces an MP3 and output.json."""
    output = str(tmp_path / "output")
    main(["render", _write_episode(tmp_path, sample_fsl), "--assets", assets_dir, "--output", output])
    project_dir = os.path.join(output, "park_day")
    assert os.path.exists(os.path.join(project_dir, "park_day.mp3"))
    assert os.path.exists(os.path.join(project_dir, "output.json"))
