from __future__ import annotations

from pathlib import Path

import pytest

from conftest import map_text, pack_tiles
from content_tools.cli import main
from content_tools.config import ToolSettings


def test_rotate_tiles_reports_updated_count(tmp_path: Path, write_map, capsys: pytest.CaptureFixture[str]):
    write_map(map_text({5: "CMFloorCargoArrowUp"}, {"0,0": pack_tiles([(5, 0, 0, 0)])}), "maps/a.yml")
    write_map(map_text({0: "Space"}, {"0,0": pack_tiles([(0, 0, 0, 0)])}), "maps/b.yml")

    assert main(["rotate-tiles", str(tmp_path / "maps")]) == 0
    assert capsys.readouterr().out.strip() == "updated 1 map file(s)"


def test_zero_updates_is_success(tmp_path: Path, write_map, capsys: pytest.CaptureFixture[str]):
    path = write_map(map_text({0: "Space"}, {}))

    assert main(["rotate-tiles", str(path)]) == 0
    assert "updated 0 map file(s)" in capsys.readouterr().out


def test_missing_arguments_exit_one(capsys: pytest.CaptureFixture[str]):
    assert main(["rotate-tiles"]) == 1
    assert "usage: rotate-tiles" in capsys.readouterr().out
    assert main([]) == 1


def test_no_map_files_exit_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["rotate-tiles", str(tmp_path / "nothing-here")]) == 1
    assert capsys.readouterr().out.strip() == "no map files found"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CONTENT_TOOLS_FORMAT_VERSION", "8")
    monkeypatch.setenv("CONTENT_TOOLS_MAP_EXTENSION", "yaml")
    monkeypatch.setenv("CONTENT_TOOLS_LOG_LEVEL", "debug")

    settings = ToolSettings.from_env()

    assert settings == ToolSettings(format_version="8", map_extension=".yaml", log_level="DEBUG")


def test_map_extension_from_env(tmp_path: Path, write_map, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.setenv("CONTENT_TOOLS_MAP_EXTENSION", ".yaml")
    write_map(map_text({5: "CMFloorCargoArrowUp"}, {}), "maps/a.yaml")
    write_map(map_text({5: "CMFloorCargoArrowUp"}, {}), "maps/b.yml")

    assert main(["--verbose", "rotate-tiles", str(tmp_path / "maps")]) == 0
    assert "updated 1 map file(s)" in capsys.readouterr().out
