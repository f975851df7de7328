"""Tests for the chuk-terrain command-line tools."""

import json
import os

import pytest
from unittest.mock import patch

from chuk_mcp_terrain.cli import build_parser, main
from chuk_mcp_terrain.core.atlas import Atlas
from chuk_mcp_terrain.core.map_folder import MapFolder


@pytest.fixture(autouse=True)
def no_env_map_dir():
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestParser:
    def test_index_defaults(self):
        args = build_parser().parse_args(["index", "/out"])
        assert args.outdir == "/out"
        assert args.archive == ""

    def test_lookup_default_resolution(self):
        args = build_parser().parse_args(["lookup", "N5E5"])
        assert args.resolution == 10.0

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestIndex:
    def test_index_root(self, map_root, tmp_path_factory, capsys):
        outdir = tmp_path_factory.mktemp("out")
        assert main(["--map-dir", str(map_root), "index", str(outdir)]) == 0

        data = json.loads((outdir / "atlas.json").read_text())
        assert [r["fname"] for r in data] == ["ramp.tif"]
        assert "Wrote 1 tiles" in capsys.readouterr().out

    def test_index_archive(self, utm_map_root, tmp_path_factory):
        outdir = tmp_path_factory.mktemp("out")
        (utm_map_root / "tiles").rename(utm_map_root / "maps.zip.dir")

        with (
            patch.object(MapFolder, "mount", return_value="maps.zip.dir"),
            patch.object(MapFolder, "close_all") as close_all,
        ):
            code = main(["--map-dir", str(utm_map_root), "index", str(outdir), "maps.zip"])

        assert code == 0
        data = json.loads((outdir / "maps.zip.atlas.json").read_text())
        assert len(data) == 2
        close_all.assert_called_once()

    def test_index_nested_archive(self, utm_map_root, tmp_path_factory):
        outdir = tmp_path_factory.mktemp("out")
        (utm_map_root / "sub").mkdir()
        (utm_map_root / "tiles").rename(utm_map_root / "sub" / "maps.zip.dir")

        with (
            patch.object(MapFolder, "mount", return_value="sub/maps.zip.dir"),
            patch.object(MapFolder, "close_all"),
        ):
            code = main(["--map-dir", str(utm_map_root), "index", str(outdir), "sub/maps.zip"])

        assert code == 0
        assert len(json.loads((outdir / "sub_maps.zip.atlas.json").read_text())) == 2

    def test_map_dir_from_environment(self, map_root, tmp_path_factory):
        outdir = tmp_path_factory.mktemp("out")
        with patch.dict(os.environ, {"TERRAIN_MAP_DIR": str(map_root)}):
            assert main(["index", str(outdir)]) == 0
        assert (outdir / "atlas.json").exists()

    def test_no_map_dir(self, tmp_path, capsys):
        assert main(["index", str(tmp_path)]) == 1
        assert "Map directory is not configured" in capsys.readouterr().err


class TestLookup:
    def test_lookup(self, map_root, capsys):
        Atlas.from_directory(MapFolder(map_root)).write(map_root / "atlas.json")
        code = main(["--map-dir", str(map_root), "lookup", "N5E5", "--resolution", "1"])

        assert code == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["Coordinate is N5E5", "Map: ramp.tif", "Height: 55.0"]

    def test_lookup_uncovered(self, map_root, capsys):
        Atlas.from_directory(MapFolder(map_root)).write(map_root / "atlas.json")
        code = main(["--map-dir", str(map_root), "lookup", "N7000000E500000", "--resolution", "1"])
        assert code == 1
        assert "No tile for coordinate" in capsys.readouterr().err

    def test_invalid_coordinate(self, map_root, capsys):
        assert main(["--map-dir", str(map_root), "lookup", "nowhere"]) == 1
        assert "Invalid coordinate nowhere" in capsys.readouterr().err


class TestTags:
    def test_dumps_tags(self, map_root, capsys):
        assert main(["tags", str(map_root / "ramp.tif")]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert "256 10" in lines
        assert "257 10" in lines
        assert any(line.startswith("33550 ") for line in lines)

    def test_not_a_tiff(self, tmp_path, capsys):
        path = tmp_path / "junk.tif"
        path.write_bytes(b"junk")
        assert main(["tags", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err
