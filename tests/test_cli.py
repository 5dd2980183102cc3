"""
Tests for the wktshapes command line.
"""

import io
import json

import pytest

from wktshapes.__main__ import main


def run(capsys, *argv):
    code = main(["--log-level", "ERROR", *argv])
    out, err = capsys.readouterr()
    return code, out, err


class TestCheck:
    """Test the check command."""

    def test_ok(self, tmp_path, capsys):
        path = tmp_path / "ok.wkt"
        path.write_text("POINT (1 2)\nLINESTRING (0 0, 1 1)\n", encoding="utf-8")
        code, out, _ = run(capsys, "check", str(path))
        assert code == 0
        assert out.strip() == "OK: 2 geometries"

    def test_single_geometry(self, tmp_path, capsys):
        path = tmp_path / "one.wkt"
        path.write_text("POINT EMPTY", encoding="utf-8")
        code, out, _ = run(capsys, "check", str(path))
        assert code == 0
        assert out.strip() == "OK: 1 geometry"

    def test_error(self, tmp_path, capsys):
        path = tmp_path / "bad.wkt"
        path.write_text("POLYGON ((0 0, 1 0, 1 1", encoding="utf-8")
        code, out, err = run(capsys, "check", str(path))
        assert code == 1
        assert out == ""
        assert "error[E102]" in err
        assert "bad.wkt:1:" in err

    def test_missing_file(self, tmp_path, capsys):
        code, _, err = run(capsys, "check", str(tmp_path / "missing.wkt"))
        assert code == 1
        assert "File not found" in err

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("MULTIPOINT (1 2, 3 4)"))
        code, out, _ = run(capsys, "check", "-")
        assert code == 0
        assert "OK: 1 geometry" in out


class TestTree:
    """Test the tree command."""

    def test_outline(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(
            "GEOMETRYCOLLECTION Z (POINT (1 2 3), LINESTRING EMPTY)"))
        code, out, _ = run(capsys, "tree", "-")
        assert code == 0
        assert out.splitlines() == [
            "GEOMETRYCOLLECTION Z [2 members]",
            "  POINT Z (1.0, 2.0, 3.0)",
            "  LINESTRING Z EMPTY",
        ]


class TestShapes:
    """Test the shapes command."""

    def test_json(self, tmp_path, capsys):
        path = tmp_path / "shapes.wkt"
        path.write_text("MULTIPOINT (1 2, 3 4) POLYGON ((0 0, 1 0, 1 1, 0 0))",
                        encoding="utf-8")
        code, out, _ = run(capsys, "shapes", str(path), "--json")
        assert code == 0
        docs = json.loads(out)
        assert [d["type"] for d in docs] == ["PointMarker", "PointMarker", "FilledPolygon"]
        assert docs[0]["position"] == [1.0, 2.0]

    def test_text(self, tmp_path, capsys):
        path = tmp_path / "line.wkt"
        path.write_text("LINESTRING (0 0, 1 1)", encoding="utf-8")
        code, out, _ = run(capsys, "shapes", str(path))
        assert code == 0
        assert out.startswith("Polyline XY from LINESTRING")

    def test_config_file(self, tmp_path, capsys):
        config = tmp_path / "wktshapes.yaml"
        config.write_text("default_attributes:\n  line_color: red\n", encoding="utf-8")
        path = tmp_path / "pt.wkt"
        path.write_text("POINT (1 2)", encoding="utf-8")
        code, out, _ = run(capsys, "--config", str(config), "shapes", str(path), "--json")
        assert code == 0
        assert json.loads(out)[0]["type"] == "PointMarker"

    def test_parse_error(self, tmp_path, capsys):
        path = tmp_path / "bad.wkt"
        path.write_text("CIRCLE (1 2)", encoding="utf-8")
        code, _, err = run(capsys, "shapes", str(path))
        assert code == 1
        assert "E103" in err


class TestGlobalOptions:
    """Errors in --config and --log-level exit cleanly."""

    def test_missing_config(self, tmp_path, capsys):
        path = tmp_path / "pt.wkt"
        path.write_text("POINT (1 2)", encoding="utf-8")
        code, out, err = run(capsys, "--config", str(tmp_path / "nope.yaml"), "check", str(path))
        assert code == 1
        assert out == ""
        assert "Settings file not found" in err

    def test_invalid_config(self, tmp_path, capsys):
        config = tmp_path / "wktshapes.yaml"
        config.write_text("colour: red\n", encoding="utf-8")
        path = tmp_path / "pt.wkt"
        path.write_text("POINT (1 2)", encoding="utf-8")
        code, _, err = run(capsys, "--config", str(config), "check", str(path))
        assert code == 1
        assert "colour" in err

    def test_log_level_from_config_validated(self, tmp_path, capsys):
        config = tmp_path / "wktshapes.yaml"
        config.write_text("log_level: LOUD\n", encoding="utf-8")
        path = tmp_path / "pt.wkt"
        path.write_text("POINT (1 2)", encoding="utf-8")
        code = main(["--config", str(config), "check", str(path)])
        _, err = capsys.readouterr()
        assert code == 1
        assert "LOUD" in err

    def test_unknown_log_level_option(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-level", "LOUD", "check", "-"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_log_level_option_case_insensitive(self, tmp_path, capsys):
        path = tmp_path / "pt.wkt"
        path.write_text("POINT (1 2)", encoding="utf-8")
        assert main(["--log-level", "error", "check", str(path)]) == 0


def test_no_command(capsys):
    code, out, _ = run(capsys)
    assert code == 1
    assert "usage" in out.lower()
