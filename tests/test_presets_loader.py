"""
Tests for loading motion tables from JSON.
"""
import json

import pytest

from orrery import presets_loader
from orrery.data_models import MotionParameters
from orrery.presets_loader import list_motion_tables, load_motion_table, parse_motion_parameters

EARTH = {
    "orbit_rate": 1.14,
    "orbit_axis": [0, 1, 0],
    "spin_rate": 4.17,
    "spin_axis": [0, 1, 0],
    "orbit_radius": 3.5,
    "display_scale": 0.045,
}


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestParse:
    def test_entry(self):
        assert parse_motion_parameters(EARTH) == MotionParameters(
            1.14, (0.0, 1.0, 0.0), 4.17, (0.0, 1.0, 0.0), 3.5, 0.045)

    def test_defaults(self):
        params = parse_motion_parameters({"display_scale": 1.0})
        assert params.orbit_rate == 0.0
        assert params.orbit_axis == (0.0, 1.0, 0.0)


class TestLoadMotionTable:
    """Files become immutable tables; bad entries are skipped."""

    def test_standalone_table(self, tmp_path):
        path = _write(tmp_path / "mini.json", {"name": "Mini", "bodies": {"Earth": EARTH}})
        table = load_motion_table(path)
        assert len(table) == 1
        assert table.lookup("Earth").orbit_radius == 3.5
        assert table.lookup("Sun") is None

    def test_extends_builtin(self, tmp_path):
        moved = dict(EARTH, orbit_radius=4.0)
        path = _write(tmp_path / "ext.json", {"extends_builtin": True, "bodies": {"Earth": moved}})
        table = load_motion_table(path)
        assert len(table) == 10
        assert table.lookup("Earth").orbit_radius == 4.0
        assert table.lookup("Sun") is not None

    def test_bad_entries_skipped(self, tmp_path, caplog):
        path = _write(tmp_path / "bad.json", {"bodies": {
            "Earth": EARTH,
            "NoScale": {"orbit_rate": 1.0},
            "ZeroScale": dict(EARTH, display_scale=0.0),
            "ShortAxis": dict(EARTH, orbit_axis=[0, 1]),
        }})
        table = load_motion_table(path)
        assert list(table) == ["Earth"]
        for name in ("NoScale", "ZeroScale", "ShortAxis"):
            assert name in caplog.text

    def test_unreadable_file(self, tmp_path, caplog):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_motion_table(str(path)) is None
        assert load_motion_table(str(tmp_path / "missing.json")) is None
        assert "Could not read" in caplog.text

    def test_non_object_entry_skipped(self, tmp_path, caplog):
        path = _write(tmp_path / "scalar.json", {"bodies": {"Earth": EARTH, "Mars": 5, "Venus": [1, 2]}})
        table = load_motion_table(path)
        assert list(table) == ["Earth"]
        assert "Mars" in caplog.text
        assert "Venus" in caplog.text

    def test_bodies_list_loads_nothing(self, tmp_path, caplog):
        path = _write(tmp_path / "listed.json", {"extends_builtin": True, "bodies": [EARTH]})
        table = load_motion_table(path)
        assert len(table) == 10
        assert "'bodies' is list" in caplog.text

    def test_top_level_list_rejected(self, tmp_path, caplog):
        path = _write(tmp_path / "array.json", [{"bodies": {"Earth": EARTH}}])
        assert load_motion_table(path) is None
        assert "expected an object" in caplog.text

    def test_bare_name_uses_tables_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr(presets_loader, "TABLES_DIR", str(tmp_path))
        _write(tmp_path / "mini.json", {"bodies": {"Earth": EARTH}})
        assert load_motion_table("mini.json").lookup("Earth") is not None


class TestListMotionTables:
    def test_lists_json_files(self, tmp_path, monkeypatch):
        monkeypatch.setattr(presets_loader, "TABLES_DIR", str(tmp_path))
        _write(tmp_path / "b.json", {"name": "Named table", "bodies": {}})
        _write(tmp_path / "a.json", {"bodies": {}})
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
        assert list_motion_tables() == [("a.json", "a"), ("b.json", "Named table")]

    def test_top_level_list_falls_back_to_file_name(self, tmp_path, monkeypatch):
        monkeypatch.setattr(presets_loader, "TABLES_DIR", str(tmp_path))
        _write(tmp_path / "array.json", [1, 2, 3])
        assert list_motion_tables() == [("array.json", "array")]

    def test_missing_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr(presets_loader, "TABLES_DIR", str(tmp_path / "nope"))
        assert list_motion_tables() == []

    def test_shipped_tables_load(self):
        for fn, _ in list_motion_tables():
            table = load_motion_table(fn)
            assert table is not None
            assert "Earth" in table
