"""Tests for settings loading."""

from pathlib import Path

from vibe_progression.config import Settings, flatten_yaml_settings


class TestYamlFlattening:
    def test_sections_map_to_fields(self):
        data = {
            "server": {"host": "127.0.0.1", "port": 9000},
            "storage": {"db_path": "var/p.db", "timeout_seconds": 2.0},
            "progression": {"recommendation_count": 5},
        }
        assert flatten_yaml_settings(data) == {
            "host": "127.0.0.1",
            "port": 9000,
            "db_path": "var/p.db",
            "storage_timeout_seconds": 2.0,
            "recommendation_count": 5,
        }

    def test_missing_values_are_dropped(self):
        assert flatten_yaml_settings({"server": {"port": 1}}) == {"port": 1}


class TestSettings:
    def test_relative_db_path_resolves_under_project_root(self, tmp_path):
        settings = Settings(project_root=tmp_path, db_path=Path("data/progress.db"))
        assert settings.database_path == tmp_path / "data" / "progress.db"
        assert (tmp_path / "data").is_dir()

    def test_absolute_db_path_is_kept(self, tmp_path):
        settings = Settings(db_path=tmp_path / "x.db")
        assert settings.database_path == tmp_path / "x.db"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STORAGE_TIMEOUT_SECONDS", "2.5")
        assert Settings().storage_timeout_seconds == 2.5
