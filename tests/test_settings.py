"""
Tests for default settings.
"""

from pathlib import PurePosixPath

from sqlalchemy.engine import make_url

from config.settings import Settings


class TestDefaultSettings:
    def test_runtime_data_stays_out_of_source_packages(self, monkeypatch):
        for name in ("DATABASE_URL", "DATA_DIR"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        db_path = PurePosixPath(make_url(settings.database_url).database)
        data_dir = PurePosixPath(settings.data_dir)

        assert data_dir.parts[-1] == "data"
        assert db_path.parent == data_dir
        for package in ("api", "auth", "config", "database", "scripts"):
            assert package not in data_dir.parts
