"""
Tests for environment-driven configuration.
"""

from pathlib import Path

from api.app import build_store
from core.config import DEFAULT_SEED_PATH, load_config


class TestLoadConfig:

    def test_defaults(self, monkeypatch):
        for name in ('PORT', 'HOST', 'FLASK_ENV', 'LOG_LEVEL', 'SEED_DATA_PATH', 'CORS_ORIGINS'):
            monkeypatch.delenv(name, raising=False)

        config = load_config()

        assert config.port == 5000
        assert config.host == '0.0.0.0'
        assert config.seed_data_path == DEFAULT_SEED_PATH
        assert config.is_production is False

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv('PORT', '8080')
        monkeypatch.setenv('FLASK_ENV', 'production')
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        monkeypatch.setenv('SEED_DATA_PATH', '/tmp/seed.yaml')

        config = load_config()

        assert config.port == 8080
        assert config.is_production is True
        assert config.log_level == 'DEBUG'
        assert config.seed_data_path == Path('/tmp/seed.yaml')

    def test_empty_seed_path_disables_seeding(self, monkeypatch):
        monkeypatch.setenv('SEED_DATA_PATH', '')

        config = load_config()

        assert config.seed_data_path is None
        assert len(build_store(config)) == 0

    def test_default_seed_builds_store(self, monkeypatch):
        monkeypatch.delenv('SEED_DATA_PATH', raising=False)

        store = build_store(load_config())

        assert len(store) == 4
        assert store.stats().total_insights == 5
