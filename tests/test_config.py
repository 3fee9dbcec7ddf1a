"""Tests for configuration loading, environment overrides and validation."""

import json
from pathlib import Path

import pytest

from modlist.config import apply_env_overrides, build_config, load_config
from modlist.exceptions import ConfigError, ConfigParseError, ConfigValidationError
from modlist.models import DatabaseConfig, ModListConfig


class TestLoadConfig:
    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "modlist.toml"
        path.write_text('[server]\nport = 8080\n\n[database]\nurl = "mysql://u:p@db/mods"\n')
        assert load_config(str(path)) == {
            "server": {"port": 8080},
            "database": {"url": "mysql://u:p@db/mods"},
        }

    def test_json_and_yaml(self, tmp_path: Path) -> None:
        json_path = tmp_path / "modlist.json"
        json_path.write_text(json.dumps({"debug": True}))
        assert load_config(str(json_path)) == {"debug": True}

        yaml_path = tmp_path / "modlist.yml"
        yaml_path.write_text("pagination:\n  max_limit: 50\n")
        assert load_config(str(yaml_path)) == {"pagination": {"max_limit": 50}}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "nope.toml"))

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "modlist.ini"
        path.write_text("[server]")
        with pytest.raises(ConfigParseError):
            load_config(str(path))

    def test_broken_file(self, tmp_path: Path) -> None:
        path = tmp_path / "modlist.json"
        path.write_text("{not json")
        with pytest.raises(ConfigParseError):
            load_config(str(path))


class TestBuildConfig:
    def test_defaults(self) -> None:
        config = build_config(environ={})
        assert config.server.port == 3000
        assert config.pagination.default_limit == 10
        assert config.pagination.max_limit == 100
        assert config.database.async_url == "sqlite+aiosqlite:///modlist.db"

    def test_environment_wins_over_file(self, tmp_path: Path) -> None:
        path = tmp_path / "modlist.toml"
        path.write_text("[server]\nport = 8080\nhost = \"127.0.0.1\"\n")
        config = build_config(
            str(path),
            environ={"PORT": "9000", "DATABASE_URL": "mysql://u:p@db/mods", "MODLIST_DEBUG": "1"},
        )
        assert config.server.port == 9000
        assert config.server.host == "127.0.0.1"
        assert config.database.async_url == "mysql+aiomysql://u:p@db/mods"
        assert config.debug is True

    def test_overrides_do_not_mutate_input(self) -> None:
        data = {"server": {"port": 1}}
        apply_env_overrides(data, {"PORT": "2"})
        assert data == {"server": {"port": 1}}

    @pytest.mark.parametrize(
        "data",
        [
            {"server": {"port": 70000}},
            {"server": {"port": "abc"}},
            {"pagination": {"default_limit": 200, "max_limit": 100}},
            {"pagination": {"max_limit": 0}},
            {"database": {"pool_size": 0}},
        ],
    )
    def test_invalid_values(self, data: dict) -> None:
        with pytest.raises(ConfigValidationError):
            ModListConfig.from_dict(data)


def test_async_url_rewrites() -> None:
    assert DatabaseConfig(url="sqlite:///x.db").async_url == "sqlite+aiosqlite:///x.db"
    assert DatabaseConfig(url="postgresql+asyncpg://h/db").async_url == "postgresql+asyncpg://h/db"
    assert DatabaseConfig(url="mysql://h/db").is_sqlite is False
