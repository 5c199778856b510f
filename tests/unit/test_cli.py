"""Unit tests for the plugin-updater CLI (CliRunner, no network)."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

from plugin_updater.cli.main import cli
from plugin_updater.core.constants import LAST_CHECK_OPTION, RELEASE_CACHE_KEY, TOKEN_OPTION
from plugin_updater.core.store.kv import SqliteStore
from plugin_updater.core.update.cache import ReleaseCache
from plugin_updater.core.update.models import ReleaseRecord


@pytest.fixture()
def workspace(tmp_path: Path) -> tuple[Path, Path]:
    db = tmp_path / "options.db"
    cfg = tmp_path / "config.toml"
    cfg.write_text(f'[store]\npath = "{db.as_posix()}"\n')
    return cfg, db


def _seed_release(db: Path, version: str = "1.1.0") -> None:
    with SqliteStore(db) as store:
        ReleaseCache(store).put(
            RELEASE_CACHE_KEY,
            ReleaseRecord(
                version=version,
                source_url=f"https://example.com/releases/v{version}",
                download_url="https://example.com/rank-math-api-manager.zip",
                published_at="2026-09-30T12:00:00Z",
                description="Fixes\n<script>x</script>",
            ),
        )


def _close_gate(db: Path) -> None:
    with SqliteStore(db) as store:
        store.set(LAST_CHECK_OPTION, time.time())


def _run(cfg: Path, *args: str):
    return CliRunner().invoke(cli, ["--config", str(cfg), *args], obj={})


class TestCheck:
    def test_update_available_json(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _seed_release(db)
        result = _run(cfg, "check", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["current_version"] == "1.0.8"
        assert data["update_available"] is True
        assert data["release"]["version"] == "1.1.0"

    def test_current_option(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _seed_release(db)
        result = _run(cfg, "check", "--current", "1.1.0", "--json")
        data = json.loads(result.output)
        assert data["update_available"] is False
        assert "release" not in data

    def test_exit_code_flag(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _seed_release(db)
        result = _run(cfg, "check", "--exit-code")
        assert result.exit_code == 10
        assert "Update available" in result.output

    def test_unavailable_reports_up_to_date(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _close_gate(db)
        result = _run(cfg, "check", "--exit-code")
        assert result.exit_code == 0
        assert "Up to date" in result.output

    def test_missing_config_file(self, tmp_path: Path) -> None:
        result = _run(tmp_path / "absent.toml", "check")
        assert result.exit_code == 2

    def test_invalid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.toml"
        cfg.write_text("[update]\ncache_ttl_seconds = 5\n")
        result = _run(cfg, "check")
        assert result.exit_code == 2


class TestInfo:
    def test_json_details(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _seed_release(db)
        result = _run(cfg, "info", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["version"] == "1.1.0"
        assert data["changelog"] == "Fixes<br />\n"

    def test_text_details(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _seed_release(db)
        result = _run(cfg, "info")
        assert result.exit_code == 0
        assert "Version:    1.1.0" in result.output
        assert "Changelog:" in result.output

    def test_unavailable(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _close_gate(db)
        result = _run(cfg, "info", "--json")
        assert result.exit_code == 4
        assert result.output.strip() == "null"


class TestCache:
    def test_clear(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _seed_release(db)
        _close_gate(db)
        result = _run(cfg, "cache", "clear")
        assert result.exit_code == 0
        with SqliteStore(db) as store:
            assert store.get(RELEASE_CACHE_KEY) is None
            assert store.get(LAST_CHECK_OPTION) is None

    def test_show_empty(self, workspace: tuple[Path, Path]) -> None:
        cfg, _ = workspace
        result = _run(cfg, "cache", "show")
        assert result.exit_code == 0
        assert "No cached release." in result.output
        assert "Remote check allowed now" in result.output

    def test_show_entry(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        _seed_release(db)
        _close_gate(db)
        result = _run(cfg, "cache", "show")
        assert "Cached version: 1.1.0" in result.output
        assert "Next remote check allowed in" in result.output


class TestToken:
    def test_set_and_clear(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        assert _run(cfg, "token", "set", "ghp_cli").exit_code == 0
        with SqliteStore(db) as store:
            assert store.get(TOKEN_OPTION) == "ghp_cli"

        with patch("plugin_updater.core.keyring_store.forget_token") as forget:
            assert _run(cfg, "token", "clear").exit_code == 0
        forget.assert_called_once_with()
        with SqliteStore(db) as store:
            assert store.get(TOKEN_OPTION) is None

    def test_set_with_keyring_stores_placeholder(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        with (
            patch(
                "plugin_updater.core.keyring_store.is_keyring_available", return_value=True
            ),
            patch(
                "plugin_updater.core.keyring_store.store_token",
                return_value="keyring:plugin-updater:github_token",
            ) as store_token,
        ):
            assert _run(cfg, "token", "set", "--keyring", " ghp_kc ").exit_code == 0
        store_token.assert_called_once_with("ghp_kc")
        with SqliteStore(db) as store:
            assert store.get(TOKEN_OPTION) == "keyring:plugin-updater:github_token"

    def test_set_with_keyring_without_backend(self, workspace: tuple[Path, Path]) -> None:
        cfg, db = workspace
        with patch(
            "plugin_updater.core.keyring_store.is_keyring_available", return_value=False
        ):
            assert _run(cfg, "token", "set", "--keyring", "ghp_kc").exit_code == 1
        with SqliteStore(db) as store:
            assert store.get(TOKEN_OPTION) is None

    def test_blank_token_rejected(self, workspace: tuple[Path, Path]) -> None:
        cfg, _ = workspace
        assert _run(cfg, "token", "set", "  ").exit_code == 1


class TestVersion:
    def test_version_json(self) -> None:
        result = CliRunner().invoke(cli, ["version", "--json"], obj={})
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["plugin_updater"] == "1.0.8"

    def test_version_flag(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert "plugin-updater 1.0.8" in result.output


class TestLoggingFromConfig:
    def setup_method(self) -> None:
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    def teardown_method(self) -> None:
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    @staticmethod
    def _renderers() -> list[object]:
        return [
            processor
            for handler in logging.getLogger().handlers
            if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
            for processor in handler.formatter.processors
        ]

    def _config(self, tmp_path: Path, logging_section: str) -> tuple[Path, Path]:
        db = tmp_path / "options.db"
        cfg = tmp_path / "config.toml"
        cfg.write_text(f'[store]\npath = "{db.as_posix()}"\n\n[logging]\n{logging_section}')
        return cfg, db

    def test_json_format_from_config(self, tmp_path: Path) -> None:
        cfg, db = self._config(tmp_path, 'format = "json"\n')
        _close_gate(db)
        result = _run(cfg, "check")
        assert result.exit_code == 0
        assert any(isinstance(p, structlog.processors.JSONRenderer) for p in self._renderers())
        assert logging.getLogger().level == logging.WARNING

    def test_level_from_config(self, tmp_path: Path) -> None:
        cfg, db = self._config(tmp_path, 'level = "error"\n')
        _close_gate(db)
        assert _run(cfg, "check").exit_code == 0
        assert logging.getLogger().level == logging.ERROR

    def test_flags_override_config(self, tmp_path: Path) -> None:
        cfg, db = self._config(tmp_path, 'format = "json"\nlevel = "error"\n')
        _close_gate(db)
        result = CliRunner().invoke(
            cli, ["--config", str(cfg), "--log-level", "WARNING", "check"], obj={}
        )
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.WARNING
        assert not any(
            isinstance(p, structlog.processors.JSONRenderer) for p in self._renderers()
        )
