"""Tests for the command-line entry point."""

import logging

import pytest

from price_sniper.main import EXIT_BAD_CONFIG, EXIT_REGISTRY_UNAVAILABLE, main, parse_args


@pytest.fixture(autouse=True)
def isolated_run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("SNIPER_DATABASE_URL", "SNIPER_DATABASE_KEY", "SNIPER_PUSHGATEWAY_URL"):
        monkeypatch.delenv(name, raising=False)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_parse_args_defaults():
    args = parse_args([])
    assert args.target_id is None
    assert args.log_dir is None


def test_parse_args_target():
    args = parse_args(["--target-id", "12", "--log-dir", "/var/log/sniper"])
    assert args.target_id == 12
    assert args.log_dir == "/var/log/sniper"


def test_missing_database_url_exits_with_config_error(capsys):
    assert main([]) == EXIT_BAD_CONFIG
    assert "database_url" in capsys.readouterr().err


def test_unreachable_registry_exits_nonzero(tmp_path, monkeypatch):
    # Empty database file: the tracking_targets table does not exist
    monkeypatch.setenv("SNIPER_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")

    assert main(["--log-dir", str(tmp_path)]) == EXIT_REGISTRY_UNAVAILABLE
    assert (tmp_path / "logs" / "error.log").exists()

