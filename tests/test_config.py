"""Tests for settings, logging and fail-fast startup."""
import importlib

import pytest

from smartshop.context import build_context
from smartshop.core.config import Settings
from smartshop.core.exceptions import ConfigurationError
from smartshop.main import create_app
from fastapi.testclient import TestClient

CREDENTIAL_VARS = ["REMOTE_STORE_URL", "REMOTE_STORE_KEY", "GEMINI_API_KEY"]


@pytest.fixture
def bare_env(monkeypatch):
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)


def test_reads_environment(monkeypatch, bare_env):
    monkeypatch.setenv("REMOTE_STORE_URL", "https://shop.supabase.co")
    monkeypatch.setenv("SYNC_MAX_RETRIES", "7")

    settings = Settings(_env_file=None)

    assert settings.remote_store_url == "https://shop.supabase.co"
    assert settings.sync_max_retries == 7


def test_missing_credentials_listed(bare_env):
    settings = Settings(_env_file=None, gemini_api_key="k")

    assert settings.missing_credentials() == ["REMOTE_STORE_URL", "REMOTE_STORE_KEY"]
    with pytest.raises(ConfigurationError) as exc_info:
        settings.ensure_credentials()
    assert exc_info.value.details["missing"] == ["REMOTE_STORE_URL", "REMOTE_STORE_KEY"]


def test_complete_credentials(settings):
    settings.ensure_credentials()
    assert settings.missing_credentials() == []


def test_build_context_fails_fast(bare_env, tmp_path):
    settings = Settings(_env_file=None, database_url=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")

    with pytest.raises(ConfigurationError):
        build_context(settings)


def test_app_refuses_to_start_without_credentials(bare_env, tmp_path):
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}",
        log_file=str(tmp_path / "app.log"),
    )
    app = create_app(settings)

    with pytest.raises(ConfigurationError):
        with TestClient(app):
            pass


@pytest.mark.parametrize("module", ["transactor", "inventory", "remote", "recognition", "sync", "repositories"])
def test_module_loggers_share_namespace(module):
    imported = importlib.import_module(f"smartshop.{module}")
    assert imported.logger.name == f"smartshop.{module}"
