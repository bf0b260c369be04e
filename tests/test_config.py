from __future__ import annotations

from pathlib import Path

import pytest

from app.config import (
    AppSettings,
    CSVIngestionSettings,
    DashboardRefreshSettings,
    ExternalHTTPSettings,
    StoreSettings,
    clear_settings_cache,
    collect_settings_problems,
    get_app_settings,
    get_dashboard_refresh_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


def _settings(tmp_path: Path, **overrides) -> AppSettings:
    values = {
        "store": StoreSettings(csv_path=tmp_path / "hmis_data.csv"),
        "ingestion": CSVIngestionSettings(),
        "refresh": DashboardRefreshSettings(),
        "http": ExternalHTTPSettings(),
    }
    values.update(overrides)
    return AppSettings(**values)


def test_defaults_have_no_problems(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DASHBOARD_REFRESH_SECONDS", raising=False)
    assert collect_settings_problems(_settings(tmp_path)) == []


def test_collects_every_problem(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DASHBOARD_REFRESH_SECONDS", "often")
    settings = _settings(
        tmp_path,
        store=StoreSettings(csv_path=tmp_path / "missing" / "hmis_data.csv"),
        refresh=DashboardRefreshSettings(summary_url="ftp://hmis.example/summary"),
        log_level="LOUD",
    )

    problems = collect_settings_problems(settings)

    assert len(problems) == 4
    assert any("DASHBOARD_REFRESH_SECONDS" in problem for problem in problems)
    assert any("HMIS_CSV_PATH" in problem for problem in problems)
    assert any("HMIS_SUMMARY_URL" in problem for problem in problems)
    assert any("LOG_LEVEL" in problem for problem in problems)


def test_refresh_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DASHBOARD_REFRESH_ENABLED", "off")
    monkeypatch.setenv("DASHBOARD_REFRESH_SECONDS", "0")
    monkeypatch.setenv("HMIS_SUMMARY_URL", "  ")

    settings = get_dashboard_refresh_settings()

    assert settings.enabled is False
    assert settings.interval_seconds == 1
    assert settings.summary_url is None


def test_app_settings_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HMIS_CSV_PATH", str(tmp_path / "store.csv"))
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.example, ,http://b.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_app_settings()

    assert settings.store.csv_path == tmp_path / "store.csv"
    assert settings.cors_allow_origins == ("http://a.example", "http://b.example")
    assert settings.log_level == "DEBUG"
