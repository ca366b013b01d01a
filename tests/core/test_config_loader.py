import json
from pathlib import Path

import pytest

from src.taskrelay.core.config_loader import (
    DEFAULT_AGENT_ID,
    DEFAULT_AGENT_TIMEOUT_SEC,
    DEFAULT_KEYWORDS,
    DashboardSettings,
    clear_config_cache,
    get_agent_config,
    get_history_config,
    load_config,
    load_dashboard_settings,
    resolve_config_path,
)


def _write_json(path: Path, payload: dict) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_resolve_config_path_uses_env_var(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    config_path = tmp_path / "custom.json"
    _write_json(config_path, {"ok": True})
    monkeypatch.setenv("TASKRELAY_CONFIG_PATH", str(config_path))

    resolved = resolve_config_path()
    assert resolved == config_path.resolve()


def test_load_config_reads_json_file(tmp_path: Path):
    clear_config_cache()
    config_path = tmp_path / "config.json"
    payload = {"agent": {"agent_id": "abc"}}
    _write_json(config_path, payload)

    result = load_config(config_path=config_path, use_cache=False)
    assert result == payload


def test_load_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(config_path=tmp_path / "missing.json")


def test_load_config_invalid_json_raises_value_error(tmp_path: Path):
    clear_config_cache()
    config_path = tmp_path / "config.json"
    config_path.write_text("{ invalid", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON in config file"):
        load_config(config_path=config_path, use_cache=False)


def test_load_config_non_object_root_raises(tmp_path: Path):
    clear_config_cache()
    config_path = tmp_path / "config.json"
    config_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="JSON object"):
        load_config(config_path=config_path, use_cache=False)


def test_load_config_uses_cache_until_cleared(tmp_path: Path):
    clear_config_cache()
    config_path = tmp_path / "config.json"
    _write_json(config_path, {"history": {"max_records": 5}})
    first = load_config(config_path=config_path)
    second = load_config(config_path=config_path)
    assert first is second
    clear_config_cache()
    assert load_config(config_path=config_path) is not first


def test_section_getters_ignore_non_objects():
    config = {"agent": "nope", "history": {"max_records": 3}}
    assert get_agent_config(config) == {}
    assert get_history_config(config) == {"max_records": 3}


def test_dashboard_settings_defaults_for_empty_config():
    settings = load_dashboard_settings({})
    assert settings == DashboardSettings()
    assert settings.agent_id == DEFAULT_AGENT_ID
    assert settings.base_url is None
    assert settings.timeout_sec == DEFAULT_AGENT_TIMEOUT_SEC
    assert settings.keywords == DEFAULT_KEYWORDS
    assert settings.max_history_records is None
    assert settings.restore_live_on_clear is False


def test_dashboard_settings_reads_sections():
    settings = load_dashboard_settings(
        {
            "agent": {
                "agent_id": "agent_x",
                "base_url": "https://agent.example.com/run",
                "apikey": "KEY_123",
                "timeout_sec": 30,
                "keywords": ["urgent", " ", 4],
                "channel": "ops",
            },
            "history": {"max_records": 25},
            "selection": {"restore_live_on_clear": True},
            "logging": {"level": "debug"},
        }
    )
    assert settings.agent_id == "agent_x"
    assert settings.base_url == "https://agent.example.com/run"
    assert settings.apikey == "KEY_123"
    assert settings.timeout_sec == 30
    assert settings.keywords == ("urgent",)
    assert settings.channel == "ops"
    assert settings.max_history_records == 25
    assert settings.restore_live_on_clear is True
    assert settings.log_level == "DEBUG"


def test_dashboard_settings_invalid_values_fall_back():
    settings = load_dashboard_settings(
        {
            "agent": {"timeout_sec": -5, "keywords": "urgent", "agent_id": ""},
            "history": {"max_records": 0},
            "selection": {"restore_live_on_clear": "yes"},
        }
    )
    assert settings.timeout_sec == DEFAULT_AGENT_TIMEOUT_SEC
    assert settings.keywords == DEFAULT_KEYWORDS
    assert settings.agent_id == DEFAULT_AGENT_ID
    assert settings.max_history_records is None
    assert settings.restore_live_on_clear is False


def test_repo_config_file_is_valid():
    clear_config_cache()
    repo_config = Path(__file__).resolve().parents[2] / "config" / "config.json"
    settings = load_dashboard_settings(load_config(config_path=repo_config, use_cache=False))
    assert settings.agent_id == DEFAULT_AGENT_ID
