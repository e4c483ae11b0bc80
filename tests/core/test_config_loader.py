import json
import os
from pathlib import Path

import pytest

from src.attendease.core.config_loader import (
    DEFAULT_SUBJECTS,
    clear_config_cache,
    get_agent_id,
    get_agent_service_config,
    get_alert_threshold,
    get_scheduler_config,
    get_subjects,
    load_config,
    resolve_config_path,
)


def _write_json(path: Path, payload: dict) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_resolve_config_path_uses_env_var(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    config_path = tmp_path / "custom.json"
    _write_json(config_path, {"ok": True})
    monkeypatch.setenv("ATTENDEASE_CONFIG_PATH", str(config_path))

    assert resolve_config_path() == config_path.resolve()


def test_explicit_path_beats_env_var(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ATTENDEASE_CONFIG_PATH", str(tmp_path / "env.json"))
    explicit = tmp_path / "explicit.json"
    assert resolve_config_path(explicit) == explicit.resolve()


def test_load_config_reads_and_caches(tmp_path: Path):
    clear_config_cache()
    config_path = tmp_path / "config.json"
    _write_json(config_path, {"subjects": ["OS"]})

    first = load_config(config_path=config_path)
    second = load_config(config_path=config_path)
    assert first == {"subjects": ["OS"]}
    assert first is second


def test_load_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(config_path=tmp_path / "nope.json", use_cache=False)


def test_load_config_invalid_json_raises_value_error(tmp_path: Path):
    config_path = tmp_path / "config.json"
    config_path.write_text("{ invalid", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON in config file"):
        load_config(config_path=config_path, use_cache=False)


def test_load_config_non_object_root_raises(tmp_path: Path):
    config_path = tmp_path / "config.json"
    config_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="must be a JSON object"):
        load_config(config_path=config_path, use_cache=False)


def test_agent_ids_resolve_by_role():
    config = {"agents": {"attendance_report": " rep_1 ", "student_profile": ""}}

    assert get_agent_id("attendance_report", config) == "rep_1"
    with pytest.raises(ValueError, match="not defined"):
        get_agent_id("student_profile", config)
    with pytest.raises(ValueError, match="Unknown agent role"):
        get_agent_id("billing", config)
    with pytest.raises(ValueError, match="agents must be"):
        get_agent_id("attendance_alert", {})


def test_service_and_scheduler_blocks():
    config = {
        "agent_service": {"base_url": "http://agents.local"},
        "scheduler": {"base_url": "http://sched.local", "logs_limit": 0},
    }
    assert get_agent_service_config(config)["base_url"] == "http://agents.local"
    assert get_scheduler_config(config)["logs_limit"] == 5

    with pytest.raises(ValueError):
        get_scheduler_config({})


def test_threshold_and_subject_defaults():
    assert get_alert_threshold({}) == 75.0
    assert get_alert_threshold({"alerts": {"threshold_percentage": 80}}) == 80.0
    assert get_alert_threshold({"alerts": {"threshold_percentage": 150}}) == 75.0
    assert get_subjects({}) == list(DEFAULT_SUBJECTS)
    assert get_subjects({"subjects": ["DBMS", " ", 3]}) == ["DBMS"]


def test_relative_path_resolves_from_project_dir(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ATTENDEASE_CONFIG_PATH", "config/custom.json")
    project_dir = Path(__file__).resolve().parents[2]

    assert resolve_config_path() == (project_dir / "config" / "custom.json").resolve()


def test_load_config_rereads_after_mtime_change(tmp_path: Path):
    config_path = tmp_path / "config.json"
    _write_json(config_path, {"subjects": ["OS"]})
    assert load_config(config_path=config_path) == {"subjects": ["OS"]}

    _write_json(config_path, {"subjects": ["DBMS"]})
    stat = config_path.stat()
    os.utime(config_path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

    assert load_config(config_path=config_path) == {"subjects": ["DBMS"]}
