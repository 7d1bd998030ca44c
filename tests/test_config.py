"""Configuration: defaults, environment overrides, YAML, validation."""

import pytest
from pydantic import ValidationError

from icebreaker.config import Config


def test_defaults():
    """Defaults match the documented tuning."""
    config = Config.from_defaults()
    assert config.int_bonus_per_point == 3
    assert config.skill_bonus_per_rank == 15
    assert config.detection_base_chance == 20
    assert config.alert_duration_seconds == 3600
    assert config.max_concurrent_hacks == 1
    assert config.seed is None


def test_env_overrides(monkeypatch):
    """ICEBREAKER_<FIELD> variables override defaults and are coerced."""
    monkeypatch.setenv("ICEBREAKER_SKILL_BONUS_PER_RANK", "20")
    monkeypatch.setenv("ICEBREAKER_SEED", "7")
    config = Config.from_defaults()
    assert config.skill_bonus_per_rank == 20
    assert config.seed == 7


def test_invalid_values_rejected(monkeypatch):
    """Out-of-range and unknown settings fail at construction."""
    with pytest.raises(ValidationError):
        Config(detection_base_chance=150)
    with pytest.raises(ValidationError):
        Config(max_concurrent_hacks=0)
    with pytest.raises(ValidationError):
        Config(detection_chance=10)
    monkeypatch.setenv("ICEBREAKER_EVENT_LOG_SIZE", "lots")
    with pytest.raises(ValidationError):
        Config.from_defaults()


def test_from_yaml(tmp_path):
    """YAML files load through the same validation."""
    pytest.importorskip("yaml")
    path = tmp_path / "icebreaker.yaml"
    path.write_text("alert_duration_seconds: 60\nseed: 3\n")
    config = Config.from_yaml(path)
    assert config.alert_duration_seconds == 60
    assert config.seed == 3
    assert config.int_bonus_per_point == 3
