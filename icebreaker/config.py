"""Engine configuration and tunable constants."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Config(BaseModel):
    """Central configuration for an intrusion engine instance."""

    model_config = ConfigDict(frozen=False, extra="forbid")

    # Success chance modifiers
    int_bonus_per_point: int = Field(default=3, ge=0)
    skill_bonus_per_rank: int = Field(default=15, ge=0)

    # Detection and alerts
    detection_base_chance: int = Field(default=20, ge=0, le=100)
    alert_duration_seconds: int = Field(default=3600, ge=0)

    # Attempt pacing (cooldown is the caller's to enforce)
    max_concurrent_hacks: int = Field(default=1, ge=1)
    hack_cooldown_seconds: int = Field(default=0, ge=0)

    # Trace
    trace_decay_rate_per_minute: int = Field(default=10, ge=0)
    detection_trace_base: int = Field(default=10, ge=0)
    detection_trace_per_level: int = Field(default=5, ge=0)

    # Terminal actions
    alarm_disable_seconds: int = Field(default=300, ge=0)
    camera_disable_seconds: int = Field(default=300, ge=0)

    # Recording sink
    event_log_size: int = Field(default=500, ge=1)

    # Reproducibility
    seed: int | None = None

    @classmethod
    def from_defaults(cls) -> Config:
        """Create config with defaults, overridden by ICEBREAKER_ env vars."""
        overrides: dict = {}
        for field_name in cls.model_fields:
            env_key = f"ICEBREAKER_{field_name.upper()}"
            val = os.environ.get(env_key)
            if val is not None:
                overrides[field_name] = val
        # pydantic coerces the numeric strings
        return cls(**overrides)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load config from a YAML file (optional dependency)."""
        import yaml  # type: ignore[import-untyped]

        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)
