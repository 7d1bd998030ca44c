"""Typed snapshot schema for the engine's mutable state."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from icebreaker.config import Config
from icebreaker.hacking.arsenal import OwnedProgram
from icebreaker.network.models import HackAttempt, Network, Terminal
from icebreaker.security.alerts import SecurityAlert
from icebreaker.security.trace import TRACE_MAX, TRACE_MIN

SNAPSHOT_VERSION = 1


class EngineSnapshot(BaseModel):
    """Everything needed to rebuild an engine, wholesale."""

    model_config = ConfigDict(frozen=False, extra="forbid")

    version: int = SNAPSHOT_VERSION
    config: Config = Field(default_factory=Config)
    terminals: list[Terminal] = Field(default_factory=list)
    networks: list[Network] = Field(default_factory=list)
    owned_programs: list[OwnedProgram] = Field(default_factory=list)
    trace_level: int = Field(default=0, ge=TRACE_MIN, le=TRACE_MAX)
    history: list[HackAttempt] = Field(default_factory=list)
    alerts: list[SecurityAlert] = Field(default_factory=list)

    def problems(self, known_programs: set[str] | None = None) -> list[str]:
        """Cross-entity consistency checks pydantic cannot express per field."""
        issues: list[str] = []
        if self.version != SNAPSHOT_VERSION:
            issues.append(f"unsupported snapshot version {self.version}")

        terminal_ids = [t.id for t in self.terminals]
        if len(set(terminal_ids)) != len(terminal_ids):
            issues.append("duplicate terminal ids")
        network_ids = [n.id for n in self.networks]
        if len(set(network_ids)) != len(network_ids):
            issues.append("duplicate network ids")
        alert_ids = [a.id for a in self.alerts]
        if len(set(alert_ids)) != len(alert_ids):
            issues.append("duplicate alert ids")

        known_terminals = set(terminal_ids)
        for network in self.networks:
            missing = [m for m in network.member_ids if m not in known_terminals]
            if missing:
                issues.append(f"network {network.id} lists unknown terminals {missing}")
            if len(set(network.member_ids)) != len(network.member_ids):
                issues.append(f"network {network.id} lists a member twice")

        if known_programs is not None:
            for owned in self.owned_programs:
                if owned.name not in known_programs:
                    issues.append(f"unknown program {owned.name}")
        return issues

    def to_json(self, path: str | Path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    @classmethod
    def from_json(cls, path: str | Path) -> EngineSnapshot:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.model_validate(data)
