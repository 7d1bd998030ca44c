"""The hacker's side: stats and the set of owned programs."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from icebreaker.catalog.programs import ProgramRegistry

log = logging.getLogger(__name__)


class ActorStats(BaseModel):
    """Attributes of the character attempting a hack."""

    model_config = ConfigDict(frozen=True)

    intelligence: int = Field(default=10, ge=0)
    hacking_skill: int = Field(default=0, ge=0)


class OwnedProgram(BaseModel):
    """Acquisition metadata for one owned program."""

    model_config = ConfigDict(frozen=False)

    name: str
    acquired_at: float
    uses_remaining: int | None = Field(default=None, ge=0)  # None = unlimited

    @property
    def unlimited(self) -> bool:
        return self.uses_remaining is None


class Arsenal:
    """Programs the player owns, keyed by name."""

    def __init__(self, registry: ProgramRegistry) -> None:
        self.registry = registry
        self._owned: dict[str, OwnedProgram] = {}

    def acquire(self, name: str, acquired_at: float, uses: int | None = None) -> OwnedProgram:
        """Add a program; re-acquiring a limited one stacks its uses."""
        if name not in self.registry:
            raise KeyError(f"Unknown hacking program: {name}")
        existing = self._owned.get(name)
        if existing is not None:
            if existing.unlimited or uses is None:
                existing.uses_remaining = None
            else:
                existing.uses_remaining += uses
            return existing
        owned = OwnedProgram(name=name, acquired_at=acquired_at, uses_remaining=uses)
        self._owned[name] = owned
        return owned

    def add(self, owned: OwnedProgram) -> None:
        self._owned[owned.name] = owned

    def remove(self, name: str) -> bool:
        return self._owned.pop(name, None) is not None

    def owns(self, name: str) -> bool:
        return name in self._owned

    def get(self, name: str) -> OwnedProgram | None:
        return self._owned.get(name)

    def usable(self, names: Iterable[str]) -> list[str]:
        """Filter requested programs down to owned, known ones (deduplicated)."""
        result = []
        for name in dict.fromkeys(names):
            if name not in self.registry:
                log.debug("Ignoring unknown program %s", name)
            elif name not in self._owned:
                log.debug("Ignoring program %s: not owned", name)
            else:
                result.append(name)
        return result

    def consume(self, names: Iterable[str]) -> None:
        """Spend one use of each limited program; exhausted ones are dropped."""
        for name in names:
            owned = self._owned.get(name)
            if owned is None or owned.unlimited:
                continue
            owned.uses_remaining -= 1
            if owned.uses_remaining <= 0:
                del self._owned[name]
                log.info("Program %s exhausted", name)

    def all(self) -> dict[str, OwnedProgram]:
        return dict(self._owned)

    def __len__(self) -> int:
        return len(self._owned)
