"""Entity models: terminals, networks, access records, hack attempts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from icebreaker.catalog.countermeasures import IceType
from icebreaker.catalog.data import DataCategory
from icebreaker.catalog.terminals import DifficultyTier, TerminalClass


class AccessRecord(BaseModel):
    """One entry in a terminal's access log."""

    model_config = ConfigDict(frozen=True)

    timestamp: float
    actor_id: str
    action: str
    success: bool
    detected: bool = False


class Terminal(BaseModel):
    """A hackable endpoint.

    Invariants:
        - every entry of active_countermeasures is in countermeasures
        - post-compromise actions require compromised
    """

    model_config = ConfigDict(frozen=False)

    id: str
    name: str
    terminal_class: TerminalClass
    location_id: str | None = None
    owner_id: str | None = None
    faction_id: str | None = None
    security_level: int = Field(default=0, ge=0)
    countermeasures: list[IceType] = Field(default_factory=list)
    active_countermeasures: list[IceType] = Field(default_factory=list)
    data_categories: list[DataCategory] = Field(default_factory=list)
    content: dict[str, Any] = Field(default_factory=dict)
    active: bool = True
    compromised: bool = False
    backdoor: bool = False
    requires_physical_access: bool = False
    access_log: list[AccessRecord] = Field(default_factory=list)
    created_at: float = 0.0
    last_access: float | None = None

    @model_validator(mode="after")
    def _active_subset_of_full(self) -> Terminal:
        stray = [c for c in self.active_countermeasures if c not in self.countermeasures]
        if stray:
            raise ValueError(f"active countermeasures not installed on terminal: {stray}")
        return self

    def has_active(self, ice: IceType) -> bool:
        return ice in self.active_countermeasures

    def remove_countermeasure(self, ice: IceType) -> None:
        """Drop one ICE from the active list; the full list is untouched."""
        self.active_countermeasures.remove(ice)

    def reset_countermeasures(self) -> None:
        """Restore every installed ICE and revoke compromise and backdoor."""
        self.active_countermeasures = list(self.countermeasures)
        self.compromised = False
        self.backdoor = False

    def record_access(
        self,
        timestamp: float,
        actor_id: str,
        action: str,
        success: bool,
        detected: bool = False,
    ) -> AccessRecord:
        record = AccessRecord(
            timestamp=timestamp,
            actor_id=actor_id,
            action=action,
            success=success,
            detected=detected,
        )
        self.access_log.append(record)
        return record


class Network(BaseModel):
    """A named group of terminals sharing a security posture."""

    model_config = ConfigDict(frozen=False)

    id: str
    name: str
    owner_id: str | None = None
    faction_id: str | None = None
    security_level: int = Field(default=1, ge=0)
    member_ids: list[str] = Field(default_factory=list)
    online: bool = True
    compromised: bool = False
    alert_level: int = Field(default=0, ge=0)
    created_at: float = 0.0


class StolenData(BaseModel):
    """A data record lifted from a compromised terminal."""

    model_config = ConfigDict(frozen=True)

    category: DataCategory
    value: int
    illegal: bool
    description: str


class HackAttempt(BaseModel):
    """Immutable record of one hack resolution.

    ``stolen_data`` and ``credits_stolen`` stay empty when the engine records
    an attempt: theft happens afterwards and is reported on ``TheftResult``.
    Callers building their own attempt records may fill them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    terminal_id: str
    actor_id: str
    started_at: float
    success: bool
    roll: int
    required_roll: int
    difficulty: DifficultyTier
    countermeasures: tuple[IceType, ...] = ()
    detected: bool = False
    damage: int = 0
    stolen_data: tuple[StolenData, ...] = ()
    credits_stolen: int = 0
    experience: int = 0
