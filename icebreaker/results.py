"""Result types returned by engine operations.

Precondition failures never raise: they come back with
``status == ResultStatus.REJECTED`` and a reason string. A lost roll is
``ResultStatus.FAILED``, an expected outcome rather than an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from icebreaker.network.models import HackAttempt, Network, StolenData, Terminal


class ResultStatus(str, Enum):
    """How an operation resolved."""

    SUCCESS = "success"
    FAILED = "failed"
    REJECTED = "rejected"


# Rejection reasons
TERMINAL_NOT_FOUND = "Terminal not found"
TERMINAL_EXISTS = "Terminal already exists"
TERMINAL_INACTIVE = "Terminal is not active"
HACK_IN_PROGRESS = "Hack already in progress"
PHYSICAL_ACCESS_REQUIRED = "Physical access required"
NETWORK_NOT_FOUND = "Network not found"
NETWORK_EXISTS = "Network already exists"
COUNTERMEASURE_NOT_FOUND = "Countermeasure not found"
COUNTERMEASURE_NOT_ACTIVE = "Countermeasure not active on terminal"
PROGRAM_NOT_FOUND = "Program not found"
PROGRAM_NOT_OWNED = "Program not owned"
NOT_COMPROMISED = "Terminal not compromised"
NO_DATA_AVAILABLE = "No data available"
DATA_CATEGORY_NOT_FOUND = "Data category not found"
DATA_CATEGORY_UNAVAILABLE = "Data category not available on terminal"
ACTION_NOT_FOUND = "Action not found"
ACTION_INELIGIBLE = "Action not available on this terminal class"
BACKDOOR_EXISTS = "Backdoor already installed"
ALERT_NOT_FOUND = "Alert not found"
SNAPSHOT_INVALID = "Snapshot invalid"
SNAPSHOT_UNREADABLE = "Snapshot unreadable"


@dataclass
class OperationResult:
    """Base result: a status plus a reason when not successful."""

    status: ResultStatus = ResultStatus.SUCCESS
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def rejected(self) -> bool:
        return self.status == ResultStatus.REJECTED


@dataclass
class RegistryResult(OperationResult):
    terminal: Terminal | None = None
    network: Network | None = None


@dataclass
class HackResult(OperationResult):
    """Outcome of ``start_hack``; ``attempt`` is set unless rejected."""

    attempt: HackAttempt | None = None
    chance: int = 0
    alert_id: str | None = None

    @property
    def detected(self) -> bool:
        return self.attempt is not None and self.attempt.detected

    @property
    def damage(self) -> int:
        return self.attempt.damage if self.attempt is not None else 0


@dataclass
class BypassResult(OperationResult):
    """Outcome of a single countermeasure bypass."""

    countermeasure: str | None = None
    chance: int = 0
    roll: int = 0
    damage: int = 0
    alert_triggered: bool = False
    pursuit_started: bool = False
    equipment_damage: int = 0
    alert_id: str | None = None


@dataclass
class TheftResult(OperationResult):
    stolen: list[StolenData] = field(default_factory=list)
    credits_stolen: int = 0
    data_value: int = 0


@dataclass
class ActionResult(OperationResult):
    action: str | None = None
    message: str = ""
    duration_seconds: int = 0
    credits: int = 0
    details: dict[str, Any] = field(default_factory=dict)


def rejected(reason: str, cls: type[OperationResult] = OperationResult, **kwargs: Any) -> Any:
    """Build a rejection of the given result type."""
    return cls(status=ResultStatus.REJECTED, reason=reason, **kwargs)
