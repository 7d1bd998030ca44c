"""Hack resolution engine: rolls full-terminal intrusion attempts."""

from __future__ import annotations

import logging
import random as _random_module
import threading
import time
from collections.abc import Callable, Iterable

from icebreaker.catalog.programs import ProgramRegistry
from icebreaker.catalog.terminals import get_terminal_class
from icebreaker.config import Config
from icebreaker.events import EventSink, EventType, publish
from icebreaker.hacking.arsenal import ActorStats, Arsenal
from icebreaker.hacking.chance import (
    compute_experience,
    compute_success_chance,
    detection_chance,
    detection_trace_increase,
    failure_damage,
)
from icebreaker.network.models import HackAttempt, Terminal
from icebreaker.network.registry import TerminalRegistry
from icebreaker.results import (
    HACK_IN_PROGRESS,
    PHYSICAL_ACCESS_REQUIRED,
    TERMINAL_INACTIVE,
    TERMINAL_NOT_FOUND,
    HackResult,
    RegistryResult,
    ResultStatus,
    rejected,
)
from icebreaker.security.alerts import AlertBoard
from icebreaker.security.trace import TraceMeter

log = logging.getLogger(__name__)

HACK_FAILED = "Hack failed"


class InProgressGuard:
    """At most one in-flight resolution per terminal id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._busy: set[str] = set()

    def acquire(self, terminal_id: str) -> bool:
        with self._lock:
            if terminal_id in self._busy:
                return False
            self._busy.add(terminal_id)
            return True

    def release(self, terminal_id: str) -> None:
        with self._lock:
            self._busy.discard(terminal_id)

    def is_busy(self, terminal_id: str) -> bool:
        with self._lock:
            return terminal_id in self._busy


class HackEngine:
    """Resolves ``start_hack`` calls and keeps the attempt history."""

    def __init__(
        self,
        registry: TerminalRegistry,
        alerts: AlertBoard,
        trace: TraceMeter,
        arsenal: Arsenal,
        config: Config,
        rng: _random_module.Random | None = None,
        clock: Callable[[], float] = time.time,
        sink: EventSink | None = None,
        programs: ProgramRegistry | None = None,
        guard: InProgressGuard | None = None,
        history: list[HackAttempt] | None = None,
    ) -> None:
        self.registry = registry
        self.alerts = alerts
        self.trace = trace
        self.arsenal = arsenal
        self.config = config
        self.rng = rng or _random_module.Random()
        self.clock = clock
        self.sink = sink
        self.programs = programs if programs is not None else ProgramRegistry()
        self.guard = guard or InProgressGuard()
        self._history: list[HackAttempt] = list(history or [])

    def start_hack(
        self,
        terminal_id: str,
        actor_id: str,
        stats: ActorStats | None = None,
        programs: Iterable[str] = (),
        remote: bool = False,
    ) -> HackResult:
        """Attempt to compromise a terminal.

        Preconditions are checked in order: the terminal exists, it is
        active, and no other attempt against it is in flight. A terminal
        needing physical access also rejects remote attempts.
        """
        terminal = self.registry.get_terminal(terminal_id)
        if terminal is None:
            return rejected(TERMINAL_NOT_FOUND, HackResult)
        if not terminal.active:
            return rejected(TERMINAL_INACTIVE, HackResult)
        if not self.guard.acquire(terminal_id):
            log.debug("Rejected hack on %s: attempt already in flight", terminal_id)
            return rejected(HACK_IN_PROGRESS, HackResult)
        try:
            if remote and terminal.requires_physical_access:
                return rejected(PHYSICAL_ACCESS_REQUIRED, HackResult)
            return self._resolve(terminal, actor_id, stats or ActorStats(), programs)
        finally:
            self.guard.release(terminal_id)

    def _resolve(
        self,
        terminal: Terminal,
        actor_id: str,
        stats: ActorStats,
        programs: Iterable[str],
    ) -> HackResult:
        usable = self.arsenal.usable(programs)
        chance = compute_success_chance(
            terminal,
            stats.intelligence,
            stats.hacking_skill,
            usable,
            self.config,
            self.programs,
        )
        roll = self.rng.randint(1, 100)
        now = self.clock()
        difficulty = get_terminal_class(terminal.terminal_class).difficulty
        encountered = tuple(terminal.active_countermeasures)
        self.arsenal.consume(usable)

        if roll <= chance:
            terminal.compromised = True
            terminal.last_access = now
            terminal.record_access(now, actor_id, "hack", success=True)
            experience = compute_experience(terminal)
            attempt = self._record(HackAttempt(
                id=self._next_attempt_id(),
                terminal_id=terminal.id,
                actor_id=actor_id,
                started_at=now,
                success=True,
                roll=roll,
                required_roll=chance,
                difficulty=difficulty,
                countermeasures=encountered,
                experience=experience,
            ))
            self.registry.refresh_network_compromise(terminal.id)
            publish(self.sink, EventType.HACK_SUCCEEDED, {
                "terminal_id": terminal.id,
                "actor_id": actor_id,
                "attempt_id": attempt.id,
                "roll": roll,
                "chance": chance,
                "experience": experience,
            })
            log.info(
                "Hack on %s by %s succeeded (roll %d <= %d)",
                terminal.id, actor_id, roll, chance,
            )
            return HackResult(attempt=attempt, chance=chance)

        damage = failure_damage(terminal)
        detected = self.rng.randint(1, 100) <= detection_chance(terminal, self.config)
        alert_id = None
        if detected:
            alert = self.alerts.raise_alert(
                terminal_id=terminal.id,
                location_id=terminal.location_id,
                faction_id=terminal.faction_id,
                suspect_id=actor_id,
                severity=terminal.security_level,
            )
            alert_id = alert.id
            self.trace.add(detection_trace_increase(terminal, self.config))
            for network in self.registry.networks_for_terminal(terminal.id):
                network.alert_level += 1

        terminal.record_access(now, actor_id, "hack", success=False, detected=detected)
        attempt = self._record(HackAttempt(
            id=self._next_attempt_id(),
            terminal_id=terminal.id,
            actor_id=actor_id,
            started_at=now,
            success=False,
            roll=roll,
            required_roll=chance,
            difficulty=difficulty,
            countermeasures=encountered,
            detected=detected,
            damage=damage,
        ))
        publish(self.sink, EventType.HACK_FAILED, {
            "terminal_id": terminal.id,
            "actor_id": actor_id,
            "attempt_id": attempt.id,
            "roll": roll,
            "chance": chance,
            "damage": damage,
            "detected": detected,
        })
        log.info(
            "Hack on %s by %s failed (roll %d > %d, damage %d, detected=%s)",
            terminal.id, actor_id, roll, chance, damage, detected,
        )
        return HackResult(
            status=ResultStatus.FAILED,
            reason=HACK_FAILED,
            attempt=attempt,
            chance=chance,
            alert_id=alert_id,
        )

    def reset_terminal(self, terminal_id: str) -> RegistryResult:
        """Reinstate all ICE and revoke compromise and backdoor; history stays."""
        terminal = self.registry.get_terminal(terminal_id)
        if terminal is None:
            return rejected(TERMINAL_NOT_FOUND, RegistryResult)
        terminal.reset_countermeasures()
        self.registry.refresh_network_compromise(terminal_id)
        publish(self.sink, EventType.TERMINAL_STATUS_CHANGED, {
            "terminal_id": terminal_id,
            "active": terminal.active,
            "reset": True,
        })
        return RegistryResult(terminal=terminal)

    def _next_attempt_id(self) -> str:
        return f"hack-{len(self._history) + 1:06d}"

    def _record(self, attempt: HackAttempt) -> HackAttempt:
        self._history.append(attempt)
        return attempt

    @property
    def history(self) -> list[HackAttempt]:
        """Attempt history, oldest first (a copy)."""
        return list(self._history)

    def history_for(self, terminal_id: str) -> list[HackAttempt]:
        return [a for a in self._history if a.terminal_id == terminal_id]

    def is_in_progress(self, terminal_id: str) -> bool:
        return self.guard.is_busy(terminal_id)
