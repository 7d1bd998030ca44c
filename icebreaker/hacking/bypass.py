"""Countermeasure bypass: defeat one active ICE at a time."""

from __future__ import annotations

import logging
import random as _random_module
import time
from collections.abc import Callable

from icebreaker.catalog.countermeasures import IceEffect, IceType, get_ice
from icebreaker.catalog.programs import ProgramRegistry
from icebreaker.config import Config
from icebreaker.events import EventSink, EventType, publish
from icebreaker.hacking.arsenal import ActorStats, Arsenal
from icebreaker.hacking.chance import compute_bypass_chance
from icebreaker.hacking.engine import InProgressGuard
from icebreaker.network.registry import TerminalRegistry
from icebreaker.results import (
    COUNTERMEASURE_NOT_ACTIVE,
    COUNTERMEASURE_NOT_FOUND,
    HACK_IN_PROGRESS,
    PROGRAM_NOT_FOUND,
    PROGRAM_NOT_OWNED,
    TERMINAL_INACTIVE,
    TERMINAL_NOT_FOUND,
    BypassResult,
    ResultStatus,
    rejected,
)
from icebreaker.security.alerts import ICE_ALERT, AlertBoard

log = logging.getLogger(__name__)

BYPASS_FAILED = "Bypass failed"


class BypassEngine:
    """Resolves attacks against a single named countermeasure.

    Pursuit and equipment damage are reported back as signals on the
    result; applying them is up to the caller.
    """

    def __init__(
        self,
        registry: TerminalRegistry,
        alerts: AlertBoard,
        arsenal: Arsenal,
        config: Config,
        rng: _random_module.Random | None = None,
        clock: Callable[[], float] = time.time,
        sink: EventSink | None = None,
        programs: ProgramRegistry | None = None,
        guard: InProgressGuard | None = None,
    ) -> None:
        self.registry = registry
        self.alerts = alerts
        self.arsenal = arsenal
        self.config = config
        self.rng = rng or _random_module.Random()
        self.clock = clock
        self.sink = sink
        self.programs = programs if programs is not None else ProgramRegistry()
        self.guard = guard or InProgressGuard()

    def bypass(
        self,
        terminal_id: str,
        countermeasure: IceType | str,
        actor_id: str,
        stats: ActorStats | None = None,
        program: str | None = None,
    ) -> BypassResult:
        name = countermeasure.value if isinstance(countermeasure, IceType) else countermeasure
        terminal = self.registry.get_terminal(terminal_id)
        if terminal is None:
            return rejected(TERMINAL_NOT_FOUND, BypassResult, countermeasure=name)
        try:
            ice = IceType(countermeasure)
        except ValueError:
            log.debug("Rejected bypass on %s: unknown countermeasure %r", terminal_id, countermeasure)
            return rejected(COUNTERMEASURE_NOT_FOUND, BypassResult, countermeasure=name)
        if not terminal.active:
            return rejected(TERMINAL_INACTIVE, BypassResult, countermeasure=ice.value)
        if not terminal.has_active(ice):
            return rejected(COUNTERMEASURE_NOT_ACTIVE, BypassResult, countermeasure=ice.value)
        program_def = None
        if program is not None:
            program_def = self.programs.find(program)
            if program_def is None:
                return rejected(PROGRAM_NOT_FOUND, BypassResult, countermeasure=ice.value)
            if not self.arsenal.owns(program):
                return rejected(PROGRAM_NOT_OWNED, BypassResult, countermeasure=ice.value)
        if not self.guard.acquire(terminal_id):
            return rejected(HACK_IN_PROGRESS, BypassResult, countermeasure=ice.value)

        try:
            stats = stats or ActorStats()
            ice_def = get_ice(ice)
            chance = compute_bypass_chance(
                ice, stats.intelligence, stats.hacking_skill, program_def, self.config
            )
            roll = self.rng.randint(1, 100)
            now = self.clock()
            if program is not None:
                self.arsenal.consume([program])

            if roll <= chance:
                terminal.remove_countermeasure(ice)
                terminal.record_access(now, actor_id, f"bypass:{ice.value}", success=True)
                publish(self.sink, EventType.ICE_BYPASSED, {
                    "terminal_id": terminal_id,
                    "actor_id": actor_id,
                    "countermeasure": ice.value,
                    "remaining": [c.value for c in terminal.active_countermeasures],
                })
                log.info("%s bypassed %s on %s (roll %d <= %d)", actor_id, ice.value, terminal_id, roll, chance)
                return BypassResult(countermeasure=ice.value, chance=chance, roll=roll)

            result = BypassResult(
                status=ResultStatus.FAILED,
                reason=BYPASS_FAILED,
                countermeasure=ice.value,
                chance=chance,
                roll=roll,
                damage=ice_def.damage_on_fail,
            )
            if ice_def.effect == IceEffect.ALERTS_ON_DETECT:
                result.alert_triggered = True
                alert = self.alerts.raise_alert(
                    terminal_id=terminal_id,
                    location_id=terminal.location_id,
                    faction_id=terminal.faction_id,
                    suspect_id=actor_id,
                    severity=terminal.security_level,
                    alert_type=ICE_ALERT,
                )
                result.alert_id = alert.id
            elif ice_def.effect == IceEffect.PURSUES_HACKER:
                result.pursuit_started = True
            elif ice_def.effect == IceEffect.EQUIPMENT_DAMAGE:
                result.equipment_damage = ice_def.equipment_damage

            terminal.record_access(
                now, actor_id, f"bypass:{ice.value}", success=False, detected=result.alert_triggered
            )
            publish(self.sink, EventType.ICE_BYPASS_FAILED, {
                "terminal_id": terminal_id,
                "actor_id": actor_id,
                "countermeasure": ice.value,
                "damage": result.damage,
                "alert_triggered": result.alert_triggered,
                "pursuit_started": result.pursuit_started,
                "equipment_damage": result.equipment_damage,
            })
            log.info(
                "%s failed to bypass %s on %s (roll %d > %d)",
                actor_id, ice.value, terminal_id, roll, chance,
            )
            return result
        finally:
            self.guard.release(terminal_id)
