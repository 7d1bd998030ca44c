"""IntrusionEngine: one game session's terminals, hacks and security state."""

from __future__ import annotations

import json
import logging
import random as _random_module
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from pydantic import ValidationError

from icebreaker.actions.terminal_actions import TerminalAction, TerminalActions
from icebreaker.actions.theft import DataThief
from icebreaker.catalog.countermeasures import IceType
from icebreaker.catalog.data import DataCategory
from icebreaker.catalog.programs import ProgramRegistry
from icebreaker.catalog.terminals import TerminalClass
from icebreaker.config import Config
from icebreaker.events import EventSink, NullSink
from icebreaker.hacking.arsenal import ActorStats, Arsenal, OwnedProgram
from icebreaker.hacking.bypass import BypassEngine
from icebreaker.hacking.chance import compute_bypass_chance, compute_success_chance
from icebreaker.hacking.engine import HackEngine, InProgressGuard
from icebreaker.network.models import HackAttempt, Network, Terminal
from icebreaker.network.registry import TerminalRegistry
from icebreaker.results import (
    ALERT_NOT_FOUND,
    PROGRAM_NOT_FOUND,
    PROGRAM_NOT_OWNED,
    SNAPSHOT_INVALID,
    SNAPSHOT_UNREADABLE,
    ActionResult,
    BypassResult,
    HackResult,
    OperationResult,
    RegistryResult,
    TheftResult,
    rejected,
)
from icebreaker.security.alerts import AlertBoard, SecurityAlert
from icebreaker.security.trace import TraceMeter
from icebreaker.snapshot import EngineSnapshot

log = logging.getLogger(__name__)


class IntrusionEngine:
    """Owns all mutable intrusion state for one game session.

    Every collaborator (random source, clock, event sink) is injected, so
    separate instances never share state and seeded runs are reproducible.
    """

    def __init__(
        self,
        config: Config | None = None,
        sink: EventSink | None = None,
        rng: _random_module.Random | None = None,
        clock: Callable[[], float] = time.time,
        programs: ProgramRegistry | None = None,
    ) -> None:
        config = config or Config()
        self.sink: EventSink = sink if sink is not None else NullSink()
        self.rng = rng or _random_module.Random(config.seed)
        self.clock = clock
        self.programs = programs if programs is not None else ProgramRegistry()
        self.guard = InProgressGuard()
        self._wire(
            config,
            TerminalRegistry(self.sink, clock),
            AlertBoard(config.alert_duration_seconds, self.sink, clock),
            TraceMeter(0, self.sink),
            Arsenal(self.programs),
            [],
        )

    def _wire(
        self,
        config: Config,
        registry: TerminalRegistry,
        alerts: AlertBoard,
        trace: TraceMeter,
        arsenal: Arsenal,
        history: list[HackAttempt],
    ) -> None:
        self.config = config
        self.registry = registry
        self.alerts = alerts
        self.trace = trace
        self.arsenal = arsenal
        self.hacks = HackEngine(
            registry, alerts, trace, arsenal, config,
            rng=self.rng, clock=self.clock, sink=self.sink,
            programs=self.programs, guard=self.guard, history=history,
        )
        self.bypasses = BypassEngine(
            registry, alerts, arsenal, config,
            rng=self.rng, clock=self.clock, sink=self.sink,
            programs=self.programs, guard=self.guard,
        )
        self.thief = DataThief(registry, rng=self.rng, clock=self.clock, sink=self.sink)
        self.actions = TerminalActions(registry, config, rng=self.rng, clock=self.clock, sink=self.sink)

    # ── Registry ──

    def create_terminal(
        self,
        terminal_id: str,
        name: str,
        terminal_class: TerminalClass | str,
        location_id: str | None = None,
        owner_id: str | None = None,
        faction_id: str | None = None,
        security_level: int | None = None,
        countermeasures: Iterable[IceType | str] | None = None,
        data_categories: Iterable[DataCategory | str] | None = None,
        content: dict | None = None,
        requires_physical_access: bool = False,
    ) -> RegistryResult:
        return self.registry.create_terminal(
            terminal_id,
            name,
            terminal_class,
            location_id=location_id,
            owner_id=owner_id,
            faction_id=faction_id,
            security_level=security_level,
            countermeasures=countermeasures,
            data_categories=data_categories,
            content=content,
            requires_physical_access=requires_physical_access,
        )

    def get_terminal(self, terminal_id: str) -> Terminal | None:
        return self.registry.get_terminal(terminal_id)

    def find_terminals(self, **filters) -> list[Terminal]:
        return self.registry.find_terminals(**filters)

    def set_terminal_active(self, terminal_id: str, active: bool) -> RegistryResult:
        return self.registry.set_terminal_active(terminal_id, active)

    def delete_terminal(self, terminal_id: str) -> RegistryResult:
        return self.registry.delete_terminal(terminal_id)

    def create_network(self, network_id: str, name: str, **kwargs) -> RegistryResult:
        return self.registry.create_network(network_id, name, **kwargs)

    def get_network(self, network_id: str) -> Network | None:
        return self.registry.get_network(network_id)

    def find_networks(self, **filters) -> list[Network]:
        return self.registry.find_networks(**filters)

    def set_network_online(self, network_id: str, online: bool) -> RegistryResult:
        return self.registry.set_network_online(network_id, online)

    def delete_network(self, network_id: str) -> RegistryResult:
        return self.registry.delete_network(network_id)

    def add_terminal_to_network(self, network_id: str, terminal_id: str) -> RegistryResult:
        return self.registry.add_terminal_to_network(network_id, terminal_id)

    def remove_terminal_from_network(self, network_id: str, terminal_id: str) -> RegistryResult:
        return self.registry.remove_terminal_from_network(network_id, terminal_id)

    # ── Hacking ──

    def success_chance(
        self,
        terminal_id: str,
        stats: ActorStats | None = None,
        programs: Iterable[str] = (),
    ) -> int | None:
        """Preview the hack chance with owned programs only; None if no such terminal."""
        terminal = self.registry.get_terminal(terminal_id)
        if terminal is None:
            return None
        stats = stats or ActorStats()
        return compute_success_chance(
            terminal,
            stats.intelligence,
            stats.hacking_skill,
            self.arsenal.usable(programs),
            self.config,
            self.programs,
        )

    def bypass_chance(
        self,
        countermeasure: IceType | str,
        stats: ActorStats | None = None,
        program: str | None = None,
    ) -> int:
        stats = stats or ActorStats()
        program_def = self.programs.find(program) if program is not None else None
        return compute_bypass_chance(
            countermeasure, stats.intelligence, stats.hacking_skill, program_def, self.config
        )

    def start_hack(
        self,
        terminal_id: str,
        actor_id: str,
        stats: ActorStats | None = None,
        programs: Iterable[str] = (),
        remote: bool = False,
    ) -> HackResult:
        return self.hacks.start_hack(terminal_id, actor_id, stats, programs, remote=remote)

    def bypass_countermeasure(
        self,
        terminal_id: str,
        countermeasure: IceType | str,
        actor_id: str,
        stats: ActorStats | None = None,
        program: str | None = None,
    ) -> BypassResult:
        return self.bypasses.bypass(terminal_id, countermeasure, actor_id, stats, program)

    def reset_terminal(self, terminal_id: str) -> RegistryResult:
        return self.hacks.reset_terminal(terminal_id)

    @property
    def history(self) -> list[HackAttempt]:
        return self.hacks.history

    # ── Post-compromise ──

    def steal_data(
        self,
        terminal_id: str,
        actor_id: str,
        category: DataCategory | str | None = None,
        steal_all: bool = False,
    ) -> TheftResult:
        return self.thief.steal(terminal_id, actor_id, category, steal_all)

    def execute_action(
        self,
        terminal_id: str,
        actor_id: str,
        action: TerminalAction | str,
    ) -> ActionResult:
        return self.actions.execute(terminal_id, actor_id, action)

    # ── Programs ──

    def acquire_program(self, name: str, uses: int | None = None) -> OperationResult:
        if name not in self.programs:
            return rejected(PROGRAM_NOT_FOUND)
        self.arsenal.acquire(name, self.clock(), uses)
        return OperationResult()

    def remove_program(self, name: str) -> OperationResult:
        if not self.arsenal.remove(name):
            return rejected(PROGRAM_NOT_OWNED)
        return OperationResult()

    def owned_programs(self) -> dict[str, OwnedProgram]:
        return self.arsenal.all()

    # ── Security response ──

    @property
    def trace_level(self) -> int:
        return self.trace.level

    def add_trace(self, amount: int) -> int:
        return self.trace.add(amount)

    def reduce_trace(self, amount: int) -> int:
        return self.trace.reduce(amount)

    def get_alert(self, alert_id: str) -> SecurityAlert | None:
        return self.alerts.get(alert_id)

    def query_alerts(
        self,
        faction_id: str | None = None,
        location_id: str | None = None,
        active_only: bool = False,
    ) -> list[SecurityAlert]:
        return self.alerts.query(faction_id, location_id, active_only)

    def clear_alert(self, alert_id: str) -> OperationResult:
        if not self.alerts.clear(alert_id):
            return rejected(ALERT_NOT_FOUND)
        return OperationResult()

    def clear_faction_alerts(self, faction_id: str) -> int:
        return self.alerts.clear_faction(faction_id)

    def clear_all_alerts(self) -> int:
        return self.alerts.clear_all()

    def on_faction_standing_changed(self, faction_id: str, standing: str) -> int:
        return self.alerts.on_faction_standing_changed(faction_id, standing)

    def on_time_advanced(self, minutes_passed: float) -> dict[str, int]:
        """Periodic handler: decay trace and purge expired alerts."""
        decayed = self.trace.decay(minutes_passed, self.config.trace_decay_rate_per_minute)
        purged = self.alerts.purge_expired()
        return {"trace_reduced": decayed, "alerts_purged": purged, "trace_level": self.trace.level}

    # ── Snapshot / restore ──

    def snapshot(self) -> EngineSnapshot:
        """Deep copy of all mutable state."""
        return EngineSnapshot(
            config=self.config.model_copy(deep=True),
            terminals=[t.model_copy(deep=True) for t in self.registry.terminals.values()],
            networks=[n.model_copy(deep=True) for n in self.registry.networks.values()],
            owned_programs=[p.model_copy() for p in self.arsenal.all().values()],
            trace_level=self.trace.level,
            history=self.hacks.history,
            alerts=self.alerts.all(),
        )

    def restore(self, document: EngineSnapshot | dict | str | bytes) -> OperationResult:
        """Replace all state with the document's; on any error nothing changes."""
        try:
            if isinstance(document, EngineSnapshot):
                snap = EngineSnapshot.model_validate(document.model_dump())
            elif isinstance(document, (str, bytes)):
                snap = EngineSnapshot.model_validate_json(document)
            else:
                snap = EngineSnapshot.model_validate(document)
        except ValidationError as exc:
            log.warning("Rejected snapshot: %d validation errors", exc.error_count())
            return rejected(f"{SNAPSHOT_INVALID}: {exc.error_count()} validation errors")

        problems = snap.problems(set(self.programs.all_names()))
        if problems:
            log.warning("Rejected snapshot: %s", "; ".join(problems))
            return rejected(f"{SNAPSHOT_INVALID}: {'; '.join(problems)}")

        config = snap.config
        registry = TerminalRegistry(self.sink, self.clock)
        for terminal in snap.terminals:
            registry.add_terminal(terminal)
        for network in snap.networks:
            registry.add_network(network)
        alerts = AlertBoard(config.alert_duration_seconds, self.sink, self.clock)
        for alert in snap.alerts:
            alerts.add(alert)
        arsenal = Arsenal(self.programs)
        for owned in snap.owned_programs:
            arsenal.add(owned)

        self._wire(config, registry, alerts, TraceMeter(snap.trace_level, self.sink), arsenal, snap.history)
        log.info(
            "Restored %d terminals, %d networks, %d attempts",
            registry.terminal_count, registry.network_count, len(snap.history),
        )
        return OperationResult()

    def save(self, path: str | Path) -> Path:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        self.snapshot().to_json(out)
        return out

    def load(self, path: str | Path) -> OperationResult:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            log.warning("Could not read snapshot %s: %s", path, exc)
            return rejected(f"{SNAPSHOT_UNREADABLE}: {exc}")
        if not isinstance(data, dict):
            return rejected(f"{SNAPSHOT_INVALID}: top level is not an object")
        return self.restore(data)
