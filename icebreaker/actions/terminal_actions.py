"""Actions a hacker can run on a compromised terminal."""

from __future__ import annotations

import logging
import random as _random_module
import time
from collections.abc import Callable
from enum import Enum

from icebreaker.catalog.terminals import TerminalClass, get_terminal_class
from icebreaker.config import Config
from icebreaker.events import EventSink, EventType, publish
from icebreaker.network.models import Terminal
from icebreaker.network.registry import TerminalRegistry
from icebreaker.results import (
    ACTION_INELIGIBLE,
    ACTION_NOT_FOUND,
    BACKDOOR_EXISTS,
    NOT_COMPROMISED,
    TERMINAL_INACTIVE,
    TERMINAL_NOT_FOUND,
    ActionResult,
    rejected,
)

log = logging.getLogger(__name__)


class TerminalAction(str, Enum):
    """Post-compromise actions."""

    DISABLE_ALARMS = "disable_alarms"
    OPEN_DOORS = "open_doors"
    DISABLE_CAMERAS = "disable_cameras"
    CONTROL_TURRETS = "control_turrets"
    TRANSFER_CREDITS = "transfer_credits"
    PLANT_BACKDOOR = "plant_backdoor"
    WIPE_ACCESS_LOG = "wipe_access_log"
    OVERLOAD_SYSTEM = "overload_system"


_FACILITY_CLASSES = frozenset({
    TerminalClass.CORPORATE,
    TerminalClass.BANK,
    TerminalClass.MEDICAL,
    TerminalClass.RESEARCH,
    TerminalClass.POLICE,
    TerminalClass.SECURITY,
    TerminalClass.GOVERNMENT,
    TerminalClass.MILITARY,
})

# None means every terminal class qualifies
ELIGIBLE_CLASSES: dict[TerminalAction, frozenset[TerminalClass] | None] = {
    TerminalAction.DISABLE_ALARMS: _FACILITY_CLASSES,
    TerminalAction.OPEN_DOORS: _FACILITY_CLASSES,
    TerminalAction.DISABLE_CAMERAS: frozenset({
        TerminalClass.CORPORATE,
        TerminalClass.BANK,
        TerminalClass.POLICE,
        TerminalClass.SECURITY,
        TerminalClass.GOVERNMENT,
        TerminalClass.MILITARY,
    }),
    TerminalAction.CONTROL_TURRETS: frozenset({TerminalClass.SECURITY, TerminalClass.MILITARY}),
    TerminalAction.TRANSFER_CREDITS: frozenset({TerminalClass.BANK, TerminalClass.CORPORATE}),
    TerminalAction.PLANT_BACKDOOR: None,
    TerminalAction.WIPE_ACCESS_LOG: None,
    TerminalAction.OVERLOAD_SYSTEM: None,
}


def is_eligible(action: TerminalAction, terminal: Terminal) -> bool:
    allowed = ELIGIBLE_CLASSES[action]
    return allowed is None or terminal.terminal_class in allowed


class TerminalActions:
    """Executes post-compromise actions against the registry's terminals."""

    def __init__(
        self,
        registry: TerminalRegistry,
        config: Config,
        rng: _random_module.Random | None = None,
        clock: Callable[[], float] = time.time,
        sink: EventSink | None = None,
    ) -> None:
        self.registry = registry
        self.config = config
        self.rng = rng or _random_module.Random()
        self.clock = clock
        self.sink = sink

    def available(self, terminal_id: str) -> list[TerminalAction]:
        """Actions the terminal's class allows."""
        terminal = self.registry.get_terminal(terminal_id)
        if terminal is None:
            return []
        return [a for a in TerminalAction if is_eligible(a, terminal)]

    def execute(
        self,
        terminal_id: str,
        actor_id: str,
        action: TerminalAction | str,
    ) -> ActionResult:
        name = action.value if isinstance(action, TerminalAction) else action
        terminal = self.registry.get_terminal(terminal_id)
        if terminal is None:
            return rejected(TERMINAL_NOT_FOUND, ActionResult, action=name)
        try:
            action = TerminalAction(action)
        except ValueError:
            return rejected(ACTION_NOT_FOUND, ActionResult, action=name)
        if not terminal.compromised:
            return rejected(NOT_COMPROMISED, ActionResult, action=action.value)
        if not terminal.active:
            return rejected(TERMINAL_INACTIVE, ActionResult, action=action.value)
        if not is_eligible(action, terminal):
            return rejected(
                f"{ACTION_INELIGIBLE}: {action.value} on {terminal.terminal_class.value}",
                ActionResult,
                action=action.value,
            )

        now = self.clock()
        result = ActionResult(action=action.value)

        if action == TerminalAction.DISABLE_ALARMS:
            result.duration_seconds = self.config.alarm_disable_seconds
            terminal.content["alarms_disabled_until"] = now + result.duration_seconds
            result.message = f"Alarms disabled for {result.duration_seconds}s"

        elif action == TerminalAction.OPEN_DOORS:
            terminal.content["doors_open"] = True
            result.message = "Doors unlocked"

        elif action == TerminalAction.DISABLE_CAMERAS:
            result.duration_seconds = self.config.camera_disable_seconds
            terminal.content["cameras_disabled_until"] = now + result.duration_seconds
            result.message = f"Cameras offline for {result.duration_seconds}s"

        elif action == TerminalAction.CONTROL_TURRETS:
            terminal.content["turrets_controlled_by"] = actor_id
            result.message = "Turrets now answer to you"

        elif action == TerminalAction.TRANSFER_CREDITS:
            low, high = get_terminal_class(terminal.terminal_class).reward_range
            result.credits = self.rng.randint(low, high)
            result.message = f"Transferred {result.credits} credits"

        elif action == TerminalAction.PLANT_BACKDOOR:
            if terminal.backdoor:
                return rejected(BACKDOOR_EXISTS, ActionResult, action=action.value)
            terminal.backdoor = True
            result.message = "Backdoor planted"

        elif action == TerminalAction.WIPE_ACCESS_LOG:
            result.details["entries_removed"] = len(terminal.access_log)
            terminal.access_log.clear()
            result.message = "Access log wiped"

        elif action == TerminalAction.OVERLOAD_SYSTEM:
            terminal.active = False
            result.message = "System overloaded and shut down"

        # A wiped log stays empty
        if action != TerminalAction.WIPE_ACCESS_LOG:
            terminal.record_access(now, actor_id, f"action:{action.value}", success=True)
        terminal.last_access = now

        publish(self.sink, EventType.TERMINAL_ACTION, {
            "terminal_id": terminal_id,
            "actor_id": actor_id,
            "action": action.value,
            "duration_seconds": result.duration_seconds,
            "credits": result.credits,
        })
        if action == TerminalAction.OVERLOAD_SYSTEM:
            publish(self.sink, EventType.TERMINAL_STATUS_CHANGED, {
                "terminal_id": terminal_id,
                "active": False,
            })
        log.info("%s ran %s on %s", actor_id, action.value, terminal_id)
        return result
