"""Data theft from compromised terminals."""

from __future__ import annotations

import logging
import random as _random_module
import time
from collections.abc import Callable

from icebreaker.catalog.data import DataCategory, get_data_category, is_currency
from icebreaker.catalog.terminals import get_terminal_class
from icebreaker.events import EventSink, EventType, publish
from icebreaker.network.models import StolenData
from icebreaker.network.registry import TerminalRegistry
from icebreaker.results import (
    DATA_CATEGORY_NOT_FOUND,
    DATA_CATEGORY_UNAVAILABLE,
    NO_DATA_AVAILABLE,
    NOT_COMPROMISED,
    TERMINAL_NOT_FOUND,
    TheftResult,
    rejected,
)

log = logging.getLogger(__name__)


class DataThief:
    """Extracts data and credits from terminals the player has compromised."""

    def __init__(
        self,
        registry: TerminalRegistry,
        rng: _random_module.Random | None = None,
        clock: Callable[[], float] = time.time,
        sink: EventSink | None = None,
    ) -> None:
        self.registry = registry
        self.rng = rng or _random_module.Random()
        self.clock = clock
        self.sink = sink

    def steal(
        self,
        terminal_id: str,
        actor_id: str,
        category: DataCategory | str | None = None,
        steal_all: bool = False,
    ) -> TheftResult:
        """Steal one random category, an explicit one, or everything.

        Credits and Transfers pay out a roll from the terminal class reward
        range; every other category becomes a StolenData record.
        """
        terminal = self.registry.get_terminal(terminal_id)
        if terminal is None:
            return rejected(TERMINAL_NOT_FOUND, TheftResult)
        if not terminal.compromised:
            return rejected(NOT_COMPROMISED, TheftResult)
        if not terminal.data_categories:
            return rejected(NO_DATA_AVAILABLE, TheftResult)

        if steal_all:
            selected = list(terminal.data_categories)
        elif category is not None:
            try:
                wanted = DataCategory(category)
            except ValueError:
                return rejected(DATA_CATEGORY_NOT_FOUND, TheftResult)
            if wanted not in terminal.data_categories:
                return rejected(DATA_CATEGORY_UNAVAILABLE, TheftResult)
            selected = [wanted]
        else:
            selected = [self.rng.choice(terminal.data_categories)]

        low, high = get_terminal_class(terminal.terminal_class).reward_range
        result = TheftResult()
        for cat in selected:
            if is_currency(cat):
                result.credits_stolen += self.rng.randint(low, high)
                continue
            info = get_data_category(cat)
            value = info.base_value * max(1, terminal.security_level)
            result.stolen.append(StolenData(
                category=cat,
                value=value,
                illegal=info.illegal,
                description=info.description,
            ))
            result.data_value += value

        now = self.clock()
        terminal.last_access = now
        terminal.record_access(now, actor_id, "steal_data", success=True)
        publish(self.sink, EventType.DATA_STOLEN, {
            "terminal_id": terminal_id,
            "actor_id": actor_id,
            "categories": [c.value for c in selected],
            "credits": result.credits_stolen,
            "data_value": result.data_value,
        })
        log.info(
            "%s stole %d records and %d credits from %s",
            actor_id, len(result.stolen), result.credits_stolen, terminal_id,
        )
        return result
