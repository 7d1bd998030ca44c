"""Probability model for hacks, bypasses and detection."""

from __future__ import annotations

import math
from collections.abc import Iterable

from icebreaker.catalog.countermeasures import IceType, get_ice
from icebreaker.catalog.programs import BYPASS_EFFECTS, ProgramDef, ProgramRegistry
from icebreaker.catalog.terminals import get_difficulty, get_terminal_class
from icebreaker.config import Config
from icebreaker.network.models import Terminal

MIN_CHANCE = 5
MAX_CHANCE = 95

BASELINE_INTELLIGENCE = 10
SECURITY_PENALTY_PER_LEVEL = 5
ICE_PENALTY_PER_COUNTERMEASURE = 3
PROGRAM_BONUS_PER_STRENGTH = 5
BACKDOOR_BONUS = 30

BYPASS_BASE_CHANCE = 50
BYPASS_SKILL_BONUS_PER_RANK = 10
BYPASS_PROGRAM_BONUS_PER_STRENGTH = 10

DETECTION_PER_SECURITY_LEVEL = 10
BASE_EXPERIENCE = 50


def clamp_chance(value: int) -> int:
    return max(MIN_CHANCE, min(MAX_CHANCE, value))


def intelligence_bonus(intelligence: int, config: Config) -> int:
    return (intelligence - BASELINE_INTELLIGENCE) * config.int_bonus_per_point


def compute_success_chance(
    terminal: Terminal,
    intelligence: int,
    skill: int,
    programs: Iterable[str] = (),
    config: Config | None = None,
    registry: ProgramRegistry | None = None,
) -> int:
    """Percent chance that a full hack of ``terminal`` succeeds.

    chance = tier base
        + (intelligence - 10) * int_bonus_per_point
        + skill * skill_bonus_per_rank
        + sum(strength * 5) over known programs
        + 30 if a backdoor is planted
        - security_level * 5
        - active countermeasures * 3
    clamped to [MIN_CHANCE, MAX_CHANCE].
    """
    config = config or Config()
    registry = registry if registry is not None else ProgramRegistry()

    tier = get_difficulty(get_terminal_class(terminal.terminal_class).difficulty)
    program_bonus = sum(
        registry.get(name).strength * PROGRAM_BONUS_PER_STRENGTH
        for name in programs
        if name in registry
    )
    chance = (
        tier.base_chance
        + intelligence_bonus(intelligence, config)
        + skill * config.skill_bonus_per_rank
        + program_bonus
        + (BACKDOOR_BONUS if terminal.backdoor else 0)
        - terminal.security_level * SECURITY_PENALTY_PER_LEVEL
        - len(terminal.active_countermeasures) * ICE_PENALTY_PER_COUNTERMEASURE
    )
    return clamp_chance(chance)


def compute_bypass_chance(
    ice: IceType | str,
    intelligence: int,
    skill: int,
    program: ProgramDef | None = None,
    config: Config | None = None,
) -> int:
    """Percent chance of bypassing one countermeasure.

    Only programs built for ICE work (destroy, firewall bypass, forced
    entry) add their strength.
    """
    config = config or Config()
    program_bonus = 0
    if program is not None and program.effect in BYPASS_EFFECTS:
        program_bonus = program.strength * BYPASS_PROGRAM_BONUS_PER_STRENGTH
    chance = (
        BYPASS_BASE_CHANCE
        + intelligence_bonus(intelligence, config)
        + skill * BYPASS_SKILL_BONUS_PER_RANK
        + program_bonus
        - get_ice(ice).bypass_difficulty
    )
    return clamp_chance(chance)


def detection_chance(terminal: Terminal, config: Config) -> int:
    return config.detection_base_chance + terminal.security_level * DETECTION_PER_SECURITY_LEVEL


def failure_damage(terminal: Terminal) -> int:
    """Every ICE still active hits back on a failed hack."""
    return sum(get_ice(ice).damage_on_fail for ice in terminal.active_countermeasures)


def compute_experience(terminal: Terminal) -> int:
    tier = get_difficulty(get_terminal_class(terminal.terminal_class).difficulty)
    return math.floor(BASE_EXPERIENCE * tier.experience_multiplier * terminal.security_level)


def detection_trace_increase(terminal: Terminal, config: Config) -> int:
    return config.detection_trace_base + terminal.security_level * config.detection_trace_per_level
