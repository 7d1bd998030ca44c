"""Terminal classes and difficulty tiers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from icebreaker.catalog.countermeasures import IceType
from icebreaker.catalog.data import DataCategory


class DifficultyTier(str, Enum):
    """Named difficulty buckets, easiest first."""

    VERY_EASY = "VeryEasy"
    EASY = "Easy"
    MODERATE = "Moderate"
    HARD = "Hard"
    VERY_HARD = "VeryHard"
    EXTREME = "Extreme"
    IMPOSSIBLE = "Impossible"


@dataclass(frozen=True)
class DifficultyDef:
    tier: DifficultyTier
    base_chance: int
    experience_multiplier: float


DIFFICULTY_TABLE: dict[DifficultyTier, DifficultyDef] = {
    DifficultyTier.VERY_EASY: DifficultyDef(DifficultyTier.VERY_EASY, 90, 0.5),
    DifficultyTier.EASY: DifficultyDef(DifficultyTier.EASY, 75, 0.75),
    DifficultyTier.MODERATE: DifficultyDef(DifficultyTier.MODERATE, 60, 1.0),
    DifficultyTier.HARD: DifficultyDef(DifficultyTier.HARD, 40, 1.5),
    DifficultyTier.VERY_HARD: DifficultyDef(DifficultyTier.VERY_HARD, 25, 2.0),
    DifficultyTier.EXTREME: DifficultyDef(DifficultyTier.EXTREME, 15, 3.0),
    DifficultyTier.IMPOSSIBLE: DifficultyDef(DifficultyTier.IMPOSSIBLE, 5, 5.0),
}


class TerminalClass(str, Enum):
    """Kinds of hackable terminals."""

    PUBLIC = "Public"
    PERSONAL = "Personal"
    CORPORATE = "Corporate"
    BANK = "Bank"
    MEDICAL = "Medical"
    RESEARCH = "Research"
    POLICE = "Police"
    SECURITY = "Security"
    GOVERNMENT = "Government"
    MILITARY = "Military"


@dataclass(frozen=True)
class TerminalClassDef:
    """Defaults and rewards for one terminal class."""

    terminal_class: TerminalClass
    description: str
    base_security: int
    countermeasures: tuple[IceType, ...]
    data_categories: tuple[DataCategory, ...]
    difficulty: DifficultyTier
    reward_range: tuple[int, int]


TERMINAL_CLASS_TABLE: dict[TerminalClass, TerminalClassDef] = {
    TerminalClass.PUBLIC: TerminalClassDef(
        terminal_class=TerminalClass.PUBLIC,
        description="Library kiosk or info booth",
        base_security=1,
        countermeasures=(),
        data_categories=(DataCategory.EMAILS,),
        difficulty=DifficultyTier.VERY_EASY,
        reward_range=(10, 50),
    ),
    TerminalClass.PERSONAL: TerminalClassDef(
        terminal_class=TerminalClass.PERSONAL,
        description="Home computer",
        base_security=1,
        countermeasures=(IceType.FIREWALL,),
        data_categories=(DataCategory.EMAILS, DataCategory.PERSONAL_RECORDS, DataCategory.CREDITS),
        difficulty=DifficultyTier.EASY,
        reward_range=(20, 150),
    ),
    TerminalClass.CORPORATE: TerminalClassDef(
        terminal_class=TerminalClass.CORPORATE,
        description="Office workstation on a company network",
        base_security=2,
        countermeasures=(IceType.FIREWALL, IceType.TRACER),
        data_categories=(
            DataCategory.EMAILS,
            DataCategory.CORPORATE_SECRETS,
            DataCategory.FINANCIAL_RECORDS,
            DataCategory.TRANSFERS,
        ),
        difficulty=DifficultyTier.MODERATE,
        reward_range=(200, 1000),
    ),
    TerminalClass.BANK: TerminalClassDef(
        terminal_class=TerminalClass.BANK,
        description="Bank teller or ATM back end",
        base_security=4,
        countermeasures=(IceType.FIREWALL, IceType.TRACER, IceType.BLACK_ICE),
        data_categories=(DataCategory.CREDITS, DataCategory.TRANSFERS, DataCategory.FINANCIAL_RECORDS),
        difficulty=DifficultyTier.HARD,
        reward_range=(1000, 5000),
    ),
    TerminalClass.MEDICAL: TerminalClassDef(
        terminal_class=TerminalClass.MEDICAL,
        description="Hospital records station",
        base_security=2,
        countermeasures=(IceType.FIREWALL, IceType.DATA_MAZE),
        data_categories=(DataCategory.MEDICAL_RECORDS, DataCategory.PERSONAL_RECORDS),
        difficulty=DifficultyTier.MODERATE,
        reward_range=(100, 600),
    ),
    TerminalClass.RESEARCH: TerminalClassDef(
        terminal_class=TerminalClass.RESEARCH,
        description="Laboratory data server",
        base_security=3,
        countermeasures=(IceType.FIREWALL, IceType.DATA_MAZE, IceType.FRYER),
        data_categories=(DataCategory.RESEARCH_DATA, DataCategory.BLUEPRINTS, DataCategory.EMAILS),
        difficulty=DifficultyTier.HARD,
        reward_range=(300, 1500),
    ),
    TerminalClass.POLICE: TerminalClassDef(
        terminal_class=TerminalClass.POLICE,
        description="Precinct dispatch and records terminal",
        base_security=4,
        countermeasures=(IceType.FIREWALL, IceType.TRACER, IceType.HOUND),
        data_categories=(DataCategory.POLICE_RECORDS, DataCategory.PERSONAL_RECORDS),
        difficulty=DifficultyTier.VERY_HARD,
        reward_range=(200, 800),
    ),
    TerminalClass.SECURITY: TerminalClassDef(
        terminal_class=TerminalClass.SECURITY,
        description="Building security console",
        base_security=3,
        countermeasures=(IceType.FIREWALL, IceType.WATCHDOG),
        data_categories=(DataCategory.SECURITY_CODES, DataCategory.BLUEPRINTS),
        difficulty=DifficultyTier.HARD,
        reward_range=(100, 500),
    ),
    TerminalClass.GOVERNMENT: TerminalClassDef(
        terminal_class=TerminalClass.GOVERNMENT,
        description="Ministry or city hall mainframe",
        base_security=5,
        countermeasures=(IceType.FIREWALL, IceType.TRACER, IceType.WATCHDOG, IceType.BLACK_ICE),
        data_categories=(
            DataCategory.PERSONAL_RECORDS,
            DataCategory.FINANCIAL_RECORDS,
            DataCategory.SECURITY_CODES,
        ),
        difficulty=DifficultyTier.EXTREME,
        reward_range=(500, 3000),
    ),
    TerminalClass.MILITARY: TerminalClassDef(
        terminal_class=TerminalClass.MILITARY,
        description="Military command node",
        base_security=6,
        countermeasures=(IceType.FIREWALL, IceType.WATCHDOG, IceType.KILLER, IceType.HOUND),
        data_categories=(DataCategory.MILITARY_INTEL, DataCategory.SECURITY_CODES, DataCategory.BLUEPRINTS),
        difficulty=DifficultyTier.IMPOSSIBLE,
        reward_range=(2000, 10000),
    ),
}


def get_terminal_class(terminal_class: TerminalClass | str) -> TerminalClassDef:
    """Look up a terminal class definition by enum member or name."""
    return TERMINAL_CLASS_TABLE[TerminalClass(terminal_class)]


def get_difficulty(tier: DifficultyTier | str) -> DifficultyDef:
    return DIFFICULTY_TABLE[DifficultyTier(tier)]
