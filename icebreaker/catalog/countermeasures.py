"""Intrusion countermeasure (ICE) catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IceEffect(str, Enum):
    """What an ICE does when it is active or when a bypass fails."""

    BLOCKS_PROGRESS = "blocks-progress"
    ALERTS_ON_DETECT = "alerts-on-detect"
    DAMAGES_HACKER = "damages-hacker"
    SEVERE_DAMAGE = "severe-damage"
    HIDES_DATA = "hides-data"
    EQUIPMENT_DAMAGE = "equipment-damage"
    PURSUES_HACKER = "pursues-hacker"


class IceType(str, Enum):
    """Known countermeasure programs."""

    FIREWALL = "Firewall"
    TRACER = "Tracer"
    WATCHDOG = "Watchdog"
    BLACK_ICE = "BlackICE"
    KILLER = "Killer"
    DATA_MAZE = "DataMaze"
    FRYER = "Fryer"
    HOUND = "Hound"


@dataclass(frozen=True)
class IceDef:
    """Static description of one countermeasure type."""

    type: IceType
    description: str
    strength: int
    effect: IceEffect
    bypass_difficulty: int
    damage_on_fail: int
    equipment_damage: int = 0


ICE_TABLE: dict[IceType, IceDef] = {
    IceType.FIREWALL: IceDef(
        type=IceType.FIREWALL,
        description="Packet filter that blocks unauthenticated sessions",
        strength=1,
        effect=IceEffect.BLOCKS_PROGRESS,
        bypass_difficulty=10,
        damage_on_fail=0,
    ),
    IceType.TRACER: IceDef(
        type=IceType.TRACER,
        description="Logs the connection route and raises an alert",
        strength=2,
        effect=IceEffect.ALERTS_ON_DETECT,
        bypass_difficulty=15,
        damage_on_fail=0,
    ),
    IceType.WATCHDOG: IceDef(
        type=IceType.WATCHDOG,
        description="Monitors process activity and pages security",
        strength=3,
        effect=IceEffect.ALERTS_ON_DETECT,
        bypass_difficulty=20,
        damage_on_fail=5,
    ),
    IceType.BLACK_ICE: IceDef(
        type=IceType.BLACK_ICE,
        description="Feedback routine that injures the intruder",
        strength=4,
        effect=IceEffect.DAMAGES_HACKER,
        bypass_difficulty=30,
        damage_on_fail=15,
    ),
    IceType.KILLER: IceDef(
        type=IceType.KILLER,
        description="Lethal neural feedback",
        strength=6,
        effect=IceEffect.SEVERE_DAMAGE,
        bypass_difficulty=45,
        damage_on_fail=40,
    ),
    IceType.DATA_MAZE: IceDef(
        type=IceType.DATA_MAZE,
        description="Scrambles directory structure to hide records",
        strength=2,
        effect=IceEffect.HIDES_DATA,
        bypass_difficulty=15,
        damage_on_fail=0,
    ),
    IceType.FRYER: IceDef(
        type=IceType.FRYER,
        description="Overvolts the intruder's deck",
        strength=3,
        effect=IceEffect.EQUIPMENT_DAMAGE,
        bypass_difficulty=25,
        damage_on_fail=5,
        equipment_damage=20,
    ),
    IceType.HOUND: IceDef(
        type=IceType.HOUND,
        description="Follows the connection back and dispatches a response team",
        strength=5,
        effect=IceEffect.PURSUES_HACKER,
        bypass_difficulty=35,
        damage_on_fail=10,
    ),
}


def get_ice(ice: IceType | str) -> IceDef:
    """Look up an ICE definition by enum member or display name."""
    return ICE_TABLE[IceType(ice)]
