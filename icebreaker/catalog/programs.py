"""Hacking programs the player can own and run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProgramEffect(str, Enum):
    """What a hacking program is built to do."""

    DESTROY_ICE = "destroy-ice"
    BYPASS_FIREWALL = "bypass-firewall"
    FORCE_ENTRY = "force-entry"
    DECRYPT = "decrypt"
    STEALTH = "stealth"
    SCAN = "scan"


# Effects that help against a single countermeasure
BYPASS_EFFECTS: frozenset[ProgramEffect] = frozenset(
    {ProgramEffect.DESTROY_ICE, ProgramEffect.BYPASS_FIREWALL, ProgramEffect.FORCE_ENTRY}
)


@dataclass(frozen=True)
class ProgramDef:
    """Static description of a hacking program."""

    name: str
    description: str
    strength: int
    effect: ProgramEffect
    cost: int


class ProgramRegistry:
    """Lookup table of every known hacking program, keyed by name."""

    def __init__(self, programs: list[ProgramDef] | None = None) -> None:
        self._programs: dict[str, ProgramDef] = {}
        for p in programs if programs is not None else _build_program_list():
            self._programs[p.name] = p

    def get(self, name: str) -> ProgramDef:
        """Get a program by name."""
        return self._programs[name]

    def find(self, name: str) -> ProgramDef | None:
        return self._programs.get(name)

    def get_by_effect(self, effect: ProgramEffect) -> list[ProgramDef]:
        """Get all programs with an effect."""
        return [p for p in self._programs.values() if p.effect == effect]

    def all_names(self) -> list[str]:
        return list(self._programs.keys())

    def __len__(self) -> int:
        return len(self._programs)

    def __contains__(self, name: str) -> bool:
        return name in self._programs


def _build_program_list() -> list[ProgramDef]:
    return [
        ProgramDef("IceBreaker", "Shatters a single countermeasure", 3, ProgramEffect.DESTROY_ICE, 800),
        ProgramDef("Shredder", "Military grade ICE destroyer", 5, ProgramEffect.DESTROY_ICE, 2500),
        ProgramDef("Tunneler", "Opens a hole through packet filters", 2, ProgramEffect.BYPASS_FIREWALL, 400),
        ProgramDef("Crowbar", "Brute-forces login prompts", 2, ProgramEffect.FORCE_ENTRY, 300),
        ProgramDef("Battering Ram", "Floods authentication until it gives", 4, ProgramEffect.FORCE_ENTRY, 1200),
        ProgramDef("Decryptor", "Cracks weak file encryption", 2, ProgramEffect.DECRYPT, 500),
        ProgramDef("Ghost", "Masks the connection origin", 3, ProgramEffect.STEALTH, 1000),
        ProgramDef("Sniffer", "Maps services and ICE on a terminal", 1, ProgramEffect.SCAN, 150),
    ]
