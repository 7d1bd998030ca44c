"""Pre-built terminal layouts for demos and tests."""

from __future__ import annotations

from icebreaker.catalog.countermeasures import IceType
from icebreaker.catalog.data import DataCategory
from icebreaker.catalog.terminals import TerminalClass
from icebreaker.network.registry import TerminalRegistry


def sample_city(target=None):
    """Populate a small city of terminals and networks.

    ``target`` is anything exposing ``create_terminal`` and
    ``create_network`` (a TerminalRegistry or an IntrusionEngine); a fresh
    registry is built when omitted. Returns the populated target.

    Districts:
        - Downtown: public kiosk, two apartments
        - Financial: corporate office pair, bank vault
        - Uptown: hospital, research lab
        - Civic: police precinct, security hub, city hall, army depot
    """
    target = target if target is not None else TerminalRegistry()

    # ── Downtown ──
    target.create_terminal("kiosk-01", "Library Kiosk", TerminalClass.PUBLIC, location_id="downtown")
    for i in (1, 2):
        target.create_terminal(
            f"apt-{i:02d}",
            f"Apartment {i} PC",
            TerminalClass.PERSONAL,
            location_id="downtown",
            owner_id=f"resident-{i:02d}",
        )

    # ── Financial district ──
    for i in (1, 2):
        target.create_terminal(
            f"corp-ws-{i:02d}",
            f"Arasaka Workstation {i}",
            TerminalClass.CORPORATE,
            location_id="financial",
            faction_id="arasaka",
        )
    target.create_terminal(
        "bank-vault",
        "First Orbital Vault Controller",
        TerminalClass.BANK,
        location_id="financial",
        faction_id="first-orbital",
        requires_physical_access=True,
    )

    # ── Uptown ──
    target.create_terminal(
        "hospital-01",
        "Mercy General Records",
        TerminalClass.MEDICAL,
        location_id="uptown",
        faction_id="mercy",
    )
    target.create_terminal(
        "lab-01",
        "Biotechnica Lab Server",
        TerminalClass.RESEARCH,
        location_id="uptown",
        faction_id="biotechnica",
        data_categories=[DataCategory.RESEARCH_DATA, DataCategory.BLUEPRINTS],
    )

    # ── Civic ──
    target.create_terminal(
        "precinct-01",
        "Precinct 9 Case Server",
        TerminalClass.POLICE,
        location_id="civic",
        faction_id="ncpd",
    )
    target.create_terminal(
        "sec-hub-01",
        "Civic Security Hub",
        TerminalClass.SECURITY,
        location_id="civic",
        faction_id="ncpd",
        data_categories=[DataCategory.SECURITY_CODES],
    )
    target.create_terminal(
        "city-hall",
        "City Hall Mainframe",
        TerminalClass.GOVERNMENT,
        location_id="civic",
        faction_id="council",
    )
    target.create_terminal(
        "army-depot",
        "Militech Depot Command",
        TerminalClass.MILITARY,
        location_id="civic",
        faction_id="militech",
        countermeasures=[IceType.FIREWALL, IceType.BLACK_ICE, IceType.KILLER, IceType.HOUND],
        requires_physical_access=True,
    )

    # ── Networks ──
    target.create_network(
        "arasaka-lan",
        "Arasaka Office LAN",
        owner_id="arasaka",
        faction_id="arasaka",
        security_level=2,
        member_ids=["corp-ws-01", "corp-ws-02"],
    )
    target.create_network(
        "ncpd-net",
        "NCPD Secure Net",
        owner_id="ncpd",
        faction_id="ncpd",
        security_level=4,
        member_ids=["precinct-01", "sec-hub-01"],
    )
    return target
