"""Terminal and network registry."""

import pytest
from pydantic import ValidationError

from icebreaker.catalog.countermeasures import IceType
from icebreaker.catalog.data import DataCategory
from icebreaker.catalog.terminals import TerminalClass
from icebreaker.events import EventType, RecordingSink
from icebreaker.network.models import Terminal
from icebreaker.network.registry import TerminalRegistry
from icebreaker.network.topology import sample_city
from icebreaker.results import (
    NETWORK_EXISTS,
    NETWORK_NOT_FOUND,
    TERMINAL_EXISTS,
    TERMINAL_NOT_FOUND,
    ResultStatus,
)


def _make_registry(sink=None):
    return TerminalRegistry(sink, clock=lambda: 1000.0)


def test_create_terminal_fills_class_defaults():
    """Unset fields come from the terminal class."""
    registry = _make_registry()
    result = registry.create_terminal("bank-1", "Vault", TerminalClass.BANK)
    assert result.ok
    t = result.terminal
    assert t.security_level == 4
    assert t.countermeasures == [IceType.FIREWALL, IceType.TRACER, IceType.BLACK_ICE]
    assert t.active_countermeasures == t.countermeasures
    assert t.active_countermeasures is not t.countermeasures
    assert DataCategory.CREDITS in t.data_categories
    assert t.active and not t.compromised and not t.backdoor
    assert t.created_at == 1000.0


def test_create_terminal_overrides():
    """Explicit values win over class defaults."""
    registry = _make_registry()
    t = registry.create_terminal(
        "pc", "PC", "Personal", security_level=0, countermeasures=[], data_categories=["Emails"]
    ).terminal
    assert t.security_level == 0
    assert t.countermeasures == []
    assert t.data_categories == [DataCategory.EMAILS]


def test_duplicate_terminal_rejected():
    """A second terminal with the same id is rejected, not replaced."""
    registry = _make_registry()
    first = registry.create_terminal("t1", "One", "Public").terminal
    result = registry.create_terminal("t1", "Two", "Bank")
    assert result.status == ResultStatus.REJECTED
    assert result.reason == TERMINAL_EXISTS
    assert registry.get_terminal("t1") is first


def test_active_subset_invariant_enforced():
    """A terminal cannot list active ICE it does not have installed."""
    with pytest.raises(ValidationError):
        Terminal(
            id="x",
            name="x",
            terminal_class="Public",
            countermeasures=[IceType.FIREWALL],
            active_countermeasures=[IceType.HOUND],
        )


def test_find_terminals_filters():
    """Filters combine with AND."""
    registry = sample_city(_make_registry())
    downtown = registry.find_terminals(location_id="downtown")
    assert {t.id for t in downtown} == {"kiosk-01", "apt-01", "apt-02"}
    ncpd = registry.find_terminals(faction_id="ncpd", terminal_class="Police")
    assert [t.id for t in ncpd] == ["precinct-01"]
    registry.set_terminal_active("apt-01", False)
    active = registry.find_terminals(location_id="downtown", active_only=True)
    assert "apt-01" not in {t.id for t in active}
    assert registry.find_terminals(compromised_only=True) == []


def test_set_terminal_active_publishes():
    """Status changes go out on the sink."""
    sink = RecordingSink()
    registry = _make_registry(sink)
    registry.create_terminal("t1", "One", "Public")
    assert registry.set_terminal_active("t1", False).ok
    assert not registry.get_terminal("t1").active
    changed = sink.events(EventType.TERMINAL_STATUS_CHANGED)
    assert changed[-1].payload == {"terminal_id": "t1", "active": False}
    assert registry.set_terminal_active("missing", True).reason == TERMINAL_NOT_FOUND


def test_create_network_requires_existing_members():
    """Initial members must exist; duplicates collapse."""
    registry = _make_registry()
    registry.create_terminal("a", "A", "Corporate")
    registry.create_terminal("b", "B", "Corporate")
    result = registry.create_network("lan", "LAN", member_ids=["a", "b", "a"])
    assert result.ok
    assert result.network.member_ids == ["a", "b"]
    assert registry.create_network("lan", "Again").reason == NETWORK_EXISTS
    bad = registry.create_network("lan2", "LAN 2", member_ids=["a", "ghost"])
    assert bad.rejected
    assert "ghost" in bad.reason
    assert registry.get_network("lan2") is None


def test_membership_add_remove():
    """Adding twice is a no-op; membership mirrors into the graph."""
    registry = _make_registry()
    registry.create_terminal("a", "A", "Corporate")
    registry.create_network("lan", "LAN")
    assert registry.add_terminal_to_network("lan", "a").ok
    assert registry.add_terminal_to_network("lan", "a").ok
    assert registry.get_network("lan").member_ids == ["a"]
    assert [n.id for n in registry.networks_for_terminal("a")] == ["lan"]
    assert registry.graph.has_edge(("network", "lan"), ("terminal", "a"))

    assert registry.add_terminal_to_network("nope", "a").reason == NETWORK_NOT_FOUND
    assert registry.add_terminal_to_network("lan", "nope").reason == TERMINAL_NOT_FOUND

    assert registry.remove_terminal_from_network("lan", "a").ok
    assert registry.get_network("lan").member_ids == []
    assert registry.networks_for_terminal("a") == []


def test_delete_terminal_cascades_membership():
    """Deleting a terminal drops it from every network."""
    sink = RecordingSink()
    registry = sample_city(_make_registry(sink))
    result = registry.delete_terminal("corp-ws-01")
    assert result.ok
    assert registry.get_terminal("corp-ws-01") is None
    assert registry.get_network("arasaka-lan").member_ids == ["corp-ws-02"]
    assert ("terminal", "corp-ws-01") not in registry.graph
    assert sink.events(EventType.TERMINAL_DELETED)[-1].payload == {"terminal_id": "corp-ws-01"}
    assert registry.delete_terminal("corp-ws-01").reason == TERMINAL_NOT_FOUND


def test_network_online_and_delete():
    """Networks can be taken offline and deleted; members survive."""
    registry = sample_city(_make_registry())
    assert registry.set_network_online("ncpd-net", False).ok
    assert registry.find_networks(online_only=True) == [registry.get_network("arasaka-lan")]
    assert registry.delete_network("ncpd-net").ok
    assert registry.get_network("ncpd-net") is None
    assert registry.get_terminal("precinct-01") is not None
    assert registry.networks_for_terminal("precinct-01") == []
    assert registry.delete_network("ncpd-net").reason == NETWORK_NOT_FOUND


def test_network_compromised_when_all_members_are():
    """The network flag follows its members."""
    registry = sample_city(_make_registry())
    lan = registry.get_network("arasaka-lan")
    registry.get_terminal("corp-ws-01").compromised = True
    registry.refresh_network_compromise("corp-ws-01")
    assert not lan.compromised
    registry.get_terminal("corp-ws-02").compromised = True
    changed = registry.refresh_network_compromise("corp-ws-02")
    assert lan.compromised
    assert changed == [lan]


def _compromised_lan(registry):
    for terminal_id in ("a", "b"):
        registry.create_terminal(terminal_id, terminal_id.upper(), "Corporate")
        registry.get_terminal(terminal_id).compromised = True
    registry.create_terminal("c", "C", "Corporate")
    registry.create_network("lan", "LAN", member_ids=["a", "b"])
    return registry.get_network("lan")


def test_adding_clean_member_clears_network_compromise():
    """A new uncompromised member takes the network back out of compromise."""
    registry = _make_registry()
    lan = _compromised_lan(registry)
    assert lan.compromised
    registry.add_terminal_to_network("lan", "c")
    assert not lan.compromised


def test_removing_last_clean_member_compromises_network():
    """Dropping the only uncompromised member leaves a compromised network."""
    registry = _make_registry()
    lan = _compromised_lan(registry)
    registry.add_terminal_to_network("lan", "c")
    registry.remove_terminal_from_network("lan", "c")
    assert lan.compromised
    registry.remove_terminal_from_network("lan", "a")
    registry.remove_terminal_from_network("lan", "b")
    assert lan.member_ids == []
    assert not lan.compromised


def test_deleting_last_clean_member_compromises_network():
    """Deleting the only uncompromised member recomputes every network it was in."""
    registry = _make_registry()
    lan = _compromised_lan(registry)
    registry.add_terminal_to_network("lan", "c")
    assert not lan.compromised
    registry.delete_terminal("c")
    assert lan.compromised


def test_sample_city_counts():
    """The sample city is fully populated."""
    registry = sample_city()
    assert registry.terminal_count == 12
    assert registry.network_count == 2
    assert registry.get_terminal("bank-vault").requires_physical_access
