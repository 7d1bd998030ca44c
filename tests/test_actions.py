"""Post-compromise actions: data theft and terminal actions."""

from scripted import ScriptedRandom

from icebreaker.actions.terminal_actions import ELIGIBLE_CLASSES, TerminalAction
from icebreaker.catalog.data import DataCategory
from icebreaker.catalog.terminals import TerminalClass
from icebreaker.config import Config
from icebreaker.engine import IntrusionEngine
from icebreaker.events import EventType, RecordingSink
from icebreaker.results import (
    ACTION_INELIGIBLE,
    ACTION_NOT_FOUND,
    BACKDOOR_EXISTS,
    DATA_CATEGORY_NOT_FOUND,
    DATA_CATEGORY_UNAVAILABLE,
    NO_DATA_AVAILABLE,
    NOT_COMPROMISED,
    TERMINAL_INACTIVE,
    TERMINAL_NOT_FOUND,
)


def _make_engine(rolls=(), choices=(), sink=None):
    return IntrusionEngine(
        Config(alarm_disable_seconds=120),
        sink=sink,
        rng=ScriptedRandom(rolls, choices),
        clock=lambda: 1000.0,
    )


def _owned(engine, terminal_id, terminal_class, **kwargs):
    engine.create_terminal(terminal_id, terminal_id, terminal_class, **kwargs)
    terminal = engine.get_terminal(terminal_id)
    terminal.compromised = True
    return terminal


# ── Data theft ──


def test_theft_requires_compromise():
    """Uncompromised terminals refuse theft without raising."""
    engine = _make_engine()
    engine.create_terminal("bank", "Bank", "Bank")
    assert engine.steal_data("bank", "runner").reason == NOT_COMPROMISED
    assert engine.steal_data("missing", "runner").reason == TERMINAL_NOT_FOUND


def test_credits_never_become_records():
    """Stealing Credits adds only to credits_stolen."""
    engine = _make_engine(rolls=[2500])
    _owned(engine, "bank", "Bank")
    result = engine.steal_data("bank", "runner", DataCategory.CREDITS)
    assert result.ok
    assert result.stolen == []
    assert result.credits_stolen == 2500
    assert result.data_value == 0


def test_steal_all_mixes_credits_and_records():
    """Every category is taken; records carry value and legality."""
    sink = RecordingSink()
    engine = _make_engine(rolls=[1000, 4000], sink=sink)
    terminal = _owned(engine, "bank", "Bank")
    result = engine.steal_data("bank", "runner", steal_all=True)
    assert result.credits_stolen == 5000
    assert [s.category for s in result.stolen] == [DataCategory.FINANCIAL_RECORDS]
    record = result.stolen[0]
    assert record.value == 80 * 4
    assert record.illegal
    assert result.data_value == 320
    assert terminal.access_log[-1].action == "steal_data"
    payload = sink.events(EventType.DATA_STOLEN)[-1].payload
    assert payload["categories"] == ["Credits", "Transfers", "FinancialRecords"]


def test_random_category_uses_choice():
    """Without a category one is picked at random."""
    engine = _make_engine(choices=[1])
    _owned(engine, "pc", "Personal")
    result = engine.steal_data("pc", "runner")
    assert [s.category for s in result.stolen] == [DataCategory.PERSONAL_RECORDS]
    assert result.data_value == 40


def test_theft_edge_cases():
    """Empty terminals and missing categories are defined failures."""
    engine = _make_engine()
    _owned(engine, "blank", "Public", data_categories=[])
    assert engine.steal_data("blank", "runner").reason == NO_DATA_AVAILABLE
    _owned(engine, "kiosk", "Public")
    result = engine.steal_data("kiosk", "runner", "MilitaryIntel")
    assert result.reason == DATA_CATEGORY_UNAVAILABLE


def test_unknown_category_is_rejected():
    """A category outside the data catalog is a rejection, not an error."""
    engine = _make_engine()
    _owned(engine, "bank", "Bank")
    result = engine.steal_data("bank", "runner", "Bitcoin")
    assert result.rejected
    assert result.reason == DATA_CATEGORY_NOT_FOUND
    assert engine.get_terminal("bank").access_log == []


def test_zero_security_still_has_value():
    """Record value never drops to zero on security 0 terminals."""
    engine = _make_engine()
    _owned(engine, "kiosk", "Public", security_level=0)
    result = engine.steal_data("kiosk", "runner", "Emails")
    assert result.data_value == 15


# ── Terminal actions ──


def test_actions_require_compromise_then_active():
    """Compromise is checked before activity."""
    engine = _make_engine()
    engine.create_terminal("sec", "Sec", "Security")
    assert engine.execute_action("sec", "r", "open_doors").reason == NOT_COMPROMISED
    terminal = engine.get_terminal("sec")
    terminal.compromised = True
    terminal.active = False
    assert engine.execute_action("sec", "r", "open_doors").reason == TERMINAL_INACTIVE
    assert engine.execute_action("nope", "r", "open_doors").reason == TERMINAL_NOT_FOUND


def test_eligibility_rules():
    """Turrets and transfers are limited to specific classes."""
    engine = _make_engine()
    _owned(engine, "pc", "Personal")
    result = engine.execute_action("pc", "r", TerminalAction.CONTROL_TURRETS)
    assert result.rejected
    assert result.reason.startswith(ACTION_INELIGIBLE)
    assert ELIGIBLE_CLASSES[TerminalAction.CONTROL_TURRETS] == {
        TerminalClass.SECURITY,
        TerminalClass.MILITARY,
    }
    assert TerminalAction.TRANSFER_CREDITS not in engine.actions.available("pc")
    assert TerminalAction.PLANT_BACKDOOR in engine.actions.available("pc")


def test_disable_alarms_sets_expiry():
    """Alarm shutdown lasts the configured duration."""
    engine = _make_engine()
    terminal = _owned(engine, "sec", "Security")
    result = engine.execute_action("sec", "r", "disable_alarms")
    assert result.ok
    assert result.duration_seconds == 120
    assert terminal.content["alarms_disabled_until"] == 1120.0


def test_turrets_and_doors():
    """Facility actions write their state to terminal content."""
    engine = _make_engine()
    terminal = _owned(engine, "sec", "Security")
    engine.execute_action("sec", "runner", "control_turrets")
    engine.execute_action("sec", "runner", "open_doors")
    assert terminal.content["turrets_controlled_by"] == "runner"
    assert terminal.content["doors_open"] is True


def test_transfer_credits_rolls_reward():
    """Transfers pay out from the class reward range."""
    engine = _make_engine(rolls=[3333])
    _owned(engine, "bank", "Bank")
    result = engine.execute_action("bank", "r", "transfer_credits")
    assert result.credits == 3333


def test_backdoor_only_once():
    """A second backdoor is refused."""
    engine = _make_engine()
    terminal = _owned(engine, "pc", "Personal")
    assert engine.execute_action("pc", "r", "plant_backdoor").ok
    assert terminal.backdoor
    assert engine.execute_action("pc", "r", "plant_backdoor").reason == BACKDOOR_EXISTS


def test_wipe_access_log_leaves_it_empty():
    """Wiping removes every entry, including the wipe itself."""
    engine = _make_engine()
    terminal = _owned(engine, "pc", "Personal")
    engine.execute_action("pc", "r", "open_doors")  # ineligible, leaves no trace
    engine.execute_action("pc", "r", "plant_backdoor")
    assert len(terminal.access_log) == 1
    result = engine.execute_action("pc", "r", "wipe_access_log")
    assert result.details["entries_removed"] == 1
    assert terminal.access_log == []


def test_overload_shuts_terminal_down():
    """Overload deactivates the terminal and announces it."""
    sink = RecordingSink()
    engine = _make_engine(sink=sink)
    terminal = _owned(engine, "pc", "Personal")
    assert engine.execute_action("pc", "r", "overload_system").ok
    assert not terminal.active
    assert sink.events(EventType.TERMINAL_STATUS_CHANGED)[-1].payload["active"] is False
    assert engine.execute_action("pc", "r", "plant_backdoor").reason == TERMINAL_INACTIVE


def test_unknown_action_is_rejected():
    """An action outside the catalog is refused once the terminal is found."""
    engine = _make_engine()
    terminal = _owned(engine, "pc", "Personal")
    result = engine.execute_action("pc", "r", "launch_missiles")
    assert result.rejected
    assert result.reason == ACTION_NOT_FOUND
    assert result.action == "launch_missiles"
    assert terminal.access_log == []
    assert engine.execute_action("nope", "r", "launch_missiles").reason == TERMINAL_NOT_FOUND
