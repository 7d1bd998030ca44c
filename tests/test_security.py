"""Security response: trace meter and alert lifecycle."""

from icebreaker.config import Config
from icebreaker.engine import IntrusionEngine
from icebreaker.events import EventType, RecordingSink
from icebreaker.results import ALERT_NOT_FOUND
from icebreaker.security.alerts import AlertBoard
from icebreaker.security.trace import TRACE_MAX, TraceMeter


class _Clock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def _raise(board, faction="ncpd", location="civic"):
    return board.raise_alert("t1", location, faction, "runner", severity=3)


def test_trace_is_clamped():
    """Trace stays within [0, 100]."""
    trace = TraceMeter()
    assert trace.add(70) == 70
    assert trace.add(70) == TRACE_MAX
    assert trace.reduce(500) == 0
    assert trace.add(-20) == 0
    assert TraceMeter(level=250).level == TRACE_MAX


def test_trace_maxed_published_once():
    """Reaching 100 publishes one event per crossing."""
    sink = RecordingSink()
    trace = TraceMeter(sink=sink)
    trace.add(100)
    trace.add(10)
    assert trace.maxed
    assert len(sink.events(EventType.TRACE_MAXED)) == 1
    trace.reduce(1)
    trace.add(1)
    assert len(sink.events(EventType.TRACE_MAXED)) == 2


def test_trace_decay():
    """Decay removes floor(minutes x rate / 60)."""
    trace = TraceMeter(level=50)
    assert trace.decay(60, 10) == 10
    assert trace.level == 40
    assert trace.decay(5, 10) == 0
    assert trace.decay(6000, 10) == 40
    assert trace.level == 0


def test_alert_expiry_uses_clock():
    """Alerts stop being active at the duration and are purged once past it."""
    clock = _Clock(1000.0)
    board = AlertBoard(3600, clock=clock)
    alert = _raise(board)
    assert board.query(active_only=True) == [alert]
    clock.now = 1000.0 + 3599
    assert board.is_active(alert)
    clock.now = 1000.0 + 3600
    assert not board.is_active(alert)
    assert board.query(active_only=True) == []
    assert board.query() == [alert]
    assert board.purge_expired() == 0
    clock.now = 1000.0 + 3601
    assert board.purge_expired() == 1
    assert len(board) == 0


def test_alert_queries():
    """Alerts filter by faction and location."""
    board = AlertBoard(3600, clock=_Clock())
    a = _raise(board, "ncpd", "civic")
    b = _raise(board, "arasaka", "financial")
    assert board.query(faction_id="ncpd") == [a]
    assert board.query(location_id="financial") == [b]
    assert board.query(faction_id="ncpd", location_id="financial") == []
    assert board.get(a.id) is a
    assert a.id != b.id


def test_clear_alerts():
    """Alerts clear by id, by faction or all at once."""
    board = AlertBoard(3600, clock=_Clock())
    a = _raise(board, "ncpd")
    _raise(board, "ncpd")
    _raise(board, "arasaka")
    assert board.clear(a.id)
    assert not board.clear(a.id)
    assert board.clear_faction("ncpd") == 1
    assert board.clear_all() == 1
    assert board.all() == []


def test_allied_standing_clears_alerts():
    """Becoming allied wipes that faction's alerts; other standings do not."""
    board = AlertBoard(3600, clock=_Clock())
    _raise(board, "ncpd")
    assert board.on_faction_standing_changed("ncpd", "hostile") == 0
    assert board.on_faction_standing_changed("ncpd", "Allied") == 1
    assert board.query(faction_id="ncpd") == []


def test_engine_time_advance():
    """Time passing decays trace and purges stale alerts."""
    clock = _Clock(0.0)
    engine = IntrusionEngine(Config(alert_duration_seconds=60), clock=clock)
    engine.add_trace(30)
    engine.alerts.raise_alert("t1", None, "ncpd", "runner", 1)
    clock.now = 120.0
    summary = engine.on_time_advanced(120)
    assert summary == {"trace_reduced": 20, "alerts_purged": 1, "trace_level": 10}
    assert engine.query_alerts() == []


def test_engine_alert_helpers():
    """Clearing an unknown alert is a rejection, not an error."""
    engine = IntrusionEngine(clock=_Clock())
    alert = engine.alerts.raise_alert("t1", "civic", "ncpd", "runner", 2)
    assert engine.clear_alert("nope").reason == ALERT_NOT_FOUND
    assert engine.clear_alert(alert.id).ok
    engine.alerts.raise_alert("t1", "civic", "ncpd", "runner", 2)
    assert engine.on_faction_standing_changed("ncpd", "allied") == 1
    engine.alerts.raise_alert("t1", "civic", "mox", "runner", 2)
    assert engine.clear_all_alerts() == 1
    assert engine.reduce_trace(5) == 0
