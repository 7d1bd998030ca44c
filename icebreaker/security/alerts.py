"""Security alert lifecycle: creation, queries, clearing and expiry.

Alert age is computed from the injected clock at query time; nothing runs
in the background.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from icebreaker.events import EventSink, EventType, publish

log = logging.getLogger(__name__)

INTRUSION_ATTEMPT = "intrusion_attempt"
ICE_ALERT = "ice_alert"

ALLIED = "allied"


class SecurityAlert(BaseModel):
    """Transient record of a detected intrusion attempt."""

    model_config = ConfigDict(frozen=True)

    id: str
    terminal_id: str
    location_id: str | None = None
    faction_id: str | None = None
    suspect_id: str | None = None
    created_at: float
    alert_type: str = INTRUSION_ATTEMPT
    severity: int = 0


class AlertBoard:
    """Holds the open security alerts of one engine instance."""

    def __init__(
        self,
        alert_duration_seconds: int,
        sink: EventSink | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.alert_duration_seconds = alert_duration_seconds
        self.sink = sink
        self.clock = clock
        self._alerts: dict[str, SecurityAlert] = {}

    def raise_alert(
        self,
        terminal_id: str,
        location_id: str | None,
        faction_id: str | None,
        suspect_id: str | None,
        severity: int,
        alert_type: str = INTRUSION_ATTEMPT,
    ) -> SecurityAlert:
        alert = SecurityAlert(
            id=f"alert-{uuid.uuid4().hex[:12]}",
            terminal_id=terminal_id,
            location_id=location_id,
            faction_id=faction_id,
            suspect_id=suspect_id,
            created_at=self.clock(),
            alert_type=alert_type,
            severity=severity,
        )
        self._alerts[alert.id] = alert
        publish(self.sink, EventType.SECURITY_ALERT, alert.model_dump(mode="json"))
        log.info(
            "Security alert %s on terminal %s (severity %d, suspect %s)",
            alert.id,
            terminal_id,
            severity,
            suspect_id,
        )
        return alert

    def add(self, alert: SecurityAlert) -> None:
        """Insert an existing alert without publishing."""
        self._alerts[alert.id] = alert

    def get(self, alert_id: str) -> SecurityAlert | None:
        return self._alerts.get(alert_id)

    def is_active(self, alert: SecurityAlert, now: float | None = None) -> bool:
        now = self.clock() if now is None else now
        return now - alert.created_at < self.alert_duration_seconds

    def query(
        self,
        faction_id: str | None = None,
        location_id: str | None = None,
        active_only: bool = False,
    ) -> list[SecurityAlert]:
        """Alerts matching every supplied filter, oldest first."""
        now = self.clock()
        return [
            a
            for a in self._alerts.values()
            if (faction_id is None or a.faction_id == faction_id)
            and (location_id is None or a.location_id == location_id)
            and (not active_only or self.is_active(a, now))
        ]

    def clear(self, alert_id: str) -> bool:
        return self._alerts.pop(alert_id, None) is not None

    def clear_faction(self, faction_id: str) -> int:
        doomed = [a.id for a in self._alerts.values() if a.faction_id == faction_id]
        for alert_id in doomed:
            del self._alerts[alert_id]
        return len(doomed)

    def clear_all(self) -> int:
        count = len(self._alerts)
        self._alerts.clear()
        return count

    def purge_expired(self) -> int:
        """Drop alerts whose age exceeds the alert duration."""
        now = self.clock()
        doomed = [
            a.id for a in self._alerts.values() if now - a.created_at > self.alert_duration_seconds
        ]
        for alert_id in doomed:
            del self._alerts[alert_id]
        if doomed:
            log.debug("Purged %d expired alerts", len(doomed))
        return len(doomed)

    def on_faction_standing_changed(self, faction_id: str, standing: str) -> int:
        """Allied factions forget their alerts."""
        if standing.lower() != ALLIED:
            return 0
        return self.clear_faction(faction_id)

    def all(self) -> list[SecurityAlert]:
        return list(self._alerts.values())

    def __len__(self) -> int:
        return len(self._alerts)
