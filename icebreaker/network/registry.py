"""Registry of terminals and networks backed by a membership graph."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

import networkx as nx

from icebreaker.catalog.countermeasures import IceType
from icebreaker.catalog.data import DataCategory
from icebreaker.catalog.terminals import TerminalClass, get_terminal_class
from icebreaker.events import EventSink, EventType, publish
from icebreaker.network.models import Network, Terminal
from icebreaker.results import (
    NETWORK_EXISTS,
    NETWORK_NOT_FOUND,
    TERMINAL_EXISTS,
    TERMINAL_NOT_FOUND,
    RegistryResult,
    rejected,
)

log = logging.getLogger(__name__)


def _t(terminal_id: str) -> tuple[str, str]:
    return ("terminal", terminal_id)


def _n(network_id: str) -> tuple[str, str]:
    return ("network", network_id)


class TerminalRegistry:
    """Owns every Terminal and Network.

    Terminals and networks are nodes of an undirected networkx graph; an
    edge means "terminal is a member of network". Network.member_ids keeps
    the insertion order of that membership.
    """

    def __init__(
        self,
        sink: EventSink | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.graph = nx.Graph()
        self.sink = sink
        self.clock = clock
        self._terminals: dict[str, Terminal] = {}
        self._networks: dict[str, Network] = {}

    # ── Terminals ──

    def create_terminal(
        self,
        terminal_id: str,
        name: str,
        terminal_class: TerminalClass | str,
        location_id: str | None = None,
        owner_id: str | None = None,
        faction_id: str | None = None,
        security_level: int | None = None,
        countermeasures: Iterable[IceType | str] | None = None,
        data_categories: Iterable[DataCategory | str] | None = None,
        content: dict | None = None,
        requires_physical_access: bool = False,
    ) -> RegistryResult:
        """Create a terminal, filling unset fields from its class defaults."""
        if terminal_id in self._terminals:
            return rejected(TERMINAL_EXISTS, RegistryResult)

        defaults = get_terminal_class(terminal_class)
        ice = (
            [IceType(c) for c in countermeasures]
            if countermeasures is not None
            else list(defaults.countermeasures)
        )
        terminal = Terminal(
            id=terminal_id,
            name=name,
            terminal_class=defaults.terminal_class,
            location_id=location_id,
            owner_id=owner_id,
            faction_id=faction_id,
            security_level=(
                security_level if security_level is not None else defaults.base_security
            ),
            countermeasures=ice,
            active_countermeasures=list(ice),
            data_categories=(
                [DataCategory(c) for c in data_categories]
                if data_categories is not None
                else list(defaults.data_categories)
            ),
            content=dict(content or {}),
            requires_physical_access=requires_physical_access,
            created_at=self.clock(),
        )
        self.add_terminal(terminal)
        publish(self.sink, EventType.TERMINAL_CREATED, {
            "terminal_id": terminal.id,
            "terminal_class": terminal.terminal_class.value,
            "location_id": terminal.location_id,
            "faction_id": terminal.faction_id,
            "security_level": terminal.security_level,
        })
        log.debug("Created terminal %s (%s)", terminal.id, terminal.terminal_class.value)
        return RegistryResult(terminal=terminal)

    def add_terminal(self, terminal: Terminal) -> None:
        """Insert an already-built terminal node."""
        self._terminals[terminal.id] = terminal
        self.graph.add_node(_t(terminal.id), kind="terminal")

    def get_terminal(self, terminal_id: str) -> Terminal | None:
        return self._terminals.get(terminal_id)

    def find_terminals(
        self,
        location_id: str | None = None,
        terminal_class: TerminalClass | str | None = None,
        faction_id: str | None = None,
        active_only: bool = False,
        compromised_only: bool = False,
    ) -> list[Terminal]:
        """Terminals matching every supplied filter."""
        wanted_class = TerminalClass(terminal_class) if terminal_class is not None else None
        return [
            t
            for t in self._terminals.values()
            if (location_id is None or t.location_id == location_id)
            and (wanted_class is None or t.terminal_class == wanted_class)
            and (faction_id is None or t.faction_id == faction_id)
            and (not active_only or t.active)
            and (not compromised_only or t.compromised)
        ]

    def set_terminal_active(self, terminal_id: str, active: bool) -> RegistryResult:
        terminal = self._terminals.get(terminal_id)
        if terminal is None:
            return rejected(TERMINAL_NOT_FOUND, RegistryResult)
        terminal.active = active
        publish(self.sink, EventType.TERMINAL_STATUS_CHANGED, {
            "terminal_id": terminal_id,
            "active": active,
        })
        return RegistryResult(terminal=terminal)

    def delete_terminal(self, terminal_id: str) -> RegistryResult:
        """Remove a terminal and its network memberships.

        Networks it belonged to have their compromised flag recomputed.
        """
        terminal = self._terminals.pop(terminal_id, None)
        if terminal is None:
            return rejected(TERMINAL_NOT_FOUND, RegistryResult)
        networks = self.networks_for_terminal(terminal_id)
        for network in networks:
            network.member_ids.remove(terminal_id)
        self.graph.remove_node(_t(terminal_id))
        for network in networks:
            self._refresh_network(network)
        publish(self.sink, EventType.TERMINAL_DELETED, {"terminal_id": terminal_id})
        return RegistryResult(terminal=terminal)

    # ── Networks ──

    def create_network(
        self,
        network_id: str,
        name: str,
        owner_id: str | None = None,
        faction_id: str | None = None,
        security_level: int = 1,
        member_ids: Iterable[str] = (),
    ) -> RegistryResult:
        """Create a network; every initial member must already exist."""
        if network_id in self._networks:
            return rejected(NETWORK_EXISTS, RegistryResult)
        members = list(dict.fromkeys(member_ids))
        missing = [m for m in members if m not in self._terminals]
        if missing:
            return rejected(f"{TERMINAL_NOT_FOUND}: {', '.join(missing)}", RegistryResult)

        network = Network(
            id=network_id,
            name=name,
            owner_id=owner_id,
            faction_id=faction_id,
            security_level=security_level,
            member_ids=members,
            created_at=self.clock(),
        )
        self.add_network(network)
        self._refresh_network(network)
        publish(self.sink, EventType.NETWORK_CREATED, {
            "network_id": network.id,
            "faction_id": network.faction_id,
            "members": list(network.member_ids),
        })
        return RegistryResult(network=network)

    def add_network(self, network: Network) -> None:
        """Insert an already-built network node and its membership edges."""
        self._networks[network.id] = network
        self.graph.add_node(_n(network.id), kind="network")
        for terminal_id in network.member_ids:
            self.graph.add_edge(_n(network.id), _t(terminal_id))

    def get_network(self, network_id: str) -> Network | None:
        return self._networks.get(network_id)

    def find_networks(
        self,
        faction_id: str | None = None,
        online_only: bool = False,
        compromised_only: bool = False,
    ) -> list[Network]:
        return [
            n
            for n in self._networks.values()
            if (faction_id is None or n.faction_id == faction_id)
            and (not online_only or n.online)
            and (not compromised_only or n.compromised)
        ]

    def set_network_online(self, network_id: str, online: bool) -> RegistryResult:
        network = self._networks.get(network_id)
        if network is None:
            return rejected(NETWORK_NOT_FOUND, RegistryResult)
        network.online = online
        publish(self.sink, EventType.NETWORK_STATUS_CHANGED, {
            "network_id": network_id,
            "online": online,
        })
        return RegistryResult(network=network)

    def delete_network(self, network_id: str) -> RegistryResult:
        network = self._networks.pop(network_id, None)
        if network is None:
            return rejected(NETWORK_NOT_FOUND, RegistryResult)
        self.graph.remove_node(_n(network_id))
        return RegistryResult(network=network)

    def add_terminal_to_network(self, network_id: str, terminal_id: str) -> RegistryResult:
        """Add a member; a terminal that is already a member is left alone."""
        network = self._networks.get(network_id)
        if network is None:
            return rejected(NETWORK_NOT_FOUND, RegistryResult)
        if terminal_id not in self._terminals:
            return rejected(TERMINAL_NOT_FOUND, RegistryResult)
        if terminal_id not in network.member_ids:
            network.member_ids.append(terminal_id)
            self.graph.add_edge(_n(network_id), _t(terminal_id))
            self._refresh_network(network)
        return RegistryResult(network=network, terminal=self._terminals[terminal_id])

    def remove_terminal_from_network(self, network_id: str, terminal_id: str) -> RegistryResult:
        network = self._networks.get(network_id)
        if network is None:
            return rejected(NETWORK_NOT_FOUND, RegistryResult)
        if terminal_id in network.member_ids:
            network.member_ids.remove(terminal_id)
            self.graph.remove_edge(_n(network_id), _t(terminal_id))
            self._refresh_network(network)
        return RegistryResult(network=network)

    def networks_for_terminal(self, terminal_id: str) -> list[Network]:
        """Networks that list the terminal as a member."""
        node = _t(terminal_id)
        if node not in self.graph:
            return []
        return [self._networks[nid] for kind, nid in self.graph.neighbors(node) if kind == "network"]

    def members(self, network_id: str) -> list[Terminal]:
        network = self._networks[network_id]
        return [self._terminals[tid] for tid in network.member_ids]

    def refresh_network_compromise(self, terminal_id: str) -> list[Network]:
        """Recompute the compromised flag of every network holding the terminal.

        A network is compromised once all of its members are. Returns the
        networks whose flag changed.
        """
        return [n for n in self.networks_for_terminal(terminal_id) if self._refresh_network(n)]

    def _refresh_network(self, network: Network) -> bool:
        """Set the compromised flag from current membership; True if it changed."""
        members = self.members(network.id)
        now_compromised = bool(members) and all(t.compromised for t in members)
        if now_compromised == network.compromised:
            return False
        network.compromised = now_compromised
        log.debug("Network %s compromised=%s", network.id, now_compromised)
        return True

    @property
    def terminals(self) -> dict[str, Terminal]:
        """All terminals by id."""
        return self._terminals

    @property
    def networks(self) -> dict[str, Network]:
        return self._networks

    @property
    def terminal_count(self) -> int:
        return len(self._terminals)

    @property
    def network_count(self) -> int:
        return len(self._networks)
