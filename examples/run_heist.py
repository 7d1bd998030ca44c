#!/usr/bin/env python3
"""Seeded heist against the sample city.

Creates an engine, hands the runner a couple of programs, then tries to
crack each target: bypass its ICE one by one, hack it, steal what is
there and run an action. Prints a summary table via rich.

Usage:
    python examples/run_heist.py
    python examples/run_heist.py --seed 7 --intelligence 14 --skill 2
    python examples/run_heist.py --save results/heist.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rich.console import Console
from rich.table import Table

from icebreaker.actions.terminal_actions import TerminalAction
from icebreaker.config import Config
from icebreaker.engine import IntrusionEngine
from icebreaker.events import EventType, RecordingSink
from icebreaker.hacking.arsenal import ActorStats
from icebreaker.network.topology import sample_city

RUNNER = "runner"
DEFAULT_TARGETS = ["kiosk-01", "apt-01", "corp-ws-01", "hospital-01", "sec-hub-01"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Icebreaker: sample city heist")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--intelligence", type=int, default=12, help="Runner intelligence")
    parser.add_argument("--skill", type=int, default=1, help="Runner hacking skill rank")
    parser.add_argument("--targets", nargs="*", default=None, help="Terminal ids to hit")
    parser.add_argument("--save", type=str, default=None, help="Write a snapshot here")
    args = parser.parse_args()

    config = Config.from_defaults()
    if args.seed is not None:
        config.seed = args.seed

    sink = RecordingSink(config.event_log_size)
    engine = IntrusionEngine(config, sink=sink)
    sample_city(engine)
    engine.acquire_program("IceBreaker")
    engine.acquire_program("Crowbar", uses=3)

    stats = ActorStats(intelligence=args.intelligence, hacking_skill=args.skill)
    console = Console()
    table = Table(title="Heist Results")
    table.add_column("Terminal")
    table.add_column("Class")
    table.add_column("ICE left")
    table.add_column("Hack")
    table.add_column("Loot", justify="right")
    table.add_column("Action")

    for terminal_id in args.targets or DEFAULT_TARGETS:
        terminal = engine.get_terminal(terminal_id)
        if terminal is None:
            console.print(f"[yellow]Unknown terminal {terminal_id}, skipping[/yellow]")
            continue

        for ice in list(terminal.active_countermeasures):
            engine.bypass_countermeasure(terminal_id, ice, RUNNER, stats, program="IceBreaker")

        hack = engine.start_hack(terminal_id, RUNNER, stats, programs=["Crowbar"])
        loot = "-"
        action_note = "-"
        if hack.ok:
            theft = engine.steal_data(terminal_id, RUNNER, steal_all=True)
            loot = f"{theft.credits_stolen}cr / {theft.data_value} data"
            for action in engine.actions.available(terminal_id):
                if action in (TerminalAction.OVERLOAD_SYSTEM, TerminalAction.WIPE_ACCESS_LOG):
                    continue
                outcome = engine.execute_action(terminal_id, RUNNER, action)
                action_note = outcome.message if outcome.ok else outcome.reason
                break
        hack_note = (
            f"[green]in ({hack.chance}%)[/green]"
            if hack.ok
            else f"[red]{hack.reason} ({hack.chance}%)[/red]"
        )
        table.add_row(
            terminal_id,
            terminal.terminal_class.value,
            ", ".join(c.value for c in terminal.active_countermeasures) or "none",
            hack_note,
            loot,
            action_note,
        )

    console.print(table)
    console.print(f"\n[bold]Trace level:[/bold] {engine.trace_level}/100")
    console.print(f"[bold]Open alerts:[/bold] {len(engine.query_alerts(active_only=True))}")
    console.print(f"[bold]Events recorded:[/bold] {len(sink)}")
    if sink.events(EventType.TRACE_MAXED):
        console.print("[bold red]Trace maxed: the runner has been located.[/bold red]")

    if args.save:
        out_path = engine.save(args.save)
        console.print(f"\n[bold green]Snapshot saved to:[/bold green] {out_path}")


if __name__ == "__main__":
    main()
