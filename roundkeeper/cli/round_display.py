"""
Rich-based CLI rendering of a round.

Works from RoundSnapshot only, so the round itself never prints and the
display never reaches into round internals.
"""

from __future__ import annotations

from typing import Hashable, Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from roundkeeper.rounds.base import RoundSnapshot
from roundkeeper.rounds.pairing import Pairing

console = Console(legacy_windows=False)


def display_round(snapshot: RoundSnapshot, title: str = "Round", out: Console | None = None) -> None:
    """Print the pairings and entrant states of a round."""
    out = out or console
    out.print()
    out.rule(f"[bold]{title}[/]", style="bright_blue")
    out.print(pairings_table(snapshot))
    out.print(entrants_table(snapshot))


def display_pairing(pairing: Pairing, out: Console | None = None) -> None:
    out = out or console
    out.print(f"[bold bright_blue]▶[/] [bold]{pairing.first}[/]  vs  [bold]{pairing.second}[/]")


def display_winner(pairing: Pairing, winner: Hashable, out: Console | None = None) -> None:
    out = out or console
    out.print(
        f"  [green]✓[/] [bold]{winner}[/] advances  "
        f"[dim](eliminates {pairing.other(winner)})[/]"
    )


def display_tie(pairing: Pairing, out: Console | None = None) -> None:
    out = out or console
    out.print(f"  [yellow]½[/] Tie — [bold]{pairing.first}[/] and [bold]{pairing.second}[/] are both eliminated")


def display_round_complete(snapshot: RoundSnapshot, out: Console | None = None) -> None:
    out = out or console
    advanced = "  •  ".join(_sorted_names(snapshot.advanced)) or "[dim]nobody[/]"
    out.print()
    out.print(
        Panel(
            f"[bold yellow]★  {advanced}[/]\n\n"
            f"[dim]{len(snapshot.finished)} pairings  •  "
            f"{len(snapshot.eliminated)} eliminated[/]",
            title="[bold green] Round Complete [/]",
            border_style="yellow",
            expand=False,
        )
    )


# --------------------------------------------------------------------------- #
# Tables                                                                       #
# --------------------------------------------------------------------------- #

def pairings_table(snapshot: RoundSnapshot) -> Table:
    table = Table(title="Pairings", show_header=True, header_style="bold", border_style="dim")
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("First", min_width=16)
    table.add_column("", width=3, justify="center")
    table.add_column("Second", min_width=16)
    table.add_column("Status", width=10)

    for i, pairing in enumerate(snapshot.finished, 1):
        first, second = _result_markup(snapshot, pairing)
        table.add_row(str(i), first, "vs", second, "[dim]finished[/]")

    offset = len(snapshot.finished)
    active = sorted(snapshot.active, key=lambda p: (str(p.first), str(p.second)))
    for i, pairing in enumerate(active, offset + 1):
        table.add_row(str(i), f"[bold]{pairing.first}[/]", "vs", f"[bold]{pairing.second}[/]", "[cyan]active[/]")

    return table


def entrants_table(snapshot: RoundSnapshot) -> Table:
    table = Table(title="Entrants", show_header=True, header_style="bold", border_style="dim")
    table.add_column("Name", min_width=16)
    table.add_column("State", width=12)

    paired = {entrant for pairing in snapshot.active for entrant in pairing}
    for entrant in sorted(snapshot.entrants, key=str):
        table.add_row(str(entrant), _state_label(snapshot, entrant, paired))
    for entrant in _sorted_names(snapshot.floating_advanced | snapshot.floating_eliminated):
        table.add_row(f"[dim]{entrant}[/]", "[dim]removed[/]")

    return table


def _state_label(snapshot: RoundSnapshot, entrant: Hashable, paired: set) -> str:
    if entrant in snapshot.pending:
        return "pending"
    if entrant in paired:
        return "[cyan]paired[/]"
    if entrant in snapshot.advanced:
        return "[green]advanced[/]"
    return "[red]eliminated[/]"


def _result_markup(snapshot: RoundSnapshot, pairing: Pairing) -> tuple[str, str]:
    won = snapshot.advanced | snapshot.floating_advanced
    return tuple(
        f"[bold green]{entrant}[/]" if entrant in won else f"[dim]{entrant}[/]"
        for entrant in pairing
    )


def _sorted_names(entrants: Iterable[Hashable]) -> list[str]:
    return sorted(str(e) for e in entrants)
