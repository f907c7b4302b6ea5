"""
Round Keeper — simulation entry point.

Usage:
    python round_main.py [--config config.yaml]

Wires together:
    config → round → random pairings → random outcomes → CLI display

Plays out a single round: every pending entrant is paired, then each active
pairing is resolved in random order with a random winner (or a tie, with
simulation.tie_probability).  An odd entrant out stays pending.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

from roundkeeper.cli.round_display import (
    console,
    display_pairing,
    display_round,
    display_round_complete,
    display_tie,
    display_winner,
)
from roundkeeper.config import Config, load_config
from roundkeeper.rounds import NoEntrantsError, NoOpponentError, create_round
from roundkeeper.rounds.base import EliminationRound

logger = logging.getLogger("roundkeeper")


def simulate_round(round_: EliminationRound, config: Config, rng: random.Random) -> None:
    """Pair everyone who can be paired, then resolve every pairing."""
    while True:
        try:
            pairing = round_.next_pairing()
        except NoOpponentError:
            (odd,) = round_.get_pending_entrants()
            console.print(f"[dim]{odd} has no opponent and stays pending.[/]")
            break
        except NoEntrantsError:
            break
        display_pairing(pairing)

    display_round(round_.snapshot(), title="Pairings drawn")

    active = sorted(round_.get_active_pairings(), key=lambda p: (str(p.first), str(p.second)))
    rng.shuffle(active)
    for pairing in active:
        if rng.random() < config.simulation.tie_probability:
            round_.declare_tie(pairing)
            display_tie(pairing)
        else:
            winner = rng.choice((pairing.first, pairing.second))
            round_.declare_winner(winner, pairing)
            display_winner(pairing, winner)


def _main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate a single elimination round.")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"))
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError as exc:
        console.print(f"[red]Error:[/] {exc}")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    round_ = create_round("dynamic", config.simulation.entrants, config=config.round)
    logger.info("Round created with %d entrants", len(config.simulation.entrants))

    # Outcomes get their own RNG so the draw stays reproducible on its own.
    outcome_rng = random.Random(None if config.round.seed is None else config.round.seed + 1)
    simulate_round(round_, config, outcome_rng)

    snapshot = round_.snapshot()
    display_round(snapshot, title="Final state")
    if round_.is_finished():
        display_round_complete(snapshot)


def main() -> None:
    _main()


if __name__ == "__main__":
    main()
